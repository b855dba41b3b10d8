# tests/test_listing.py
from __future__ import annotations

import pytest

from catalog_api.services.listing import (
    DEFAULT_LIMIT,
    ListParams,
    build_category_query,
    build_product_query,
    paginate,
)


def test_product_query_defaults():
    q = build_product_query(ListParams())
    assert (q.page, q.limit, q.skip) == (1, DEFAULT_LIMIT, 0)
    assert (q.sort_by, q.sort_order) == ("createdAt", "desc")
    assert q.conditions == []
    # coloana de sortare + tiebreaker pe id
    assert len(q.order_by) == 2


def test_product_query_window_and_filters():
    q = build_product_query(
        ListParams(page=3, limit=5, search="lamp", category="ABCDEF0123456789ABCDEF01", status="In Stock",
                   sort_by="price", sort_order="asc")
    )
    assert q.skip == 10
    assert (q.sort_by, q.sort_order) == ("price", "asc")
    assert len(q.conditions) == 3
    # id-ul categoriei e comparat lower-case
    compiled = q.conditions[1].compile(compile_kwargs={"literal_binds": True})
    assert "abcdef0123456789abcdef01" in str(compiled)


def test_search_is_single_or_condition():
    q = build_product_query(ListParams(search="x"))
    assert len(q.conditions) == 1
    sql = str(q.conditions[0].compile()).lower()
    assert " or " in sql and "lower(products.name)" in sql and "lower(products.description)" in sql


def test_category_query_ignores_product_filters():
    q = build_category_query(ListParams(search="a", status="In Stock", sort_by="price"))
    assert len(q.conditions) == 1
    assert q.sort_by == "createdAt"


@pytest.mark.parametrize(
    "total,page,limit,pages,has_next,has_prev",
    [
        (0, 1, 10, 0, False, False),
        (10, 1, 10, 1, False, False),
        (11, 1, 10, 2, True, False),
        (25, 2, 10, 3, True, True),
        (25, 3, 10, 3, False, True),
        (5, 9, 2, 3, False, True),
    ],
)
def test_paginate(total, page, limit, pages, has_next, has_prev):
    meta = paginate(total, page, limit)
    assert meta.total_pages == pages
    assert meta.total_items == total
    assert meta.current_page == page
    assert meta.limit == limit
    assert meta.has_next_page is has_next
    assert meta.has_prev_page is has_prev
