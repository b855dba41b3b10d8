# catalog_api/crud/base.py
from __future__ import annotations

import re
from typing import Any, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from catalog_api.core.errors import DuplicateKeyError
from catalog_api.models.base import DocumentMixin
from catalog_api.services.listing import ListingQuery

M = TypeVar("M", bound=DocumentMixin)

# PG: DETAIL:  Key (name)=(Electronics) already exists.
_PG_DETAIL_RE = re.compile(r"Key \((?P<col>[^)]+)\)=\((?P<val>.*)\) already exists")
# SQLite: UNIQUE constraint failed: categories.name
_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed: \w+\.(?P<col>\w+)")


def is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23505" or getattr(orig, "sqlstate", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(orig) or "already exists" in str(orig)


def unique_violation_column(exc: IntegrityError) -> Tuple[Optional[str], Optional[str]]:
    """Extrage (coloană, valoare) dintr-o încălcare de unicitate; valoarea poate lipsi (SQLite)."""
    msg = str(getattr(exc, "orig", exc))
    m = _PG_DETAIL_RE.search(msg)
    if m:
        return m.group("col"), m.group("val")
    m = _SQLITE_UNIQUE_RE.search(msg)
    if m:
        return m.group("col"), None
    return None, None


def commit(db: Session, obj: DocumentMixin) -> None:
    """
    Commit + refresh; încălcările de index unic devin DuplicateKeyError(câmp pe fir, valoare).
    Alte IntegrityError (CHECK/NOT NULL) se propagă neschimbate către error handler.
    """
    try:
        db.commit()
    except IntegrityError as e:
        column, value = unique_violation_column(e) if is_unique_violation(e) else (None, None)
        if column is not None and value is None:
            # rollback expiră obiectul; după el getattr ar reîncărca valoarea veche din DB
            value = getattr(obj, column, None)
        db.rollback()
        if column is None:
            raise
        raise DuplicateKeyError(type(obj).wire_name(column), value) from e
    db.refresh(obj)


def fetch_page(db: Session, model: Type[M], query: ListingQuery, *options: Any) -> Tuple[List[M], int]:
    """Execută un ListingQuery: (items pentru pagina cerută, total potriviri)."""
    ids_q = select(model.id).where(*query.conditions)
    total = int(db.execute(select(func.count()).select_from(ids_q.subquery())).scalar_one() or 0)

    stmt = (
        select(model)
        .where(*query.conditions)
        .order_by(*query.order_by)
        .offset(query.skip)
        .limit(query.limit)
    )
    if options:
        stmt = stmt.options(*options)
    items = list(db.execute(stmt).scalars().all())
    return items, total
