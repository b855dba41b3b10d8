# tests/test_product_code.py
from __future__ import annotations

import hashlib
import re

import pytest

from catalog_api.services.product_code import (
    IncreasingRun,
    fingerprint,
    generate_product_code,
    longest_increasing_run,
)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("aabcabcd", IncreasingRun("abcd", 4, 7)),
        ("abc", IncreasingRun("abc", 0, 2)),
        # egalitate: se concatenează toate secvențele maxime, în ordine
        ("abab", IncreasingRun("abab", 0, 3)),
        ("cba", IncreasingRun("cba", 0, 2)),
        ("x", IncreasingRun("x", 0, 0)),
        ("", IncreasingRun("", 0, 0)),
        # lower-case înainte de scanare
        ("ABcd", IncreasingRun("abcd", 0, 3)),
        # caractere egale rup secvența (strict crescător)
        ("aabb", IncreasingRun("ab", 1, 2)),
    ],
)
def test_longest_increasing_run(name, expected):
    assert longest_increasing_run(name) == expected


def test_fingerprint_is_md5_prefix():
    assert fingerprint("Desk Lamp") == hashlib.md5(b"Desk Lamp").hexdigest()[:7]
    # pe numele original, nu pe varianta lower-case
    assert fingerprint("desk lamp") != fingerprint("Desk Lamp")


def test_generate_product_code_layout():
    code = generate_product_code("aabcabcd", now_ms=1700000000123)
    assert code == f"{fingerprint('aabcabcd')}1700000000123-4abcd7"


def test_generate_product_code_empty_name():
    assert generate_product_code("", now_ms=1).endswith("-00")


def test_generate_product_code_deterministic_suffix():
    a = generate_product_code("Wireless Mouse", now_ms=1000)
    b = generate_product_code("Wireless Mouse", now_ms=2000)
    assert a != b
    assert a.split("-", 1)[1] == b.split("-", 1)[1]
    assert a[:7] == b[:7]


def test_generate_product_code_uses_clock():
    code = generate_product_code("Lamp")
    assert re.fullmatch(r"[0-9a-f]{7}\d{13}-.+", code), code
