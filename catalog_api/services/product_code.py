# catalog_api/services/product_code.py
"""
Cod de produs: `{fingerprint}{unixMillis}-{start}{run}{end}`.

- fingerprint: primele 7 caractere hex din md5(nume original) – cod de afișare, nu token de securitate
- run: cea mai lungă secvență contiguă strict crescătoare din numele lower-case; la egalitate
  se concatenează toate secvențele de lungime maximă, în ordinea apariției
- start/end: indexul de început al primei secvențe și indexul de final al ultimei

Unicitatea reală e garantată de indexul unic pe `product_code`.
"""
from __future__ import annotations

import hashlib
import time
from typing import List, NamedTuple, Optional, Tuple


class IncreasingRun(NamedTuple):
    substring: str
    start_index: int
    end_index: int


def _runs(text: str) -> List[Tuple[int, int]]:
    """Secvențele maximale strict crescătoare, ca perechi (start, end) inclusive."""
    runs: List[Tuple[int, int]] = []
    start = 0
    for i in range(1, len(text) + 1):
        if i == len(text) or text[i] <= text[i - 1]:
            runs.append((start, i - 1))
            start = i
    return runs


def longest_increasing_run(name: str) -> IncreasingRun:
    lowered = name.lower()
    runs = _runs(lowered)
    if not runs:
        return IncreasingRun("", 0, 0)

    longest = max(end - start + 1 for start, end in runs)
    ties = [(s, e) for s, e in runs if e - s + 1 == longest]
    return IncreasingRun(
        substring="".join(lowered[s:e + 1] for s, e in ties),
        start_index=ties[0][0],
        end_index=ties[-1][1],
    )


def fingerprint(name: str) -> str:
    return hashlib.md5(name.encode("utf-8"), usedforsecurity=False).hexdigest()[:7]


def generate_product_code(name: str, now_ms: Optional[int] = None) -> str:
    run = longest_increasing_run(name)
    millis = now_ms if now_ms is not None else int(time.time() * 1000)
    return f"{fingerprint(name)}{millis}-{run.start_index}{run.substring}{run.end_index}"
