# catalog_api/core/ids.py
"""
Identificatori de tip object-id: 12 octeți afișați ca 24 caractere hex.

Layout (compatibil cu ObjectId):
  - 4 octeți: secunde Unix (big-endian)
  - 5 octeți: valoare aleatoare per proces
  - 3 octeți: contor incremental (pornește de la o valoare aleatoare)
"""
from __future__ import annotations

import os
import re
import threading
import time
from typing import Any

OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")

_lock = threading.Lock()
_pid = os.getpid()
_process_random = os.urandom(5)
_counter = int.from_bytes(os.urandom(3), "big")


def is_valid_object_id(value: Any) -> bool:
    """True dacă `value` este un string de 24 caractere hex."""
    return isinstance(value, str) and OBJECT_ID_RE.fullmatch(value) is not None


def new_object_id(now: float | None = None) -> str:
    global _counter, _pid, _process_random
    ts = int(now if now is not None else time.time()) & 0xFFFFFFFF
    with _lock:
        # după fork, randomul per proces trebuie regenerat
        if os.getpid() != _pid:
            _pid = os.getpid()
            _process_random = os.urandom(5)
        _counter = (_counter + 1) & 0xFFFFFF
        counter = _counter
    raw = ts.to_bytes(4, "big") + _process_random + counter.to_bytes(3, "big")
    return raw.hex()
