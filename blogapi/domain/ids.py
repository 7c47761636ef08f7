"""Identifier format shared by users and posts."""
from __future__ import annotations

import itertools
import re
import secrets
import threading
import time

ID_PATTERN = re.compile(r"[0-9a-f]{24}")

# 4-byte seconds, 5-byte per-process random value, 3-byte counter.
_PROCESS_PART = secrets.token_hex(5)
_counter = itertools.count(secrets.randbelow(0x800000))
_lock = threading.Lock()


def new_id() -> str:
    """Return a new id; ids from one process increase with creation order."""
    with _lock:
        count = next(_counter) % 0x1000000
        seconds = int(time.time()) & 0xFFFFFFFF
    return f"{seconds:08x}{_PROCESS_PART}{count:06x}"


def is_valid_id(value: str | None) -> bool:
    """Return True when value is 24 lowercase hex characters."""
    if not value:
        return False
    return bool(ID_PATTERN.fullmatch(value))
