"""
Strict numeric parsing for query-string values.

Only plain ASCII decimal forms are accepted. `int()`/`float()` alone would
also take "1_000", "nan", "inf" and non-ASCII digits such as "٣".
"""

from __future__ import annotations

import math
import re

# Postgres INTEGER / BIGINT bounds; asyncpg refuses to encode anything wider.
INT4_MIN = -(2**31)
INT4_MAX = 2**31 - 1
INT8_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_int(raw: object) -> int | None:
    text = str(raw if raw is not None else "").strip()
    if not _INT_RE.fullmatch(text):
        return None
    return int(text, 10)


def parse_float(raw: object) -> float | None:
    text = str(raw if raw is not None else "").strip()
    if not _FLOAT_RE.fullmatch(text):
        return None
    value = float(text)
    # "1e999" matches the pattern but overflows to inf.
    return value if math.isfinite(value) else None
