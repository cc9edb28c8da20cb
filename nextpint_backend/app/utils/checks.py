# nextpint_backend/app/utils/checks.py
from __future__ import annotations

from typing import Any

def is_number(x: Any) -> bool:
    # bool is an int subclass; a rating of True is not a rating
    return isinstance(x, (int, float)) and not isinstance(x, bool)

def is_blank(x: Any) -> bool:
    return not isinstance(x, str) or not x.strip()

def in_range(x: Any, lo: float, hi: float) -> bool:
    return is_number(x) and lo <= x <= hi

def join_errors(errors) -> str:
    return ", ".join(errors)
