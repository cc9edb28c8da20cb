# nextpint_backend/app/utils/timefmt.py
from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

# What it does:
# Current UTC time as an ISO-8601 string (the storage format for every timestamp)
def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

def parse_dt(value: Any) -> Optional[datetime]:
    """
    Lenient timestamp parser. Accepts datetime/date, ISO strings (with or
    without a trailing "Z") and epoch seconds. Naive values are taken as UTC.
    Returns None for anything unparseable.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, bool):
        return None
    elif isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(float(value), tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    elif isinstance(value, str):
        s = value.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(s)
        except ValueError:
            return None
    else:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt

def to_iso(value: Any) -> Optional[str]:
    dt = parse_dt(value)
    return dt.isoformat() if dt else None

def round_half_up(x: float, ndigits: int = 0) -> float:
    # .5 always goes up; the builtin round() is banker's rounding
    q = Decimal(1).scaleb(-ndigits)
    out = Decimal(str(x)).quantize(q, rounding=ROUND_HALF_UP)
    return float(out) if ndigits else float(int(out))
