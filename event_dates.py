from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from zoneinfo import ZoneInfo

LOCAL_TZ = ZoneInfo("Europe/London")
EVENT_PASSED_TEXT = "Event has now passed."


def now_local() -> datetime:
    return datetime.now(LOCAL_TZ)


def parse_instant(value: Any) -> Optional[datetime]:
    """ISO 8601 / YYYY-MM-DD -> aware datetime (naive values are London time)."""
    if not isinstance(value, str):
        return None
    s = value.strip()
    if not s:
        return None
    try:
        if re.fullmatch(r"\d{4}-\d{2}-\d{2}", s):
            dt = datetime.strptime(s, "%Y-%m-%d")
        else:
            dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=LOCAL_TZ)
    return dt


def _sort_key(value: Any) -> Tuple[int, float, str]:
    dt = parse_instant(value)
    if dt is None:
        return (1, 0.0, str(value))
    return (0, dt.timestamp(), str(value))


def sort_dates(dates: Sequence[Any]) -> List[Any]:
    """Chronological copy of dates; anything unparseable goes last."""
    return sorted(dates, key=_sort_key)


def first_date(dates: Sequence[Any]) -> Optional[Any]:
    ordered = sort_dates(dates)
    if not ordered:
        return None
    return ordered[0]


def next_date(dates: Sequence[Any], now: Optional[datetime] = None) -> Any:
    """
    First date at or after now, in chronological order.
    Falls back to EVENT_PASSED_TEXT when every date is in the past.
    """
    now = now or now_local()
    for d in sort_dates(dates):
        dt = parse_instant(d)
        if dt is not None and dt >= now:
            return d
    return EVENT_PASSED_TEXT


def last_date(dates: Sequence[Any]) -> Optional[Any]:
    ordered = sort_dates(dates)
    if not ordered:
        return None
    return ordered[-1]


def is_on_sale(event: Dict[str, Any], now: Optional[datetime] = None) -> bool:
    start = parse_instant(event.get("startSelling"))
    stop = parse_instant(event.get("stopSelling"))
    if start is None or stop is None:
        return False
    now = now or now_local()
    return start <= now <= stop
