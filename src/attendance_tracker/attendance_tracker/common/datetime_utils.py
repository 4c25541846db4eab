from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

from ..core.exceptions import ValidationError


def parse_timestamp(value: Optional[str], field_name: str = "date") -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the client into naive local time.

    Aware values are converted to the server's local zone first.
    """

    if value is None or not str(value).strip():
        return None
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError("Invalid date", errors={field_name: "must be an ISO-8601 timestamp"})
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(reference: Union[date, datetime]) -> tuple[datetime, datetime]:
    """Inclusive [start, end] of the local day containing ``reference``."""

    day = reference.date() if isinstance(reference, datetime) else reference
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time.max)
    return start, end


def last_n_days(today: date, n: int) -> list[date]:
    """The ``n`` days ending with ``today``, oldest first."""
    return [today - timedelta(days=offset) for offset in range(n - 1, -1, -1)]


def percentage(part: int, total: int) -> int:
    """Whole-number percentage rounded half up, 0 when there is nothing to count."""
    if total <= 0:
        return 0
    return int(math.floor(part * 100 / total + 0.5))
