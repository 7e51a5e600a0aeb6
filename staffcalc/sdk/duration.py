"""Contract duration resolution.

Turns an assignment's start/end dates into the whole number of contract
weeks used for contract totals. Missing or unparsable dates fall back to the
standard 13-week assignment; that fallback is a defined default, not an error.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional, Union


# Standard travel assignment length, used whenever dates are missing/invalid
DEFAULT_CONTRACT_WEEKS = 13

SECONDS_PER_DAY = 24 * 60 * 60

DateLike = Union[date, datetime, str, None]


@dataclass(frozen=True)
class ContractDuration:
    """Whole days and whole weeks between two dates (both rounded up)."""

    days: int
    weeks: int


def parse_date(value: Any) -> Optional[Union[date, datetime]]:
    """Parse a calendar date from a date, datetime, or ISO-8601 string.

    Returns None for anything that is absent or not a valid date, so callers
    can apply the duration fallback instead of handling exceptions.
    """
    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    # Date-time strings, including the trailing Z that JSON clients send
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _as_naive_datetime(value: Union[date, datetime]) -> datetime:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    return datetime(value.year, value.month, value.day)


def contract_duration(start_date: DateLike = None, end_date: DateLike = None) -> Optional[ContractDuration]:
    """Days and weeks spanned by an assignment.

    Uses the absolute difference, so a reversed pair yields the same duration
    as the ordered one. Identical dates give a zero-length contract.

    Returns:
        ContractDuration, or None when either date is missing or unparsable
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start is None or end is None:
        return None

    delta = _as_naive_datetime(end) - _as_naive_datetime(start)
    days = math.ceil(abs(delta.total_seconds()) / SECONDS_PER_DAY)
    return ContractDuration(days=days, weeks=math.ceil(days / 7))


def resolve_contract_weeks(start_date: DateLike = None, end_date: DateLike = None) -> int:
    """Whole contract weeks between two dates, defaulting to 13.

    Examples:
        resolve_contract_weeks("2023-06-15", "2023-09-10")  # 87 days -> 13
        resolve_contract_weeks("2023-01-01", "2023-01-01")  # 0
        resolve_contract_weeks(None, "2023-01-01")          # 13 (fallback)
    """
    duration = contract_duration(start_date, end_date)
    if duration is None:
        return DEFAULT_CONTRACT_WEEKS
    return duration.weeks
