"""Time-window filtering for journal records.

Every windowed computation (reports, weekly counters, visit summaries)
goes through these helpers. Records keep their input order.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, TypeVar

from medprep.domains.journal.domain_logic.journal_models import Region, Symptom

T = TypeVar("T")

EPOCH = datetime(1970, 1, 1)

TIMEFRAME_LABELS: dict[str, str] = {
    "2weeks": "Last 2 weeks",
    "1month": "Last month",
    "3months": "Last 3 months",
    "6months": "Last 6 months",
    "all": "All time",
}

_MONTH_WINDOWS = {"1month": 1, "3months": 3, "6months": 6}


class InvalidTimeframe(ValueError):
    """Raised for a timeframe tag outside TIMEFRAME_LABELS."""

    def __init__(self, timeframe: str) -> None:
        self.timeframe = timeframe
        valid = ", ".join(TIMEFRAME_LABELS)
        super().__init__(f"Invalid timeframe: {timeframe!r}. Valid: {valid}")


def _timestamp(record) -> datetime:
    return record.timestamp


def shift_months(moment: datetime, months: int) -> datetime:
    """Move ``moment`` back by whole calendar months.

    The day is clamped to the last day of the target month
    (31 March minus one month is 28/29 February).
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_cutoff(timeframe: str, now: datetime | None = None) -> datetime:
    """Map a timeframe tag to the earliest timestamp it includes."""
    now = now or datetime.now()
    if timeframe == "2weeks":
        return now - timedelta(days=14)
    if timeframe in _MONTH_WINDOWS:
        return shift_months(now, _MONTH_WINDOWS[timeframe])
    if timeframe == "all":
        return EPOCH
    raise InvalidTimeframe(timeframe)


def timeframe_label(timeframe: str) -> str:
    try:
        return TIMEFRAME_LABELS[timeframe]
    except KeyError:
        raise InvalidTimeframe(timeframe) from None


def filter_since(
    records: Iterable[T],
    cutoff: datetime,
    key: Callable[[T], datetime] = _timestamp,
) -> list[T]:
    """Records whose ``key`` is at or after ``cutoff``."""
    return [record for record in records if key(record) >= cutoff]


def filter_by_timeframe(
    records: Iterable[T],
    timeframe: str,
    now: datetime | None = None,
    key: Callable[[T], datetime] = _timestamp,
) -> list[T]:
    """Records inside the window named by ``timeframe``.

    Raises:
        InvalidTimeframe: If the tag is not recognized.
    """
    cutoff = resolve_cutoff(timeframe, now)
    if timeframe == "all":
        return list(records)
    return filter_since(records, cutoff, key)


def filter_by_date(
    records: Iterable[T],
    day: date,
    key: Callable[[T], datetime] = _timestamp,
) -> list[T]:
    """Records that fall on the same calendar day as ``day``."""
    return [record for record in records if key(record).date() == day]


def filter_by_region(symptoms: Iterable[Symptom], region: Region) -> list[Symptom]:
    return [s for s in symptoms if s.region is region]
