"""Dashboard counters and photo storage quota."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from medprep.domains.journal.domain_logic.journal_models import (
    PhotoQuota,
    PhotoQuotaState,
    SleepEntry,
    SleepStats,
    Symptom,
    SymptomStats,
)
from medprep.domains.journal.domain_logic.temporal import filter_since

WEEK = timedelta(days=7)
SLEEP_ROLLING_WINDOW = 7

# Fixed system-wide photo quota
PHOTO_LIMIT = 20
WARNING_THRESHOLD = 15
MAX_PHOTO_BYTES = 1024 * 1024


def round_one_decimal(value: Decimal) -> float:
    """Round half-up to one decimal place."""
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def summarize_symptoms(
    symptoms: Sequence[Symptom], now: datetime | None = None
) -> SymptomStats:
    now = now or datetime.now()
    return SymptomStats(
        total_count=len(symptoms),
        this_week_count=len(filter_since(symptoms, now - WEEK)),
    )


def summarize_sleep(sleep_entries: Sequence[SleepEntry]) -> SleepStats:
    """Averages over the first seven entries in store order (newest first).

    Durations are averaged as stored, including zero or negative ones.
    """
    recent = list(sleep_entries[:SLEEP_ROLLING_WINDOW])
    if not recent:
        return SleepStats(entries_considered=0, avg_duration=None, avg_quality=None)

    n = len(recent)
    total_hours = sum(Decimal(str(e.duration)) for e in recent)
    total_quality = sum(e.quality for e in recent)
    return SleepStats(
        entries_considered=n,
        avg_duration=round_one_decimal(total_hours / n),
        avg_quality=round_one_decimal(Decimal(total_quality) / n),
    )


def count_photos(symptoms: Iterable[Symptom]) -> int:
    return sum(1 for s in symptoms if s.has_photo)


def photo_quota(used: int) -> PhotoQuota:
    """Quota state for ``used`` stored photos."""
    if used >= PHOTO_LIMIT:
        state = PhotoQuotaState.BLOCKED
    elif used >= WARNING_THRESHOLD:
        state = PhotoQuotaState.WARNING
    else:
        state = PhotoQuotaState.OK
    return PhotoQuota(state=state, used=used, limit=PHOTO_LIMIT)
