"""Report aggregation: time-windowed summaries for review and export."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Sequence

from medprep.domains.journal.domain_logic.correlation import (
    MIN_SLEEP_ENTRIES,
    correlate_sleep,
)
from medprep.domains.journal.domain_logic.frequency import arg_max, count_by, count_by_hour
from medprep.domains.journal.domain_logic.journal_models import (
    ImpactCategory,
    ImpactLevel,
    ReportData,
    SeverityStats,
    SleepEntry,
    Symptom,
    VisitSummary,
)
from medprep.domains.journal.domain_logic.stats import round_one_decimal
from medprep.domains.journal.domain_logic.temporal import (
    filter_by_timeframe,
    filter_since,
    timeframe_label,
)

logger = logging.getLogger(__name__)

VISIT_WINDOW_DAYS = 14
SIGNIFICANT_IMPACT_MIN = 2


def summarize_severity(symptoms: Iterable[Symptom]) -> SeverityStats:
    """Average, min and max severity in one pass.

    An empty input yields zeros flagged as degenerate instead of infinities.
    """
    count = total = 0
    lowest: int | None = None
    highest: int | None = None
    for symptom in symptoms:
        count += 1
        total += symptom.severity
        if lowest is None or symptom.severity < lowest:
            lowest = symptom.severity
        if highest is None or symptom.severity > highest:
            highest = symptom.severity

    if count == 0:
        return SeverityStats(average=0.0, minimum=0, maximum=0, degenerate=True)

    return SeverityStats(
        average=round_one_decimal(Decimal(total) / Decimal(count)),
        minimum=lowest,
        maximum=highest,
    )


def count_impacts(symptoms: Iterable[Symptom]) -> dict[str, int]:
    """Per category, how many symptoms report an impact other than 'none'."""
    counts = {category.value: 0 for category in ImpactCategory}
    for symptom in symptoms:
        if symptom.life_impact is None:
            continue
        for category, level in symptom.life_impact.items():
            if level is not ImpactLevel.NONE:
                counts[category.value] += 1
    return counts


def build_report(
    symptoms: Sequence[Symptom],
    sleep_entries: Sequence[SleepEntry],
    timeframe: str,
    now: datetime | None = None,
) -> ReportData:
    """Summarize the symptoms inside ``timeframe``.

    The sleep correlation, when attached, is computed over the full symptom
    history rather than the windowed subset.

    Raises:
        InvalidTimeframe: If the timeframe tag is not recognized.
    """
    now = now or datetime.now()
    relevant = filter_by_timeframe(symptoms, timeframe, now)

    severity = summarize_severity(relevant)
    region_stats = {region.value: n for region, n in count_by(relevant, lambda s: s.region).items()}
    type_stats = count_by(relevant, lambda s: s.type)

    sleep_correlation = None
    if len(sleep_entries) >= MIN_SLEEP_ENTRIES:
        sleep_correlation = correlate_sleep(symptoms, sleep_entries)

    logger.info(
        "Built %s report: %d of %d symptoms in window", timeframe, len(relevant), len(symptoms)
    )
    return ReportData(
        timeframe=timeframe,
        timeframe_label=timeframe_label(timeframe),
        generated_at=now,
        symptoms=tuple(relevant),
        total_count=len(relevant),
        avg_severity=severity.average,
        min_severity=severity.minimum,
        max_severity=severity.maximum,
        region_stats=region_stats,
        type_stats=type_stats,
        impact_stats=count_impacts(relevant),
        sleep_correlation=sleep_correlation,
    )


def build_visit_summary(
    symptoms: Sequence[Symptom],
    now: datetime | None = None,
    *,
    window_days: int = VISIT_WINDOW_DAYS,
) -> VisitSummary:
    """Digest of the last ``window_days`` for an upcoming doctor visit."""
    now = now or datetime.now()
    recent = filter_since(symptoms, now - timedelta(days=window_days))

    if not recent:
        return VisitSummary(window_days=window_days, total_count=0, avg_severity=0.0)

    region_counts = count_by(recent, lambda s: s.region)
    top_region = arg_max(region_counts)
    significant = {
        category: n
        for category, n in count_impacts(recent).items()
        if n >= SIGNIFICANT_IMPACT_MIN
    }

    return VisitSummary(
        window_days=window_days,
        total_count=len(recent),
        avg_severity=summarize_severity(recent).average,
        most_common_region=top_region,
        most_common_region_count=region_counts[top_region],
        most_common_type=arg_max(count_by(recent, lambda s: s.type)),
        peak_hour=arg_max(count_by_hour(recent)),
        significant_impacts=significant,
    )
