"""Journal analysis over stored entries.

Takes a snapshot from the repository and hands it to the pure analysis
functions, so every figure in one response comes from the same data.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from medprep.core.storage.repository import JournalRepository
from medprep.domains.journal.domain_logic.journal_models import (
    Insight,
    InsufficientData,
    PhotoQuota,
    Region,
    ReportData,
    Symptom,
    VisitSummary,
)
from medprep.domains.journal.domain_logic.patterns import detect_patterns
from medprep.domains.journal.domain_logic.reports import build_report, build_visit_summary
from medprep.domains.journal.domain_logic.stats import (
    count_photos,
    photo_quota,
    summarize_sleep,
    summarize_symptoms,
)
from medprep.domains.journal.domain_logic.temporal import filter_by_date, filter_by_region

logger = logging.getLogger(__name__)


class JournalAnalyzer:
    """Patterns, statistics and reports from the stored journal.

    Usage::

        analyzer = JournalAnalyzer(repository)
        insights = analyzer.patterns()
        report = analyzer.report("3months")
    """

    def __init__(self, repository: JournalRepository) -> None:
        self._repo = repository

    def patterns(self) -> list[Insight] | InsufficientData:
        snapshot = self._repo.snapshot()
        result = detect_patterns(snapshot.symptoms, snapshot.sleep_entries)
        if isinstance(result, InsufficientData):
            logger.info("Pattern detection skipped: %d symptoms logged", result.available)
        else:
            logger.info("Detected %d insights", len(result))
        return result

    def stats(self, now: datetime | None = None) -> dict[str, Any]:
        """Dashboard counts: symptoms, this week's symptoms, sleep averages, photos."""
        snapshot = self._repo.snapshot()
        symptom_stats = summarize_symptoms(snapshot.symptoms, now)
        sleep_stats = summarize_sleep(snapshot.sleep_entries)
        return {
            "total_symptoms": symptom_stats.total_count,
            "this_week": symptom_stats.this_week_count,
            "appointments": len(snapshot.appointments),
            "sleep_entries": len(snapshot.sleep_entries),
            "avg_sleep_duration": sleep_stats.avg_duration,
            "avg_sleep_quality": sleep_stats.avg_quality,
            "sleep_entries_averaged": sleep_stats.entries_considered,
            "photo_quota": photo_quota(count_photos(snapshot.symptoms)).to_dict(),
        }

    def report(self, timeframe: str, now: datetime | None = None) -> ReportData:
        """Raises ``InvalidTimeframe`` for an unknown timeframe tag."""
        snapshot = self._repo.snapshot()
        return build_report(snapshot.symptoms, snapshot.sleep_entries, timeframe, now)

    def visit_summary(self, now: datetime | None = None) -> VisitSummary:
        return build_visit_summary(self._repo.snapshot().symptoms, now)

    def photo_quota(self) -> PhotoQuota:
        return photo_quota(self._repo.count_photos())

    def history(
        self,
        *,
        region: Region | None = None,
        on_date: date | None = None,
    ) -> list[Symptom]:
        """Symptoms newest first, optionally narrowed by region and calendar day."""
        symptoms = list(self._repo.snapshot().symptoms)
        if region is not None:
            symptoms = filter_by_region(symptoms, region)
        if on_date is not None:
            symptoms = filter_by_date(symptoms, on_date)
        return symptoms
