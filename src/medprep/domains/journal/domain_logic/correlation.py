"""Sleep/symptom co-occurrence analysis.

Each symptom is paired with the first sleep entry (in the order given)
whose bedtime lies within 24 hours of the symptom onset. The paired counts
feed a heuristic association insight; nothing here implies causation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence

from medprep.domains.journal.domain_logic.journal_models import (
    Confidence,
    Insight,
    InsightCategory,
    SleepEntry,
    Symptom,
)

logger = logging.getLogger(__name__)

MATCH_WINDOW = timedelta(hours=24)
MIN_SLEEP_ENTRIES = 3
MIN_SYMPTOMS = 3

POOR_SLEEP_MAX_QUALITY = 2
GOOD_SLEEP_MIN_QUALITY = 4
HIGH_SEVERITY_MIN = 6
LOW_SEVERITY_MAX = 4

MIN_MATCHED_PAIRS = 3
MIN_SUPPORTING_PAIRS = 2
HIGH_CONFIDENCE_PAIRS = 5


@dataclass(frozen=True)
class SleepSymptomCounts:
    total_matched: int = 0
    poor_sleep_severe: int = 0
    good_sleep_mild: int = 0


def match_sleep_entry(
    symptom: Symptom, sleep_entries: Sequence[SleepEntry]
) -> SleepEntry | None:
    """First sleep entry whose bedtime is within 24h of the symptom onset."""
    for entry in sleep_entries:
        if abs(symptom.timestamp - entry.bedtime) <= MATCH_WINDOW:
            return entry
    return None


def count_sleep_symptom_pairs(
    symptoms: Sequence[Symptom], sleep_entries: Sequence[SleepEntry]
) -> SleepSymptomCounts:
    total = poor = good = 0
    for symptom in symptoms:
        entry = match_sleep_entry(symptom, sleep_entries)
        if entry is None:
            continue
        total += 1
        if entry.quality <= POOR_SLEEP_MAX_QUALITY and symptom.severity >= HIGH_SEVERITY_MIN:
            poor += 1
        elif entry.quality >= GOOD_SLEEP_MIN_QUALITY and symptom.severity <= LOW_SEVERITY_MAX:
            good += 1
    return SleepSymptomCounts(total_matched=total, poor_sleep_severe=poor, good_sleep_mild=good)


def correlate_sleep(
    symptoms: Sequence[Symptom], sleep_entries: Sequence[SleepEntry]
) -> Insight | None:
    """Sleep-symptom association insight, or None when data is thin or no
    association shows up."""
    if len(sleep_entries) < MIN_SLEEP_ENTRIES or len(symptoms) < MIN_SYMPTOMS:
        return None

    counts = count_sleep_symptom_pairs(symptoms, sleep_entries)
    logger.debug(
        "Sleep pairing: matched=%d poor/severe=%d good/mild=%d",
        counts.total_matched,
        counts.poor_sleep_severe,
        counts.good_sleep_mild,
    )

    if counts.total_matched < MIN_MATCHED_PAIRS:
        return None
    if (
        counts.poor_sleep_severe < MIN_SUPPORTING_PAIRS
        and counts.good_sleep_mild < MIN_SUPPORTING_PAIRS
    ):
        return None

    confidence = (
        Confidence.HIGH if counts.total_matched >= HIGH_CONFIDENCE_PAIRS else Confidence.MEDIUM
    )
    return Insight(
        title="Sleep-Symptom Correlation",
        description=(
            f"In {counts.total_matched} symptoms logged within a day of a sleep "
            "session, sleep quality and symptom severity tended to move together. "
            "This is an association, not a cause; consider discussing sleep "
            "hygiene with your healthcare provider."
        ),
        confidence=confidence,
        category=InsightCategory.SLEEP,
    )
