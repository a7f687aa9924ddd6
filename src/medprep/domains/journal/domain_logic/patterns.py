"""Pattern detection over a symptom history.

Insights are evaluated in a fixed order (most affected region, life-impact
categories, sleep correlation) and the list is cut to the first four.
Truncation never reorders by confidence.
"""

from __future__ import annotations

import logging
from typing import Sequence

from medprep.domains.journal.domain_logic.correlation import correlate_sleep
from medprep.domains.journal.domain_logic.frequency import (
    arg_max,
    count_by,
    count_impact_levels,
)
from medprep.domains.journal.domain_logic.journal_models import (
    Confidence,
    ImpactCategory,
    Insight,
    InsightCategory,
    InsufficientData,
    SleepEntry,
    Symptom,
)

logger = logging.getLogger(__name__)

MIN_SYMPTOMS = 3
MAX_INSIGHTS = 4

# Most affected region
REGION_MIN_COUNT = 2
REGION_HIGH_COUNT = 3

# Life impact (per category)
IMPACT_MIN_RATED = 3
IMPACT_MIN_SIGNIFICANT = 2
IMPACT_HIGH_SIGNIFICANT = 3


def most_affected_region(symptoms: Sequence[Symptom]) -> Insight | None:
    counts = count_by(symptoms, lambda s: s.region)
    region = arg_max(counts)
    if region is None or counts[region] < REGION_MIN_COUNT:
        return None

    count = counts[region]
    return Insight(
        title="Most Affected Area",
        description=(
            f"Your {region.plain} has been affected {count} times. "
            "Consider discussing this pattern with your healthcare provider."
        ),
        confidence=Confidence.HIGH if count >= REGION_HIGH_COUNT else Confidence.MEDIUM,
        category=InsightCategory.REGION,
    )


def life_impact_patterns(symptoms: Sequence[Symptom]) -> list[Insight]:
    """One insight per category with repeated moderate/severe disruption."""
    insights: list[Insight] = []
    for category in ImpactCategory:
        levels = count_impact_levels(symptoms, category)
        significant = sum(n for level, n in levels.items() if level.is_significant)
        total = sum(levels.values())

        if total < IMPACT_MIN_RATED or significant < IMPACT_MIN_SIGNIFICANT:
            continue

        insights.append(Insight(
            title=f"{category.label} Impact Pattern",
            description=(
                f"Your symptoms significantly impact your {category.value} in "
                f"{significant} out of {total} recorded instances. This functional "
                "impact is important to discuss with your doctor."
            ),
            confidence=(
                Confidence.HIGH if significant >= IMPACT_HIGH_SIGNIFICANT else Confidence.MEDIUM
            ),
            category=InsightCategory.LIFE_IMPACT,
        ))
    return insights


def detect_patterns(
    symptoms: Sequence[Symptom],
    sleep_entries: Sequence[SleepEntry],
) -> list[Insight] | InsufficientData:
    """Ranked, capped list of insights for the given snapshot.

    Returns:
        ``InsufficientData`` when fewer than 3 symptoms are logged, otherwise
        at most 4 insights (possibly none).
    """
    if len(symptoms) < MIN_SYMPTOMS:
        return InsufficientData(required=MIN_SYMPTOMS, available=len(symptoms))

    insights: list[Insight] = []

    region_insight = most_affected_region(symptoms)
    if region_insight is not None:
        insights.append(region_insight)

    insights.extend(life_impact_patterns(symptoms))

    sleep_insight = correlate_sleep(symptoms, sleep_entries)
    if sleep_insight is not None:
        insights.append(sleep_insight)

    if len(insights) > MAX_INSIGHTS:
        logger.debug("Dropping %d insights past the cap", len(insights) - MAX_INSIGHTS)
    return insights[:MAX_INSIGHTS]
