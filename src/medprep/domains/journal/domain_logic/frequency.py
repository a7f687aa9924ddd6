"""Categorical frequency counting with deterministic arg-max.

Counts are plain insertion-ordered dicts: a key appears when it is first
seen, so iteration order is the order of first occurrence. ``arg_max``
relies on that order for its tie-break.
"""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, Mapping, TypeVar

from medprep.domains.journal.domain_logic.journal_models import (
    ImpactCategory,
    ImpactLevel,
    Symptom,
)

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def count_by(records: Iterable[T], key: Callable[[T], K]) -> dict[K, int]:
    """Count records per ``key(record)``. Only keys seen at least once appear."""
    counts: dict[K, int] = {}
    for record in records:
        k = key(record)
        counts[k] = counts.get(k, 0) + 1
    return counts


def arg_max(counts: Mapping[K, int]) -> K | None:
    """Key with the highest count, or None for an empty mapping.

    Ties go to the key that comes first in iteration order, i.e. the
    value that was seen first.
    """
    best: K | None = None
    best_count = 0
    for k, count in counts.items():
        if best is None or count > best_count:
            best, best_count = k, count
    return best


def count_impact_levels(
    symptoms: Iterable[Symptom], category: ImpactCategory
) -> dict[ImpactLevel, int]:
    """Histogram of impact levels in one category.

    Only symptoms that carry a life-impact rating are counted; within those,
    an unrated category counts as 'none'.
    """
    rated = (s for s in symptoms if s.life_impact is not None)
    return count_by(rated, lambda s: s.life_impact.level(category))


def count_by_hour(symptoms: Iterable[Symptom]) -> dict[int, int]:
    """Hour-of-day (0-23) histogram of symptom onset."""
    return count_by(symptoms, lambda s: s.timestamp.hour)
