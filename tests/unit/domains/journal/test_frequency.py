"""Tests for categorical counting and arg-max tie-breaking."""

from __future__ import annotations

from datetime import datetime

from medprep.domains.journal.domain_logic.frequency import (
    arg_max,
    count_by,
    count_by_hour,
    count_impact_levels,
)
from medprep.domains.journal.domain_logic.journal_models import (
    ImpactCategory,
    ImpactLevel,
    LifeImpact,
    Region,
    Symptom,
)


def _symptom(region: Region = Region.HEAD, hour: int = 9, life_impact=None) -> Symptom:
    return Symptom(
        id="", region=region, type="Pain", description="Aching", severity=5,
        timestamp=datetime(2026, 3, 1, hour), life_impact=life_impact,
    )


class TestCountBy:
    def test_counts_and_first_seen_order(self):
        symptoms = [
            _symptom(Region.LEFT_KNEE),
            _symptom(Region.HEAD),
            _symptom(Region.LEFT_KNEE),
        ]
        counts = count_by(symptoms, lambda s: s.region)
        assert counts == {Region.LEFT_KNEE: 2, Region.HEAD: 1}
        assert list(counts) == [Region.LEFT_KNEE, Region.HEAD]

    def test_empty_input(self):
        assert count_by([], lambda s: s.region) == {}


class TestArgMax:
    def test_highest_count_wins(self):
        assert arg_max({"head": 2, "neck": 5, "chest": 1}) == "neck"

    def test_tie_goes_to_first_seen(self):
        assert arg_max({"neck": 2, "head": 2}) == "neck"
        assert arg_max({"head": 2, "neck": 2}) == "head"

    def test_empty_returns_none(self):
        assert arg_max({}) is None


class TestImpactAndHour:
    def test_only_rated_symptoms_count(self):
        symptoms = [
            _symptom(life_impact=LifeImpact(work=ImpactLevel.SEVERE)),
            _symptom(life_impact=LifeImpact()),
            _symptom(),
        ]
        levels = count_impact_levels(symptoms, ImpactCategory.WORK)
        assert levels == {ImpactLevel.SEVERE: 1, ImpactLevel.NONE: 1}

    def test_hour_histogram(self):
        symptoms = [_symptom(hour=7), _symptom(hour=19), _symptom(hour=7)]
        counts = count_by_hour(symptoms)
        assert counts == {7: 2, 19: 1}
        assert arg_max(counts) == 7
