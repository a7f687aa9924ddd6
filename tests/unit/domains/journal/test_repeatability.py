"""Analysis passes over an unchanged snapshot are repeatable and total."""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from medprep.domains.journal.domain_logic.correlation import correlate_sleep
from medprep.domains.journal.domain_logic.frequency import count_by
from medprep.domains.journal.domain_logic.journal_models import (
    ImpactLevel,
    LifeImpact,
    Region,
    SleepEntry,
    Symptom,
)
from medprep.domains.journal.domain_logic.patterns import detect_patterns
from medprep.domains.journal.domain_logic.reports import build_report
from medprep.domains.journal.domain_logic.stats import summarize_sleep

NOW = datetime(2026, 3, 31, 12, 0)
REGIONS = [Region.HEAD, Region.LEFT_KNEE, Region.CHEST, Region.LOWER_BACK, Region.NECK]
LEVELS = list(ImpactLevel)


def _sleep_entries(nights: int = 10) -> tuple[SleepEntry, ...]:
    entries = []
    for n in range(nights):
        bedtime = NOW.replace(hour=23) - timedelta(days=n + 1)
        entries.append(SleepEntry(
            id=f"sleep-{n}", bedtime=bedtime,
            waketime=bedtime + timedelta(hours=5 + n % 4), quality=1 + n % 5,
        ))
    return tuple(entries)


def _symptoms(count: int = 37) -> tuple[Symptom, ...]:
    symptoms = []
    for i in range(count):
        symptoms.append(Symptom(
            id=f"symptom-{i}",
            region=REGIONS[(i * 3) % len(REGIONS)],
            type=("Pain", "Stiffness", "Swelling")[i % 3],
            description="Logged during the week",
            severity=1 + (i * 7) % 10,
            timestamp=NOW - timedelta(hours=6 + i * 9),
            life_impact=LifeImpact(work=LEVELS[i % 4], sleep=LEVELS[(i + 2) % 4]),
        ))
    return tuple(symptoms)


@pytest.fixture
def symptoms() -> tuple[Symptom, ...]:
    return _symptoms()


@pytest.fixture
def sleep_entries() -> tuple[SleepEntry, ...]:
    return _sleep_entries()


class TestRepeatable:
    def test_detect_patterns(self, symptoms, sleep_entries):
        assert detect_patterns(symptoms, sleep_entries) == detect_patterns(symptoms, sleep_entries)

    @pytest.mark.parametrize("timeframe", ["2weeks", "1month", "3months", "all"])
    def test_build_report(self, symptoms, sleep_entries, timeframe):
        first = build_report(symptoms, sleep_entries, timeframe, NOW)
        second = build_report(symptoms, sleep_entries, timeframe, NOW)
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_correlate_sleep(self, symptoms, sleep_entries):
        assert correlate_sleep(symptoms, sleep_entries) == correlate_sleep(symptoms, sleep_entries)

    def test_summarize_sleep(self, sleep_entries):
        assert summarize_sleep(sleep_entries) == summarize_sleep(sleep_entries)

    def test_inputs_are_left_untouched(self, symptoms, sleep_entries):
        before = (list(symptoms), list(sleep_entries))
        detect_patterns(symptoms, sleep_entries)
        build_report(symptoms, sleep_entries, "all", NOW)
        assert (list(symptoms), list(sleep_entries)) == before


class TestCountsAreTotal:
    @pytest.mark.parametrize("size", [1, 4, 37, 120])
    def test_region_counts_sum_to_input_size(self, size):
        symptoms = _symptoms(size)
        counts = count_by(symptoms, lambda s: s.region)
        assert sum(counts.values()) == len(symptoms)
        assert set(counts) <= set(REGIONS)

    def test_type_counts_sum_to_input_size(self, symptoms):
        assert sum(count_by(symptoms, lambda s: s.type).values()) == len(symptoms)
