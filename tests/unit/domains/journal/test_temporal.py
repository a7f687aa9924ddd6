"""Tests for timeframe resolution and time-window filtering."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from medprep.domains.journal.domain_logic.journal_models import Region, Symptom
from medprep.domains.journal.domain_logic.temporal import (
    EPOCH,
    InvalidTimeframe,
    filter_by_date,
    filter_by_region,
    filter_by_timeframe,
    filter_since,
    resolve_cutoff,
    shift_months,
    timeframe_label,
)

NOW = datetime(2026, 3, 31, 12, 0)


def _symptom(when: datetime, region: Region = Region.HEAD, type: str = "Pain") -> Symptom:
    return Symptom(
        id=when.isoformat(), region=region, type=type,
        description="Aching", severity=5, timestamp=when,
    )


class TestShiftMonths:
    def test_clamps_to_month_end(self):
        assert shift_months(datetime(2026, 3, 31, 9), 1) == datetime(2026, 2, 28, 9)

    def test_leap_year_february(self):
        assert shift_months(datetime(2024, 3, 30), 1) == datetime(2024, 2, 29)

    def test_crosses_year_boundary(self):
        assert shift_months(datetime(2026, 1, 15), 3) == datetime(2025, 10, 15)


class TestResolveCutoff:
    def test_two_weeks_is_fixed_days(self):
        assert resolve_cutoff("2weeks", NOW) == NOW - timedelta(days=14)

    def test_month_windows_use_calendar_months(self):
        assert resolve_cutoff("1month", NOW) == datetime(2026, 2, 28, 12)
        assert resolve_cutoff("3months", NOW) == datetime(2025, 12, 31, 12)
        assert resolve_cutoff("6months", NOW) == datetime(2025, 9, 30, 12)

    def test_all_is_epoch(self):
        assert resolve_cutoff("all", NOW) == EPOCH

    def test_unknown_tag_raises(self):
        with pytest.raises(InvalidTimeframe) as excinfo:
            resolve_cutoff("1year", NOW)
        assert excinfo.value.timeframe == "1year"
        assert isinstance(excinfo.value, ValueError)

    def test_labels(self):
        assert timeframe_label("3months") == "Last 3 months"
        with pytest.raises(InvalidTimeframe):
            timeframe_label("weekly")


class TestFilters:
    def test_cutoff_is_inclusive(self):
        cutoff = datetime(2026, 3, 1)
        records = [_symptom(cutoff), _symptom(cutoff - timedelta(seconds=1))]
        assert filter_since(records, cutoff) == records[:1]

    def test_timeframe_keeps_input_order(self):
        records = [
            _symptom(datetime(2026, 3, 20)),
            _symptom(datetime(2026, 1, 1)),
            _symptom(datetime(2026, 3, 5)),
        ]
        kept = filter_by_timeframe(records, "1month", NOW)
        assert [s.timestamp.day for s in kept] == [20, 5]

    def test_all_returns_everything(self):
        records = [_symptom(datetime(1999, 1, 1)), _symptom(datetime(2026, 3, 1))]
        assert filter_by_timeframe(records, "all", NOW) == records

    def test_invalid_timeframe_propagates(self):
        with pytest.raises(InvalidTimeframe):
            filter_by_timeframe([], "yesterday", NOW)

    def test_custom_key(self):
        class _Entry:
            def __init__(self, bedtime):
                self.bedtime = bedtime

        entries = [_Entry(datetime(2026, 3, 30)), _Entry(datetime(2025, 3, 30))]
        kept = filter_by_timeframe(entries, "2weeks", NOW, key=lambda e: e.bedtime)
        assert kept == entries[:1]

    def test_filter_by_date_and_region(self):
        records = [
            _symptom(datetime(2026, 3, 2, 8), Region.LEFT_KNEE),
            _symptom(datetime(2026, 3, 2, 22)),
            _symptom(datetime(2026, 3, 3, 0, 30)),
        ]
        assert len(filter_by_date(records, date(2026, 3, 2))) == 2
        assert filter_by_region(records, Region.LEFT_KNEE) == records[:1]
