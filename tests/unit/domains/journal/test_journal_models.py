"""Tests for journal vocabularies and record types."""

from __future__ import annotations

from datetime import datetime

import pytest

from medprep.domains.journal.domain_logic.journal_models import (
    Confidence,
    ImpactCategory,
    ImpactLevel,
    Insight,
    InsightCategory,
    LifeImpact,
    PhotoRef,
    Region,
    SleepEntry,
    Symptom,
    severity_color,
    sleep_quality_color,
)


class TestVocabularies:
    def test_twenty_six_regions(self):
        assert len(Region) == 26

    def test_region_display_forms(self):
        assert Region.LOWER_BACK.plain == "lower back"
        assert Region.LOWER_BACK.label == "Lower Back"

    def test_impact_category_order(self):
        assert [c.value for c in ImpactCategory] == ["work", "sleep", "social", "mobility", "mood"]
        assert ImpactCategory.MOBILITY.label == "Mobility"

    def test_significant_levels(self):
        assert [lvl for lvl in ImpactLevel if lvl.is_significant] == [
            ImpactLevel.MODERATE, ImpactLevel.SEVERE,
        ]

    def test_colour_scales(self):
        assert severity_color(1) == "#22c55e"
        assert severity_color(10) == "#dc2626"
        assert sleep_quality_color(3) == "#eab308"
        with pytest.raises(ValueError):
            severity_color(0)
        with pytest.raises(ValueError):
            sleep_quality_color(6)


class TestRecords:
    def test_life_impact_from_mapping_ignores_unknown_keys(self):
        impact = LifeImpact.from_mapping({"social": "mild", "appetite": "severe"})
        assert impact.to_dict() == {
            "work": "none", "sleep": "none", "social": "mild", "mobility": "none", "mood": "none",
        }

    def test_symptom_to_dict_hides_photo_data_by_default(self):
        symptom = Symptom(
            id="s1", region=Region.HEAD, type="Pain", description="Dull", severity=3,
            timestamp=datetime(2026, 3, 1, 8), photo=PhotoRef(data="abc", filename="a.png"),
        )
        data = symptom.to_dict()
        assert data["has_photo"] is True
        assert data["photo_filename"] == "a.png"
        assert "photo_data" not in data
        assert symptom.to_dict(include_photo=True)["photo_data"] == "abc"

    def test_sleep_duration_hours(self):
        entry = SleepEntry(id="e", bedtime=datetime(2026, 3, 1, 23),
                           waketime=datetime(2026, 3, 2, 6, 30), quality=3)
        assert entry.duration == 7.5
        assert entry.to_dict()["duration_hours"] == 7.5

    def test_insight_colour_follows_category(self):
        insight = Insight(title="t", description="d", confidence=Confidence.HIGH,
                          category=InsightCategory.SLEEP)
        assert insight.to_dict() == {
            "title": "t", "description": "d", "confidence": "High",
            "category": "sleep", "color": "#8b5cf6",
        }
