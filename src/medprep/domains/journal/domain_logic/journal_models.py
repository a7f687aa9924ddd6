"""Journal records, closed vocabularies and derived result types.

Records (symptoms, sleep sessions, appointments) are immutable snapshots of
what the data bank holds. Derived types (insights, reports, stats) are built
fresh on every analysis pass and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterator, Mapping


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

class Region(str, Enum):
    """The 26 body regions a symptom can be attributed to."""

    HEAD = "head"
    NECK = "neck"
    LEFT_SHOULDER = "left-shoulder"
    RIGHT_SHOULDER = "right-shoulder"
    LEFT_UPPER_ARM = "left-upper-arm"
    RIGHT_UPPER_ARM = "right-upper-arm"
    LEFT_ELBOW = "left-elbow"
    RIGHT_ELBOW = "right-elbow"
    LEFT_FOREARM = "left-forearm"
    RIGHT_FOREARM = "right-forearm"
    LEFT_HAND = "left-hand"
    RIGHT_HAND = "right-hand"
    CHEST = "chest"
    ABDOMEN = "abdomen"
    LOWER_BACK = "lower-back"
    PELVIS = "pelvis"
    LEFT_THIGH = "left-thigh"
    RIGHT_THIGH = "right-thigh"
    LEFT_KNEE = "left-knee"
    RIGHT_KNEE = "right-knee"
    LEFT_CALF = "left-calf"
    RIGHT_CALF = "right-calf"
    LEFT_ANKLE = "left-ankle"
    RIGHT_ANKLE = "right-ankle"
    LEFT_FOOT = "left-foot"
    RIGHT_FOOT = "right-foot"

    @property
    def plain(self) -> str:
        """Lowercase words, e.g. 'left knee'."""
        return self.value.replace("-", " ")

    @property
    def label(self) -> str:
        """Title-cased display form, e.g. 'Left Knee'."""
        return self.plain.title()


class ImpactCategory(str, Enum):
    """Life-impact categories, declared in their fixed evaluation order."""

    WORK = "work"
    SLEEP = "sleep"
    SOCIAL = "social"
    MOBILITY = "mobility"
    MOOD = "mood"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ImpactLevel(str, Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @property
    def is_significant(self) -> bool:
        """Moderate and severe ratings count as significant disruption."""
        return self in (ImpactLevel.MODERATE, ImpactLevel.SEVERE)


class Confidence(str, Enum):
    """Heuristic confidence label (count thresholds, not a statistic)."""

    MEDIUM = "Medium"
    HIGH = "High"


class InsightCategory(str, Enum):
    REGION = "region"
    LIFE_IMPACT = "life_impact"
    SLEEP = "sleep"

    @property
    def color(self) -> str:
        return _INSIGHT_COLORS[self]


class PhotoQuotaState(str, Enum):
    OK = "ok"
    WARNING = "warning"
    BLOCKED = "blocked"


_INSIGHT_COLORS: dict[InsightCategory, str] = {
    InsightCategory.REGION: "#f59e0b",
    InsightCategory.LIFE_IMPACT: "#e11d48",
    InsightCategory.SLEEP: "#8b5cf6",
}

SEVERITY_SCALE = range(1, 11)
SLEEP_QUALITY_SCALE = range(1, 6)

_SEVERITY_COLORS: dict[int, str] = {
    1: "#22c55e", 2: "#22c55e",
    3: "#84cc16", 4: "#84cc16",
    5: "#eab308", 6: "#eab308",
    7: "#f97316", 8: "#f97316",
    9: "#ef4444", 10: "#dc2626",
}

_SLEEP_QUALITY_COLORS: dict[int, str] = {
    1: "#dc2626", 2: "#ef4444",
    3: "#eab308", 4: "#84cc16",
    5: "#22c55e",
}


def severity_color(severity: int) -> str:
    """Colour tag for a severity on the 1-10 scale."""
    try:
        return _SEVERITY_COLORS[severity]
    except KeyError:
        raise ValueError(f"Severity out of range 1-10: {severity!r}") from None


def sleep_quality_color(quality: int) -> str:
    """Colour tag for a sleep quality on the 1-5 scale."""
    try:
        return _SLEEP_QUALITY_COLORS[quality]
    except KeyError:
        raise ValueError(f"Sleep quality out of range 1-5: {quality!r}") from None


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LifeImpact:
    """Functional disruption per category; unrated categories are 'none'."""

    work: ImpactLevel = ImpactLevel.NONE
    sleep: ImpactLevel = ImpactLevel.NONE
    social: ImpactLevel = ImpactLevel.NONE
    mobility: ImpactLevel = ImpactLevel.NONE
    mood: ImpactLevel = ImpactLevel.NONE

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> LifeImpact:
        """Build from a partial ``{category: level}`` mapping.

        Missing or empty levels default to 'none'. Unknown categories are
        ignored; unknown level strings raise ``ValueError``.
        """
        mapping = mapping or {}
        levels = {}
        for category in ImpactCategory:
            raw = mapping.get(category.value) or ImpactLevel.NONE.value
            levels[category.value] = ImpactLevel(raw)
        return cls(**levels)

    def level(self, category: ImpactCategory) -> ImpactLevel:
        return getattr(self, category.value)

    def items(self) -> Iterator[tuple[ImpactCategory, ImpactLevel]]:
        for category in ImpactCategory:
            yield category, self.level(category)

    def to_dict(self) -> dict[str, str]:
        return {category.value: level.value for category, level in self.items()}


@dataclass(frozen=True)
class PhotoRef:
    """Stored image (base64 data URL) attached to a symptom."""

    data: str
    filename: str | None = None


@dataclass(frozen=True)
class Symptom:
    """One reported health event.

    ``timestamp`` is the user-supplied onset time (may be backdated);
    ``created_at`` is when the record was written.
    """

    id: str
    region: Region
    type: str
    description: str
    severity: int
    timestamp: datetime
    notes: str = ""
    life_impact: LifeImpact | None = None
    photo: PhotoRef | None = None
    created_at: datetime | None = None

    @property
    def has_photo(self) -> bool:
        return self.photo is not None and bool(self.photo.data)

    def to_dict(self, *, include_photo: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "region": self.region.value,
            "type": self.type,
            "description": self.description,
            "severity": self.severity,
            "timestamp": self.timestamp.isoformat(),
            "notes": self.notes,
            "life_impact": self.life_impact.to_dict() if self.life_impact else None,
            "has_photo": self.has_photo,
            "photo_filename": self.photo.filename if self.photo else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if include_photo and self.photo is not None:
            data["photo_data"] = self.photo.data
        return data


@dataclass(frozen=True)
class SleepEntry:
    """One sleep session.

    Inverted bed/wake times are stored as given; ``duration`` is then zero
    or negative.
    """

    id: str
    bedtime: datetime
    waketime: datetime
    quality: int
    notes: str = ""
    created_at: datetime | None = None

    @property
    def duration(self) -> float:
        """Hours between bedtime and waketime."""
        return (self.waketime - self.bedtime).total_seconds() / 3600

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "bedtime": self.bedtime.isoformat(),
            "waketime": self.waketime.isoformat(),
            "duration_hours": round(self.duration, 1),
            "quality": self.quality,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class Appointment:
    """Doctor visit metadata. Only counted, never analyzed."""

    id: str
    doctor: str
    scheduled_at: datetime
    reason: str = ""
    created_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "doctor": self.doctor,
            "scheduled_at": self.scheduled_at.isoformat(),
            "reason": self.reason,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class JournalSnapshot:
    """Read-only view of one user's journal at a point in time."""

    symptoms: tuple[Symptom, ...] = ()
    sleep_entries: tuple[SleepEntry, ...] = ()
    appointments: tuple[Appointment, ...] = ()


# ---------------------------------------------------------------------------
# Derived result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Insight:
    """A natural-language pattern observation with a confidence label."""

    title: str
    description: str
    confidence: Confidence
    category: InsightCategory

    @property
    def color(self) -> str:
        return self.category.color

    def to_dict(self) -> dict[str, str]:
        return {
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence.value,
            "category": self.category.value,
            "color": self.color,
        }


@dataclass(frozen=True)
class InsufficientData:
    """Returned instead of a result when a minimum record count isn't met."""

    required: int
    available: int

    @property
    def message(self) -> str:
        return f"Log at least {self.required} symptoms to see patterns"

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "insufficient_data",
            "required": self.required,
            "available": self.available,
            "message": self.message,
        }


@dataclass(frozen=True)
class SeverityStats:
    """Average/min/max severity; all zero (and degenerate) for an empty set."""

    average: float
    minimum: int
    maximum: int
    degenerate: bool = False


@dataclass(frozen=True)
class ReportData:
    """Time-windowed report summary, consumed verbatim by the exporters."""

    timeframe: str
    timeframe_label: str
    generated_at: datetime
    symptoms: tuple[Symptom, ...]
    total_count: int
    avg_severity: float
    min_severity: int
    max_severity: int
    region_stats: dict[str, int] = field(default_factory=dict)
    type_stats: dict[str, int] = field(default_factory=dict)
    impact_stats: dict[str, int] = field(default_factory=dict)
    sleep_correlation: Insight | None = None

    def to_dict(self, *, include_symptoms: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "timeframe": self.timeframe,
            "timeframe_label": self.timeframe_label,
            "generated_at": self.generated_at.isoformat(),
            "total_count": self.total_count,
            "avg_severity": f"{self.avg_severity:.1f}",
            "min_severity": self.min_severity,
            "max_severity": self.max_severity,
            "region_stats": dict(self.region_stats),
            "type_stats": dict(self.type_stats),
            "impact_stats": dict(self.impact_stats),
            "sleep_correlation": (
                self.sleep_correlation.to_dict() if self.sleep_correlation else None
            ),
        }
        if include_symptoms:
            data["symptoms"] = [s.to_dict() for s in self.symptoms]
        return data


@dataclass(frozen=True)
class VisitSummary:
    """Pre-appointment digest of the trailing two weeks."""

    window_days: int
    total_count: int
    avg_severity: float
    most_common_region: Region | None = None
    most_common_region_count: int = 0
    most_common_type: str | None = None
    peak_hour: int | None = None
    significant_impacts: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "window_days": self.window_days,
            "total_count": self.total_count,
            "avg_severity": f"{self.avg_severity:.1f}",
            "most_common_region": (
                self.most_common_region.value if self.most_common_region else None
            ),
            "most_common_region_count": self.most_common_region_count,
            "most_common_type": self.most_common_type,
            "peak_hour": self.peak_hour,
            "significant_impacts": dict(self.significant_impacts),
        }


@dataclass(frozen=True)
class SymptomStats:
    total_count: int
    this_week_count: int


@dataclass(frozen=True)
class SleepStats:
    entries_considered: int
    avg_duration: float | None
    avg_quality: float | None


@dataclass(frozen=True)
class PhotoQuota:
    """Photo storage state for upload gating."""

    state: PhotoQuotaState
    used: int
    limit: int

    @property
    def remaining(self) -> int:
        return max(self.limit - self.used, 0)

    @property
    def upload_enabled(self) -> bool:
        return self.state is not PhotoQuotaState.BLOCKED

    @property
    def percentage(self) -> int:
        return round(self.used / self.limit * 100)

    @property
    def message(self) -> str | None:
        if self.state is PhotoQuotaState.BLOCKED:
            return (
                f"Maximum photo storage reached ({self.limit}/{self.limit}). "
                "Delete old photos to upload new ones."
            )
        if self.state is PhotoQuotaState.WARNING:
            return (
                f"Photo storage: {self.used}/{self.limit} used. "
                f"{self.remaining} remaining."
            )
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "used": self.used,
            "limit": self.limit,
            "remaining": self.remaining,
            "percentage": self.percentage,
            "upload_enabled": self.upload_enabled,
            "message": self.message,
        }
