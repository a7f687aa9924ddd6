"""Input validation for journal entries.

Tools call these before building records so the analytical code can
assume well-formed input.
"""

from __future__ import annotations

import base64
import binascii
from datetime import datetime
from typing import Any, Mapping

from medprep.domains.journal.domain_logic.journal_models import (
    SEVERITY_SCALE,
    SLEEP_QUALITY_SCALE,
    LifeImpact,
    PhotoRef,
    Region,
)
from medprep.domains.journal.domain_logic.stats import MAX_PHOTO_BYTES, PHOTO_LIMIT

MIN_DESCRIPTION_LENGTH = 3


class JournalValidationError(ValueError):
    """Raised when user-supplied entry data is rejected."""


def parse_region(value: str) -> Region:
    try:
        return Region(value.strip().lower())
    except ValueError:
        raise JournalValidationError(f"Unknown body region: {value!r}") from None


def parse_timestamp(value: str, *, field_name: str = "timestamp") -> datetime:
    """Parse an ISO 8601 date-time (e.g. '2026-03-01T08:30').

    A value with a UTC offset is converted to naive local time.
    """
    try:
        parsed = datetime.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise JournalValidationError(
            f"{field_name} must be an ISO 8601 date-time, got {value!r}"
        ) from None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def validate_severity(severity: int) -> int:
    if severity not in SEVERITY_SCALE:
        raise JournalValidationError("Severity must be between 1 and 10")
    return severity


def validate_quality(quality: int) -> int:
    if quality not in SLEEP_QUALITY_SCALE:
        raise JournalValidationError("Sleep quality must be between 1 and 5")
    return quality


def validate_symptom_text(symptom_type: str, description: str) -> tuple[str, str]:
    symptom_type = (symptom_type or "").strip()
    description = (description or "").strip()
    if not symptom_type:
        raise JournalValidationError("Please select a symptom type")
    if len(description) < MIN_DESCRIPTION_LENGTH:
        raise JournalValidationError(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters"
        )
    return symptom_type, description


def parse_life_impact(mapping: Mapping[str, Any] | None) -> LifeImpact | None:
    """LifeImpact from a partial mapping; None when nothing was supplied."""
    if mapping is None:
        return None
    try:
        return LifeImpact.from_mapping(mapping)
    except ValueError as exc:
        raise JournalValidationError(f"Invalid life impact level: {exc}") from exc


def photo_size_bytes(data_url: str) -> int:
    """Decoded size of a base64 image, with or without a data-URL prefix."""
    payload = data_url.split(",", 1)[1] if data_url.startswith("data:") else data_url
    try:
        return len(base64.b64decode(payload, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise JournalValidationError("Photo is not valid base64 data") from exc


def validate_photo_upload(
    data_url: str, filename: str | None, photos_used: int
) -> PhotoRef:
    """Check a photo against the 1 MB size cap and the storage quota."""
    if photos_used >= PHOTO_LIMIT:
        raise JournalValidationError(
            f"Photo limit reached ({PHOTO_LIMIT} maximum). "
            "Delete old photos to upload new ones."
        )
    if photo_size_bytes(data_url) > MAX_PHOTO_BYTES:
        raise JournalValidationError("File too large. Please choose an image under 1MB.")
    return PhotoRef(data=data_url, filename=filename or None)
