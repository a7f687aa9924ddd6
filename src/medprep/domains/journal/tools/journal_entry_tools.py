"""MCP tools for journal entry: symptoms, sleep sessions and appointments.

Entries are validated, then persisted to the encrypted journal data bank.
Validation failures come back as ``{"status": "error"}`` payloads and are
audit-logged as failures.
"""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from medprep.domains.journal.domain_logic.journal_models import (
    Appointment,
    SleepEntry,
    Symptom,
)
from medprep.domains.journal.domain_logic.validation import (
    JournalValidationError,
    parse_life_impact,
    parse_region,
    parse_timestamp,
    validate_photo_upload,
    validate_quality,
    validate_severity,
    validate_symptom_text,
)

if TYPE_CHECKING:
    from medprep.core.audit.logger import AuditLogger
    from medprep.core.storage.repository import JournalRepository
    from medprep.domains.journal.domain_logic.journal_analyzer import JournalAnalyzer

logger = logging.getLogger(__name__)


def register_journal_entry_tools(
    mcp: FastMCP,
    repository: JournalRepository,
    analyzer: JournalAnalyzer,
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register journal entry and history tools on the MCP server."""

    def _audit(tool_name: str, tool_input: dict, start_time: float, **kwargs) -> None:
        if audit_logger is None:
            return
        audit_logger.log_tool_call(
            tool_name,
            tool_input,
            duration_ms=round((time.monotonic() - start_time) * 1000, 1),
            **kwargs,
        )

    def _rejected(tool_name: str, tool_input: dict, start_time: float, exc: Exception) -> str:
        logger.info("%s rejected: %s", tool_name, exc)
        _audit(
            tool_name, tool_input, start_time,
            status="failure", error_type=type(exc).__name__,
        )
        return json.dumps({"status": "error", "message": str(exc)})

    @mcp.tool
    async def log_symptom(
        ctx: Context,
        region: str,
        symptom_type: str,
        description: str,
        severity: int,
        timestamp: str = "",
        notes: str = "",
        life_impact: dict[str, str] | None = None,
        photo_data: str = "",
        photo_filename: str = "",
    ) -> str:
        """Record a symptom in your journal.

        Args:
            region: Body region (e.g. 'head', 'left-knee', 'lower-back').
            symptom_type: Kind of symptom (e.g. 'Pain', 'Numbness').
            description: What it feels like, at least 3 characters.
            severity: Intensity from 1 (mild) to 10 (severe).
            timestamp: Onset time (ISO 8601). Defaults to now; may be backdated.
            notes: Optional triggers or context.
            life_impact: Optional {category: level} for work, sleep, social,
                mobility and mood, with levels none/mild/moderate/severe.
            photo_data: Optional base64 image (data URL accepted), max 1 MB.
            photo_filename: Original file name of the photo.
        """
        start_time = time.monotonic()
        tool_input = {"region": region, "symptom_type": symptom_type, "severity": severity}
        try:
            parsed_region = parse_region(region)
            symptom_type, description = validate_symptom_text(symptom_type, description)
            validate_severity(severity)
            onset = (
                parse_timestamp(timestamp)
                if timestamp
                else datetime.now().replace(microsecond=0)
            )
            impact = parse_life_impact(life_impact)
            photo = (
                validate_photo_upload(photo_data, photo_filename, repository.count_photos())
                if photo_data
                else None
            )
        except JournalValidationError as exc:
            return _rejected("log_symptom", tool_input, start_time, exc)

        symptom = Symptom(
            id="",
            region=parsed_region,
            type=symptom_type,
            description=description,
            severity=severity,
            timestamp=onset,
            notes=notes.strip(),
            life_impact=impact,
            photo=photo,
        )
        sid = repository.add_symptom(symptom)
        _audit("log_symptom", tool_input, start_time, record_id=sid)
        return json.dumps({
            "status": "saved",
            "symptom_id": sid,
            "region": parsed_region.value,
            "severity": severity,
            "timestamp": onset.isoformat(),
            "photo_quota": analyzer.photo_quota().to_dict(),
        })

    @mcp.tool
    async def log_sleep(
        ctx: Context,
        bedtime: str,
        waketime: str,
        quality: int,
        notes: str = "",
    ) -> str:
        """Record a night of sleep.

        Args:
            bedtime: When you went to bed (ISO 8601).
            waketime: When you woke up (ISO 8601).
            quality: Sleep quality from 1 (poor) to 5 (excellent).
            notes: Optional notes.
        """
        start_time = time.monotonic()
        tool_input = {"quality": quality}
        try:
            bed = parse_timestamp(bedtime, field_name="bedtime")
            wake = parse_timestamp(waketime, field_name="waketime")
            validate_quality(quality)
        except JournalValidationError as exc:
            return _rejected("log_sleep", tool_input, start_time, exc)

        entry = SleepEntry(id="", bedtime=bed, waketime=wake, quality=quality, notes=notes.strip())
        eid = repository.add_sleep_entry(entry)
        _audit("log_sleep", tool_input, start_time, record_id=eid)
        return json.dumps({
            "status": "saved",
            "sleep_entry_id": eid,
            "duration_hours": round(entry.duration, 1),
            "quality": quality,
        })

    @mcp.tool
    async def log_appointment(
        ctx: Context,
        doctor: str,
        scheduled_at: str,
        reason: str = "",
    ) -> str:
        """Record an upcoming or past doctor appointment.

        Args:
            doctor: Doctor or clinic name.
            scheduled_at: Appointment date and time (ISO 8601).
            reason: Optional reason for the visit.
        """
        start_time = time.monotonic()
        tool_input = {"scheduled_at": scheduled_at}
        try:
            doctor = doctor.strip()
            if not doctor:
                raise JournalValidationError("Please enter the doctor's name")
            when = parse_timestamp(scheduled_at, field_name="scheduled_at")
        except JournalValidationError as exc:
            return _rejected("log_appointment", tool_input, start_time, exc)

        aid = repository.add_appointment(
            Appointment(id="", doctor=doctor, scheduled_at=when, reason=reason.strip())
        )
        _audit("log_appointment", tool_input, start_time, record_id=aid)
        return json.dumps({
            "status": "saved",
            "appointment_id": aid,
            "scheduled_at": when.isoformat(),
        })

    @mcp.tool
    async def list_symptoms(
        ctx: Context,
        region: str = "",
        date: str = "",
        include_photos: bool = False,
    ) -> str:
        """List logged symptoms, newest first.

        Args:
            region: Only symptoms in this body region.
            date: Only symptoms on this calendar day (YYYY-MM-DD).
            include_photos: Include base64 photo data in the results.
        """
        start_time = time.monotonic()
        tool_input = {"region": region, "date": date}
        try:
            parsed_region = parse_region(region) if region else None
            day = parse_timestamp(date, field_name="date").date() if date else None
        except JournalValidationError as exc:
            return _rejected("list_symptoms", tool_input, start_time, exc)

        symptoms = analyzer.history(region=parsed_region, on_date=day)
        _audit("list_symptoms", tool_input, start_time, metadata={"count": len(symptoms)})
        return json.dumps({
            "count": len(symptoms),
            "symptoms": [s.to_dict(include_photo=include_photos) for s in symptoms],
        })

    @mcp.tool
    async def list_sleep_entries(ctx: Context, limit: int = 30) -> str:
        """List recorded sleep sessions, latest bedtime first.

        Args:
            limit: Maximum entries to return (default: 30).
        """
        start_time = time.monotonic()
        entries = repository.get_sleep_entries(limit=limit)
        _audit("list_sleep_entries", {"limit": limit}, start_time)
        return json.dumps({
            "count": len(entries),
            "sleep_entries": [e.to_dict() for e in entries],
        })

    @mcp.tool
    async def list_appointments(ctx: Context) -> str:
        """List recorded appointments, most recently added first."""
        start_time = time.monotonic()
        appointments = repository.get_appointments()
        _audit("list_appointments", None, start_time)
        return json.dumps({
            "count": len(appointments),
            "appointments": [a.to_dict() for a in appointments],
        })
