"""MCP tools for exporting journal data as files.

Exports return the file content and a suggested file name. Each export
is audit-logged with its format and row count.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from medprep.domains.journal.domain_logic.exporters import (
    export_filename,
    life_impact_csv,
    render_text_report,
    sleep_csv,
)
from medprep.domains.journal.domain_logic.temporal import InvalidTimeframe

if TYPE_CHECKING:
    from medprep.core.audit.logger import AuditLogger
    from medprep.core.storage.repository import JournalRepository
    from medprep.domains.journal.domain_logic.journal_analyzer import JournalAnalyzer

logger = logging.getLogger(__name__)


def register_export_tools(
    mcp: FastMCP,
    repository: JournalRepository,
    analyzer: JournalAnalyzer,
    audit_logger: AuditLogger | None = None,
    *,
    patient_label: str = "Demo User",
    default_timeframe: str = "1month",
) -> None:
    """Register CSV and text export tools on the MCP server."""

    def _exported(tool_name: str, export_format: str, rows: int, start_time: float) -> None:
        if audit_logger is not None:
            audit_logger.log_tool_call(
                tool_name,
                duration_ms=round((time.monotonic() - start_time) * 1000, 1),
            )
            audit_logger.log_export(tool_name=tool_name, export_format=export_format, rows=rows)
        logger.info("Exported %d rows as %s via %s", rows, export_format, tool_name)

    @mcp.tool
    async def export_life_impact_csv(ctx: Context) -> str:
        """Export every symptom that has a life-impact rating as CSV.

        Columns: date, time, body region, symptom type, severity, the five
        impact levels and the description.
        """
        start_time = time.monotonic()
        rated = [s for s in repository.get_symptoms() if s.life_impact is not None]
        if not rated:
            return json.dumps({
                "status": "empty",
                "message": "No life impact data to export. Start tracking life impact when logging symptoms.",
            })

        content = life_impact_csv(rated)
        _exported("export_life_impact_csv", "csv", len(rated), start_time)
        return json.dumps({
            "status": "ok",
            "filename": export_filename("life-impact", "csv"),
            "rows": len(rated),
            "content": content,
        })

    @mcp.tool
    async def export_sleep_csv(ctx: Context) -> str:
        """Export all sleep sessions as CSV (date, bedtime, wake time,
        duration in hours, quality and notes)."""
        start_time = time.monotonic()
        entries = repository.get_sleep_entries()
        if not entries:
            return json.dumps({"status": "empty", "message": "No sleep data to export."})

        content = sleep_csv(entries)
        _exported("export_sleep_csv", "csv", len(entries), start_time)
        return json.dumps({
            "status": "ok",
            "filename": export_filename("sleep-data", "csv"),
            "rows": len(entries),
            "content": content,
        })

    @mcp.tool
    async def download_text_report(ctx: Context, timeframe: str = "") -> str:
        """Render the symptom report as plain text for printing or sharing
        with a doctor.

        Args:
            timeframe: One of '2weeks', '1month', '3months', '6months', 'all'.
        """
        start_time = time.monotonic()
        timeframe = timeframe or default_timeframe
        try:
            report = analyzer.report(timeframe)
        except InvalidTimeframe as exc:
            return json.dumps({"status": "error", "message": str(exc)})

        content = render_text_report(report, patient=patient_label)
        _exported("download_text_report", "txt", report.total_count, start_time)
        return json.dumps({
            "status": "ok",
            "filename": export_filename("report", "txt"),
            "timeframe": timeframe,
            "content": content,
        })
