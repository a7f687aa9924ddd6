"""MCP tools for journal analysis: patterns, dashboard stats and reports.

All figures are computed from a single snapshot of the journal per call.
Insights describe associations in self-reported data only.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

from medprep.domains.journal.domain_logic.journal_models import InsufficientData
from medprep.domains.journal.domain_logic.temporal import TIMEFRAME_LABELS, InvalidTimeframe

if TYPE_CHECKING:
    from medprep.core.audit.logger import AuditLogger
    from medprep.domains.journal.domain_logic.journal_analyzer import JournalAnalyzer

logger = logging.getLogger(__name__)


def register_analysis_tools(
    mcp: FastMCP,
    analyzer: JournalAnalyzer,
    audit_logger: AuditLogger | None = None,
    *,
    default_timeframe: str = "1month",
) -> None:
    """Register pattern, statistics and report tools on the MCP server."""

    def _audit(tool_name: str, tool_input, start_time: float, **kwargs) -> None:
        if audit_logger is not None:
            audit_logger.log_tool_call(
                tool_name,
                tool_input,
                duration_ms=round((time.monotonic() - start_time) * 1000, 1),
                **kwargs,
            )

    @mcp.tool
    async def symptom_patterns(ctx: Context) -> str:
        """Find patterns across your logged symptoms and sleep.

        Requires at least 3 symptoms. Returns up to 4 insights covering the
        most affected body area, recurring life-impact disruption, and how
        sleep quality lines up with next-day severity. Insights describe
        associations, not causes.
        """
        start_time = time.monotonic()
        result = analyzer.patterns()

        if isinstance(result, InsufficientData):
            _audit("symptom_patterns", None, start_time, metadata={"insights": 0})
            return json.dumps(result.to_dict())

        _audit("symptom_patterns", None, start_time, metadata={"insights": len(result)})
        return json.dumps({
            "status": "ok",
            "insights": [insight.to_dict() for insight in result],
        }, indent=2)

    @mcp.tool
    async def journal_stats(ctx: Context) -> str:
        """Dashboard summary: symptom counts, this week's count, sleep
        averages over the last 7 nights, and photo storage usage."""
        start_time = time.monotonic()
        stats = analyzer.stats()
        _audit("journal_stats", None, start_time)
        return json.dumps({"status": "ok", **stats}, indent=2)

    @mcp.tool
    async def generate_report(
        ctx: Context,
        timeframe: str = "",
        include_symptoms: bool = True,
    ) -> str:
        """Build a symptom report for a time window.

        Args:
            timeframe: One of '2weeks', '1month', '3months', '6months', 'all'.
                Defaults to the configured report timeframe.
            include_symptoms: Include the individual symptoms in the window.
        """
        start_time = time.monotonic()
        timeframe = timeframe or default_timeframe
        tool_input = {"timeframe": timeframe}
        try:
            report = analyzer.report(timeframe)
        except InvalidTimeframe as exc:
            _audit(
                "generate_report", tool_input, start_time,
                status="failure", error_type=type(exc).__name__,
            )
            return json.dumps({
                "status": "error",
                "message": str(exc),
                "valid_timeframes": list(TIMEFRAME_LABELS),
            })

        _audit(
            "generate_report", tool_input, start_time,
            metadata={"symptoms": report.total_count},
        )
        return json.dumps(
            {"status": "ok", **report.to_dict(include_symptoms=include_symptoms)},
            indent=2,
        )

    @mcp.tool
    async def visit_summary(ctx: Context) -> str:
        """Summarize the last 14 days for an upcoming doctor visit: count,
        average severity, most common area and type, peak time of day and
        the life areas disrupted at least twice."""
        start_time = time.monotonic()
        summary = analyzer.visit_summary()
        _audit("visit_summary", None, start_time, metadata={"symptoms": summary.total_count})
        return json.dumps({"status": "ok", **summary.to_dict()}, indent=2)
