"""MCP tools for journal data management (single and bulk deletion).

These tools implement the user's right to delete their journal. All
deletions are audit-logged.
"""

from __future__ import annotations

import json
import logging
import time
from typing import TYPE_CHECKING

from fastmcp import Context, FastMCP

if TYPE_CHECKING:
    from medprep.core.audit.logger import AuditLogger
    from medprep.core.storage.repository import JournalRepository

logger = logging.getLogger(__name__)

DELETE_CONFIRMATION = "DELETE"


def register_data_management_tools(
    mcp: FastMCP,
    repository: JournalRepository,
    audit_logger: AuditLogger | None = None,
) -> None:
    """Register data management tools on the MCP server."""

    @mcp.tool
    async def delete_symptom(
        ctx: Context,
        symptom_id: str,
    ) -> str:
        """Delete a single symptom, including any attached photo.

        Args:
            symptom_id: The UUID of the symptom to delete.
        """
        start_time = time.monotonic()
        deleted = repository.delete_symptom(symptom_id)

        elapsed_ms = (time.monotonic() - start_time) * 1000

        if not deleted:
            return json.dumps({
                "status": "not_found",
                "symptom_id": symptom_id,
                "message": "No symptom found with that ID.",
            })

        if audit_logger is not None:
            audit_logger.log_data_delete(
                tool_name="delete_symptom",
                record_id=symptom_id,
                count=1,
            )
        return json.dumps({
            "status": "deleted",
            "symptom_id": symptom_id,
            "duration_ms": round(elapsed_ms, 1),
        })

    @mcp.tool
    async def delete_all_journal_data(
        ctx: Context,
        confirm: str = "",
    ) -> str:
        """Permanently delete ALL symptoms, appointments and sleep entries.

        This cannot be undone. Export your data first if you want a copy.

        Args:
            confirm: Must be exactly 'DELETE' to proceed. Safety gate.
        """
        if confirm != DELETE_CONFIRMATION:
            return json.dumps({
                "status": "cancelled",
                "message": (
                    "To delete all journal data, call this tool with "
                    f"confirm='{DELETE_CONFIRMATION}'. This action cannot be undone."
                ),
            })

        start_time = time.monotonic()
        counts = repository.delete_all_data()
        elapsed_ms = (time.monotonic() - start_time) * 1000

        if audit_logger is not None:
            audit_logger.log_data_delete(
                tool_name="delete_all_journal_data",
                count=sum(counts.values()),
                metadata={"confirmed": True, **counts},
            )

        return json.dumps({
            "status": "all_deleted",
            "deleted": counts,
            "duration_ms": round(elapsed_ms, 1),
            "message": (
                f"Deleted {counts['symptoms']} symptoms, {counts['appointments']} "
                f"appointments and {counts['sleep_entries']} sleep entries."
            ),
        })
