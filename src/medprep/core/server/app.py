"""MedPrep Journal MCP Server — application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from medprep.core.audit.logger import AuditLogger
from medprep.core.config.settings import get_settings
from medprep.core.storage.database import JournalDatabase
from medprep.core.storage.encryption import EncryptionError, FieldEncryptor
from medprep.core.storage.repository import JournalRepository

logger = logging.getLogger(__name__)

SERVER_NAME = "MedPrep Journal"
SERVER_VERSION = "0.1.0"


def create_app(
    *,
    repository_override: JournalRepository | None = None,
    audit_logger_override: AuditLogger | None = None,
) -> FastMCP:
    """Create and configure the MedPrep Journal MCP server.

    This is the main application factory. It:
    1. Creates the FastMCP server instance
    2. Initializes the encrypted storage layer (journal data bank)
    3. Initializes the audit trail on the same database
    4. Registers the journal tools when storage is available
    """
    settings = get_settings()

    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Personal symptom journal. Log symptoms, sleep and appointments, "
            "review patterns in your own data, and prepare reports for doctor "
            "visits. Insights describe associations, never diagnoses."
        ),
    )

    # --- Initialize encrypted storage (journal data bank) ---
    repository: JournalRepository | None = None
    audit_logger: AuditLogger | None = audit_logger_override
    if repository_override is not None:
        repository = repository_override
    elif settings.encryption_key:
        try:
            encryptor = FieldEncryptor(settings.encryption_key)
            journal_db = JournalDatabase(settings.db_path)
            journal_db.initialize()
            repository = JournalRepository(journal_db, encryptor)
            if audit_logger is None:
                audit_logger = AuditLogger(journal_db)
            logger.info(
                "Journal data bank initialized: %s (schema v%d)",
                settings.db_path,
                journal_db.get_schema_version(),
            )
        except EncryptionError as exc:
            logger.error("Failed to initialize storage: %s", exc)
            logger.warning("Continuing without persistence — journal tools disabled")
    else:
        logger.info(
            "No ENCRYPTION_KEY configured — running without persistence. "
            "Set ENCRYPTION_KEY to enable the journal."
        )

    @server.tool
    async def health_check() -> dict:
        """Check server health and return basic status information."""
        status = {
            "status": "ok",
            "server": SERVER_NAME,
            "version": SERVER_VERSION,
            "storage_enabled": repository is not None,
            "audit_enabled": audit_logger is not None,
        }
        if repository is not None:
            status["symptoms_stored"] = repository.count_symptoms()
            status["sleep_entries_stored"] = repository.count_sleep_entries()
            status["appointments_stored"] = repository.count_appointments()
        return status

    # --- Register journal tools (requires storage) ---
    if repository is not None:
        from medprep.domains.journal.domain_logic.journal_analyzer import JournalAnalyzer
        from medprep.domains.journal.tools.analysis_tools import register_analysis_tools
        from medprep.domains.journal.tools.data_management_tools import (
            register_data_management_tools,
        )
        from medprep.domains.journal.tools.export_tools import register_export_tools
        from medprep.domains.journal.tools.journal_entry_tools import (
            register_journal_entry_tools,
        )

        analyzer = JournalAnalyzer(repository)
        register_journal_entry_tools(server, repository, analyzer, audit_logger)
        register_analysis_tools(
            server, analyzer, audit_logger,
            default_timeframe=settings.default_report_timeframe,
        )
        register_export_tools(
            server, repository, analyzer, audit_logger,
            patient_label=settings.patient_label,
            default_timeframe=settings.default_report_timeframe,
        )
        register_data_management_tools(server, repository, audit_logger)
        logger.info("Journal tools registered")

    if audit_logger is not None:
        from medprep.domains.journal.tools.audit_tools import register_audit_tools

        register_audit_tools(server, audit_logger)
        logger.info("Audit tools registered")

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
