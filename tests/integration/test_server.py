"""Integration tests for the MedPrep Journal MCP server."""

from __future__ import annotations

import asyncio
import json

import pytest
from fastmcp import Client

from medprep.core.server.app import create_app


def _run(coro):
    """Run an async coroutine synchronously (no pytest-asyncio required)."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def _payload(result) -> dict:
    return json.loads(result.content[0].text)


JOURNAL_TOOLS = [
    "health_check",
    "log_symptom",
    "log_sleep",
    "log_appointment",
    "list_symptoms",
    "list_sleep_entries",
    "list_appointments",
    "symptom_patterns",
    "journal_stats",
    "generate_report",
    "visit_summary",
    "export_life_impact_csv",
    "export_sleep_csv",
    "download_text_report",
    "delete_symptom",
    "delete_all_journal_data",
    "audit_summary",
]


@pytest.fixture
def client(journal_repository, audit_logger):
    mcp = create_app(repository_override=journal_repository, audit_logger_override=audit_logger)
    return Client(mcp)


def test_server_without_storage_only_has_health_check():
    async def _check():
        async with Client(create_app()) as bare:
            tool_names = [t.name for t in await bare.list_tools()]
            assert tool_names == ["health_check"]
            status = _payload(await bare.call_tool("health_check", {}))
            assert status["storage_enabled"] is False
    _run(_check())


def test_all_journal_tools_registered(client):
    async def _check():
        async with client:
            tool_names = [t.name for t in await client.list_tools()]
            for expected in JOURNAL_TOOLS:
                assert expected in tool_names, f"Missing tool: {expected}"
    _run(_check())


def test_log_and_list_symptoms(client):
    async def _check():
        async with client:
            saved = _payload(await client.call_tool("log_symptom", {
                "region": "left-knee",
                "symptom_type": "Pain",
                "description": "Aches on stairs",
                "severity": 6,
                "timestamp": "2026-03-01T08:30",
                "life_impact": {"mobility": "severe"},
            }))
            assert saved["status"] == "saved"
            assert saved["photo_quota"]["used"] == 0

            listed = _payload(await client.call_tool("list_symptoms", {"region": "left-knee"}))
            assert listed["count"] == 1
            symptom = listed["symptoms"][0]
            assert symptom["id"] == saved["symptom_id"]
            assert symptom["life_impact"]["mobility"] == "severe"

            by_date = _payload(await client.call_tool("list_symptoms", {"date": "2026-03-02"}))
            assert by_date["count"] == 0
    _run(_check())


def test_invalid_symptom_is_rejected_and_audited(client, audit_logger):
    async def _check():
        async with client:
            result = _payload(await client.call_tool("log_symptom", {
                "region": "head",
                "symptom_type": "Pain",
                "description": "Throbbing",
                "severity": 11,
            }))
            assert result["status"] == "error"
            assert "between 1 and 10" in result["message"]
    _run(_check())
    event = audit_logger.get_events(tool_name="log_symptom")[0]
    assert event["status"] == "failure"
    assert event["error_type"] == "JournalValidationError"


def test_sleep_and_appointment_entries(client):
    async def _check():
        async with client:
            sleep = _payload(await client.call_tool("log_sleep", {
                "bedtime": "2026-03-01T23:00",
                "waketime": "2026-03-02T06:30",
                "quality": 4,
            }))
            assert sleep["duration_hours"] == 7.5

            appointment = _payload(await client.call_tool("log_appointment", {
                "doctor": "Dr. Okafor",
                "scheduled_at": "2026-04-02T10:00",
                "reason": "Knee follow-up",
            }))
            assert appointment["status"] == "saved"

            entries = _payload(await client.call_tool("list_sleep_entries", {}))
            assert entries["count"] == 1
            appointments = _payload(await client.call_tool("list_appointments", {}))
            assert appointments["appointments"][0]["reason"] == "Knee follow-up"
    _run(_check())


def test_patterns_need_three_symptoms(client):
    async def _check():
        async with client:
            result = _payload(await client.call_tool("symptom_patterns", {}))
            assert result["status"] == "insufficient_data"

            for description in ("Pounding", "Pressure", "Dull ache"):
                await client.call_tool("log_symptom", {
                    "region": "head", "symptom_type": "Pain",
                    "description": description, "severity": 5,
                })
            result = _payload(await client.call_tool("symptom_patterns", {}))
            assert result["status"] == "ok"
            assert result["insights"][0]["title"] == "Most Affected Area"
            assert result["insights"][0]["confidence"] == "High"
    _run(_check())


def test_report_and_exports(client, audit_logger):
    async def _check():
        async with client:
            for severity in (4, 6, 8):
                await client.call_tool("log_symptom", {
                    "region": "lower-back", "symptom_type": "Stiffness",
                    "description": "Tight after sitting", "severity": severity,
                    "life_impact": {"work": "moderate"},
                })
            report = _payload(await client.call_tool("generate_report", {"timeframe": "2weeks"}))
            assert report["avg_severity"] == "6.0"
            assert (report["min_severity"], report["max_severity"]) == (4, 8)
            assert report["impact_stats"]["work"] == 3

            bad = _payload(await client.call_tool("generate_report", {"timeframe": "1year"}))
            assert bad["status"] == "error"
            assert "all" in bad["valid_timeframes"]

            csv_export = _payload(await client.call_tool("export_life_impact_csv", {}))
            assert csv_export["rows"] == 3
            assert csv_export["filename"].endswith(".csv")

            empty_sleep = _payload(await client.call_tool("export_sleep_csv", {}))
            assert empty_sleep["status"] == "empty"

            text = _payload(await client.call_tool("download_text_report", {"timeframe": "all"}))
            assert "Patient: Demo User" in text["content"]

            summary = _payload(await client.call_tool("visit_summary", {}))
            assert summary["most_common_region"] == "lower-back"
    _run(_check())
    assert audit_logger.count_events(action="data_export") == 2


def test_stats_and_deletion(client, journal_repository):
    async def _check():
        async with client:
            saved = _payload(await client.call_tool("log_symptom", {
                "region": "chest", "symptom_type": "Tightness",
                "description": "Pressure when breathing", "severity": 3,
                "photo_data": "data:image/png;base64,iVBORw0KGgo=",
                "photo_filename": "chest.png",
            }))
            assert saved["photo_quota"]["used"] == 1

            stats = _payload(await client.call_tool("journal_stats", {}))
            assert stats["total_symptoms"] == 1
            assert stats["photo_quota"]["remaining"] == 19

            deleted = _payload(await client.call_tool(
                "delete_symptom", {"symptom_id": saved["symptom_id"]}
            ))
            assert deleted["status"] == "deleted"
            missing = _payload(await client.call_tool("delete_symptom", {"symptom_id": "nope"}))
            assert missing["status"] == "not_found"

            await client.call_tool("log_sleep", {
                "bedtime": "2026-03-01T23:00", "waketime": "2026-03-02T07:00", "quality": 3,
            })
            cancelled = _payload(await client.call_tool("delete_all_journal_data", {}))
            assert cancelled["status"] == "cancelled"
            wiped = _payload(await client.call_tool(
                "delete_all_journal_data", {"confirm": "DELETE"}
            ))
            assert wiped["deleted"] == {"symptoms": 0, "appointments": 0, "sleep_entries": 1}

            audit = _payload(await client.call_tool("audit_summary", {}))
            assert audit["deletions"] == 2
    _run(_check())
    assert journal_repository.count_sleep_entries() == 0


def test_offset_timestamp_is_stored_as_local_time(client, journal_repository):
    async def _check():
        async with client:
            saved = _payload(await client.call_tool("log_symptom", {
                "region": "head", "symptom_type": "Headache",
                "description": "Dull ache behind the eyes", "severity": 5,
                "timestamp": "2026-10-18T08:30:00+00:00",
            }))
            assert saved["status"] == "saved"

            stats = _payload(await client.call_tool("journal_stats", {}))
            assert stats["status"] == "ok"
            assert stats["total_symptoms"] == 1

            for tool in ("generate_report", "download_text_report"):
                result = _payload(await client.call_tool(tool, {"timeframe": "all"}))
                assert result.get("status") != "error"
            summary = _payload(await client.call_tool("visit_summary", {}))
            assert summary["status"] == "ok"
    _run(_check())
    stored = journal_repository.get_symptoms()[0]
    assert stored.timestamp.tzinfo is None


def test_health_check_reports_counts(client):
    async def _check():
        async with client:
            await client.call_tool("log_appointment", {
                "doctor": "Dr. Lee", "scheduled_at": "2026-04-01T09:00",
            })
            status = _payload(await client.call_tool("health_check", {}))
            assert status["status"] == "ok"
            assert status["storage_enabled"] is True
            assert status["appointments_stored"] == 1
    _run(_check())
