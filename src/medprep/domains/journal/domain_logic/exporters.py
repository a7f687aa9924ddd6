"""CSV and plain-text renderers for journal exports.

Renderers take records or a ``ReportData`` verbatim and only format them.
CSV cells are always double-quoted and rows are joined with ``\\n``.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Iterable, Sequence

from medprep.domains.journal.domain_logic.journal_models import (
    ImpactCategory,
    ReportData,
    SleepEntry,
    Symptom,
)

LIFE_IMPACT_HEADERS = [
    "Date", "Time", "Body Region", "Symptom Type", "Severity",
    "Work Impact", "Sleep Impact", "Social Impact", "Mobility Impact", "Mood Impact",
    "Description",
]

SLEEP_HEADERS = [
    "Date", "Bedtime", "Wake Time", "Duration (hours)", "Quality (1-5)", "Notes",
]

REPORT_DETAIL_LIMIT = 10

DISCLAIMER = (
    "This report is generated from self-reported symptom data and is intended "
    "to assist healthcare providers. Not for self-diagnosis."
)


def format_date(moment: datetime | date) -> str:
    return f"{moment.month}/{moment.day}/{moment.year}"


def format_time(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def format_datetime(moment: datetime) -> str:
    return f"{format_date(moment)}, {moment.strftime('%H:%M:%S')}"


def _to_csv(rows: Iterable[Sequence[object]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def life_impact_csv(symptoms: Iterable[Symptom]) -> str:
    """CSV of symptoms that carry a life-impact rating, in input order."""
    rows: list[list[object]] = [LIFE_IMPACT_HEADERS]
    for symptom in symptoms:
        if symptom.life_impact is None:
            continue
        rows.append([
            format_date(symptom.timestamp),
            format_time(symptom.timestamp),
            symptom.region.plain,
            symptom.type,
            symptom.severity,
            *(symptom.life_impact.level(c).value for c in ImpactCategory),
            symptom.description,
        ])
    return _to_csv(rows)


def sleep_csv(sleep_entries: Iterable[SleepEntry]) -> str:
    rows: list[list[object]] = [SLEEP_HEADERS]
    for entry in sleep_entries:
        rows.append([
            format_date(entry.bedtime),
            format_time(entry.bedtime),
            format_time(entry.waketime),
            f"{entry.duration:.1f}",
            entry.quality,
            entry.notes or "",
        ])
    return _to_csv(rows)


def render_text_report(report: ReportData, *, patient: str) -> str:
    """Plain-text medical report: header, summary statistics and the ten
    most recent symptoms in the window."""
    lines = [
        "MEDICAL SYMPTOM REPORT",
        f"Generated: {format_datetime(report.generated_at)}",
        f"Time Period: {report.timeframe_label}",
        f"Patient: {patient}",
        "",
        "SUMMARY STATISTICS",
        "==================",
        f"Total Symptoms: {report.total_count}",
        f"Average Severity: {report.avg_severity:.1f}/10",
        f"Severity Range: {report.min_severity}/10 - {report.max_severity}/10",
    ]

    affected = [
        f"{category} ({count})" for category, count in report.impact_stats.items() if count
    ]
    if affected:
        lines.append(f"Life Impact: {', '.join(affected)}")
    if report.sleep_correlation is not None:
        lines.append(
            f"Sleep: {report.sleep_correlation.description} "
            f"(Confidence: {report.sleep_correlation.confidence.value})"
        )

    lines += ["", "DETAILED SYMPTOM LOG", "==================="]
    newest_first = sorted(report.symptoms, key=lambda s: s.timestamp, reverse=True)
    for index, symptom in enumerate(newest_first[:REPORT_DETAIL_LIMIT], start=1):
        lines += [
            "",
            f"{index}. {format_datetime(symptom.timestamp)}",
            f"Location: {symptom.region.plain}",
            f"Type: {symptom.type}",
            f"Severity: {symptom.severity}/10",
            f"Description: {symptom.description}",
        ]
        if symptom.notes:
            lines.append(f"Notes: {symptom.notes}")
        if symptom.has_photo:
            lines.append("[Photo attached in journal]")

    lines += [
        "",
        "==================",
        f"This report contains {report.total_count} total symptoms.",
        DISCLAIMER,
        "Generated by MedPrep Journal",
    ]
    return "\n".join(lines)


def export_filename(kind: str, extension: str, today: date | None = None) -> str:
    """e.g. ``medprep-sleep-data-2026-03-01.csv``."""
    today = today or date.today()
    return f"medprep-{kind}-{today.isoformat()}.{extension}"
