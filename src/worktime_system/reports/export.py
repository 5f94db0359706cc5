"""Tabular export of weekly reports (pandas, openpyxl for xlsx)."""

from __future__ import annotations

import io

import pandas as pd

from ..common.datetime_utils import format_time
from ..core.exceptions import ValidationError
from .model import WeeklyReport

EXPORT_COLUMNS = [
    "occurrence_date",
    "start_time",
    "end_time",
    "label",
    "category",
    "status",
    "planned_hours",
    "actual_hours",
    "deadline",
]

EXPORT_MIMETYPES = {
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "csv": "text/csv",
}


def report_frame(report: WeeklyReport) -> pd.DataFrame:
    rows = [
        {
            "occurrence_date": e.occurrence_date.isoformat(),
            "start_time": format_time(e.start_time),
            "end_time": format_time(e.end_time),
            "label": e.label,
            "category": e.category,
            "status": e.status.value,
            "planned_hours": e.planned_hours,
            "actual_hours": e.actual_hours,
            "deadline": e.deadline.isoformat() if e.deadline else "",
        }
        for e in report.entries
    ]
    return pd.DataFrame(rows, columns=EXPORT_COLUMNS)


def summary_frame(report: WeeklyReport) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "owner_id": report.owner_id,
                "scope_id": report.scope_id if report.scope_id is not None else "",
                "week_start": report.week_start.isoformat(),
                "week_end": report.week_end.isoformat(),
                "total_planned": report.total_planned,
                "total_actual": report.total_actual,
                "variance_hours": report.variance_hours,
            }
        ]
    )


def export_weekly_report(report: WeeklyReport, fmt: str = "xlsx") -> bytes:
    fmt = (fmt or "").strip().lower()
    if fmt not in EXPORT_MIMETYPES:
        raise ValidationError(f"Unsupported export format: {fmt!r}")

    entries = report_frame(report)
    if fmt == "csv":
        return entries.to_csv(index=False).encode("utf-8")

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        entries.to_excel(writer, sheet_name="Entries", index=False)
        summary_frame(report).to_excel(writer, sheet_name="Summary", index=False)
    return buffer.getvalue()
