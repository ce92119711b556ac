"""
Roster Backend — Report Text Templates
=======================================

What:  Renders report content as plain text from a snapshot of query results.
How:   Pure functions: no database access, no clock reads (the snapshot
       carries generated_at). ReportService builds the snapshot.

Report types:
    general     employee count and a numbered list
    department  head count per department, largest first
    position    distinct positions and head count per position
    statistics  totals, average per department, per-department bullets
    export      record count followed by a CSV block of every employee
"""

import csv
import io
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Sequence, Tuple

from roster.exceptions import ValidationError
from roster.models.employee import Employee

DATE_FORMAT = "%d.%m.%Y %H:%M"
CSV_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
CSV_HEADER = [
    "id",
    "first_name",
    "last_name",
    "position",
    "department",
    "email",
    "created_at",
    "updated_at",
]

GroupCounts = List[Tuple[str, int]]


@dataclass
class RosterSnapshot:
    """
    Query results a report is rendered from.

    department_counts / position_counts are ordered by count descending,
    then name ascending.
    """
    employees: Sequence[Employee]
    department_counts: GroupCounts = field(default_factory=list)
    position_counts: GroupCounts = field(default_factory=list)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def total(self) -> int:
        return len(self.employees)

    @property
    def average_per_department(self) -> float:
        if not self.department_counts:
            return 0.0
        return self.total / len(self.department_counts)


def _header(title: str, snapshot: RosterSnapshot) -> List[str]:
    return [title, "", f"Generated: {snapshot.generated_at.strftime(DATE_FORMAT)}", ""]


def render_general(snapshot: RosterSnapshot) -> str:
    lines = [
        "GENERAL EMPLOYEE REPORT",
        "",
        f"Total employees: {snapshot.total}",
        f"Generated: {snapshot.generated_at.strftime(DATE_FORMAT)}",
        "",
        "EMPLOYEES:",
    ]
    lines.extend(
        f"{i}. {e.first_name} {e.last_name} - {e.department} - {e.email}"
        for i, e in enumerate(snapshot.employees, start=1)
    )
    return "\n".join(lines)


def render_department(snapshot: RosterSnapshot) -> str:
    lines = _header("DEPARTMENT REPORT", snapshot)
    lines.append("EMPLOYEES BY DEPARTMENT:")
    lines.extend(f"{name}: {count} employees" for name, count in snapshot.department_counts)
    return "\n".join(lines)


def render_position(snapshot: RosterSnapshot) -> str:
    lines = _header("POSITION REPORT", snapshot)
    lines.append(f"Total employees: {snapshot.total}")
    lines.append(f"Distinct positions: {len(snapshot.position_counts)}")
    if snapshot.position_counts:
        lines.append("")
        lines.append("EMPLOYEES BY POSITION:")
        lines.extend(f"{name}: {count} employees" for name, count in snapshot.position_counts)
    return "\n".join(lines)


def render_statistics(snapshot: RosterSnapshot) -> str:
    lines = _header("STATISTICS REPORT", snapshot)
    lines.extend([
        "SUMMARY:",
        f"• Total employees: {snapshot.total}",
        f"• Departments: {len(snapshot.department_counts)}",
        f"• Average employees per department: {snapshot.average_per_department:.1f}",
        "",
        "BY DEPARTMENT:",
    ])
    lines.extend(f"• {name}: {count} employees" for name, count in snapshot.department_counts)
    return "\n".join(lines)


def _csv_timestamp(value: datetime) -> str:
    return value.strftime(CSV_TIMESTAMP_FORMAT) if value else ""


def render_export(snapshot: RosterSnapshot) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for e in snapshot.employees:
        writer.writerow([
            str(e.id),
            e.first_name,
            e.last_name,
            e.position,
            e.department,
            e.email,
            _csv_timestamp(e.created_at),
            _csv_timestamp(e.updated_at),
        ])

    lines = _header("DATA EXPORT", snapshot)
    lines.extend([
        f"Exported {snapshot.total} employee records.",
        "Format: CSV",
        "Encoding: UTF-8",
        "",
        buffer.getvalue().rstrip("\n"),
    ])
    return "\n".join(lines)


RENDERERS: Dict[str, Callable[[RosterSnapshot], str]] = {
    "general": render_general,
    "department": render_department,
    "position": render_position,
    "statistics": render_statistics,
    "export": render_export,
}


def normalize_report_type(report_type: str) -> str:
    """
    Lower-case and check a report type.

    Raises:
        ValidationError: not one of RENDERERS
    """
    normalized = (report_type or "").strip().lower()
    if normalized not in RENDERERS:
        raise ValidationError(
            message=(
                f"Unknown report type '{report_type}'. "
                f"Allowed: {', '.join(RENDERERS)}"
            ),
            field="type",
            context={"allowed_types": list(RENDERERS)},
        )
    return normalized


def render_report(report_type: str, snapshot: RosterSnapshot) -> str:
    return RENDERERS[normalize_report_type(report_type)](snapshot)
