"""
Roster Backend — Report Template Tests
=======================================

What:  Rendering of each report type from a fixed RosterSnapshot.
"""

from datetime import datetime, timezone
from uuid import UUID

import pytest

from roster.exceptions import ValidationError
from roster.models.employee import Employee
from roster.services.report_templates import (
    RENDERERS,
    RosterSnapshot,
    normalize_report_type,
    render_report,
)

GENERATED = datetime(2024, 3, 5, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def snapshot() -> RosterSnapshot:
    stamp = datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc)
    employees = [
        Employee(
            id=UUID("00000000-0000-0000-0000-000000000001"),
            first_name="Ana", last_name="Horvat", position="Developer",
            department="IT", email="ana@example.com",
            created_at=stamp, updated_at=stamp,
        ),
        Employee(
            id=UUID("00000000-0000-0000-0000-000000000002"),
            first_name="Ivo", last_name="Kovač", position="Developer",
            department="IT", email="ivo@example.com",
            created_at=stamp, updated_at=stamp,
        ),
        Employee(
            id=UUID("00000000-0000-0000-0000-000000000003"),
            first_name="Maja", last_name="Novak", position="Accountant",
            department="Finance", email="maja@example.com",
            created_at=stamp, updated_at=stamp,
        ),
    ]
    return RosterSnapshot(
        employees=employees,
        department_counts=[("IT", 2), ("Finance", 1)],
        position_counts=[("Developer", 2), ("Accountant", 1)],
        generated_at=GENERATED,
    )


class TestReportTypes:

    @pytest.mark.parametrize("raw", ["general", "GENERAL", " Export "])
    def test_normalize(self, raw):
        assert normalize_report_type(raw) in RENDERERS

    def test_unknown_type(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_report_type("payroll")
        assert exc_info.value.context["field"] == "type"
        assert "general" in exc_info.value.context["allowed_types"]


class TestRenderers:

    def test_general(self, snapshot):
        content = render_report("general", snapshot)
        assert content.startswith("GENERAL EMPLOYEE REPORT")
        assert "Total employees: 3" in content
        assert "Generated: 05.03.2024 14:30" in content
        assert "1. Ana Horvat - IT - ana@example.com" in content
        assert "3. Maja Novak - Finance - maja@example.com" in content

    def test_department(self, snapshot):
        content = render_report("department", snapshot)
        assert content.startswith("DEPARTMENT REPORT")
        assert content.index("IT: 2 employees") < content.index("Finance: 1 employees")

    def test_position_groups_by_position(self, snapshot):
        content = render_report("position", snapshot)
        assert "Distinct positions: 2" in content
        assert "Developer: 2 employees" in content
        assert "Accountant: 1 employees" in content

    def test_statistics(self, snapshot):
        content = render_report("statistics", snapshot)
        assert "• Total employees: 3" in content
        assert "• Departments: 2" in content
        assert "• Average employees per department: 1.5" in content

    def test_export_contains_csv(self, snapshot):
        content = render_report("export", snapshot)
        assert "Exported 3 employee records." in content
        assert "id,first_name,last_name,position,department,email,created_at,updated_at" in content
        assert (
            "00000000-0000-0000-0000-000000000002,Ivo,Kovač,Developer,IT,"
            "ivo@example.com,2024-01-02 09:00:00,2024-01-02 09:00:00"
        ) in content

    def test_empty_roster(self):
        empty = RosterSnapshot(employees=[], generated_at=GENERATED)
        assert "Total employees: 0" in render_report("general", empty)
        assert "Average employees per department: 0.0" in render_report("statistics", empty)
        assert "Exported 0 employee records." in render_report("export", empty)
