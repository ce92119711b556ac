"""
Roster Backend — Report & Statistics Schemas
=============================================
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator

REPORT_TYPES = ("general", "department", "position", "statistics", "export")


class ReportRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    type: str = Field(description=f"One of: {', '.join(REPORT_TYPES)}")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be blank")
        return v


class ReportResponse(BaseModel):
    id: str
    title: str
    type: str
    content: str
    created_at: datetime
    created_by: str
    download_url: str


class StatisticsResponse(BaseModel):
    """
    Aggregate view of the roster, computed with GROUP BY queries.

    largest_department / most_popular_position are null for an empty roster.
    """
    total_employees: int
    total_departments: int
    total_positions: int
    department_breakdown: Dict[str, int]
    position_breakdown: Dict[str, int]
    average_employees_per_department: float
    largest_department: Optional[str] = None
    most_popular_position: Optional[str] = None
