"""
Roster Backend — Employee Schemas
==================================

What:  Create/update payloads and the employee representation returned by
       the API. Field limits mirror the `employees` column sizes.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


class EmployeeCreateRequest(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    position: str = Field(min_length=1, max_length=100)
    department: str = Field(min_length=1, max_length=100)
    email: EmailStr

    @field_validator("first_name", "last_name", "position", "department")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field cannot be blank")
        return v

    @field_validator("email")
    @classmethod
    def email_fits_column(cls, v: str) -> str:
        if len(v) > 100:
            raise ValueError("Email must be at most 100 characters")
        return v


class EmployeeUpdateRequest(EmployeeCreateRequest):
    pass


class EmployeeResponse(BaseModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    full_name: str
    position: str
    department: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
