"""
Roster Backend — Employee Route Handlers
=========================================

What:  Roster CRUD. Reading needs any authenticated user; changes need Admin.

    GET    /api/employees          list (optional ?q= search)
    GET    /api/employees/{id}     one employee
    POST   /api/employees          create (Admin) → 201
    PUT    /api/employees/{id}     update (Admin) → 204
    DELETE /api/employees/{id}     delete (Admin) → 204
"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from roster.database import get_db_session
from roster.dependencies import get_current_user, require_admin
from roster.models.user import User
from roster.schemas.common import ErrorResponse
from roster.schemas.employee import (
    EmployeeCreateRequest,
    EmployeeResponse,
    EmployeeUpdateRequest,
)
from roster.services.employee_service import employee_service

router = APIRouter(prefix="/api/employees", tags=["Employees"])


@router.get(
    "",
    response_model=List[EmployeeResponse],
    summary="List employees",
    description=(
        "Returns the roster ordered by last name. With `q`, only employees whose "
        "name, position, department or email contains `q` (case-insensitive)."
    ),
)
async def list_employees(
    response: Response,
    q: Optional[str] = Query(default=None, max_length=100, description="Search text"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[EmployeeResponse]:
    employees = await employee_service.list_employees(db, query=q)
    response.headers["X-Total-Count"] = str(len(employees))
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"description": "Employee not found", "model": ErrorResponse}},
    summary="Get one employee",
)
async def get_employee(
    employee_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> EmployeeResponse:
    employee = await employee_service.get_employee(db, employee_id)
    return EmployeeResponse.model_validate(employee)


@router.post(
    "",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"description": "Admin only", "model": ErrorResponse}},
    summary="Add an employee (Admin)",
)
async def create_employee(
    body: EmployeeCreateRequest,
    response: Response,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> EmployeeResponse:
    employee = await employee_service.create_employee(db, body)
    response.headers["Location"] = f"/api/employees/{employee.id}"
    return EmployeeResponse.model_validate(employee)


@router.put(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        403: {"description": "Admin only", "model": ErrorResponse},
        404: {"description": "Employee not found", "model": ErrorResponse},
    },
    summary="Update an employee (Admin)",
)
async def update_employee(
    employee_id: UUID,
    body: EmployeeUpdateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await employee_service.update_employee(db, employee_id, body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{employee_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        403: {"description": "Admin only", "model": ErrorResponse},
        404: {"description": "Employee not found", "model": ErrorResponse},
    },
    summary="Delete an employee (Admin)",
)
async def delete_employee(
    employee_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await employee_service.delete_employee(db, employee_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
