"""
Roster Backend — Employee Service
==================================

What:  CRUD and search over the roster.
Who:   Called by the employee routes.

Search:
    A case-insensitive substring match over first name, last name,
    position, department and email. Results are ordered by last name,
    then first name.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roster.exceptions import DatabaseError, NotFoundError
from roster.models.employee import Employee
from roster.schemas.employee import EmployeeCreateRequest, EmployeeUpdateRequest

logger = logging.getLogger(__name__)


class EmployeeService:

    async def list_employees(
        self, db: AsyncSession, query: Optional[str] = None
    ) -> List[Employee]:
        stmt = select(Employee)

        term = (query or "").strip().lower()
        if term:
            pattern = f"%{term}%"
            stmt = stmt.where(
                or_(
                    func.lower(Employee.first_name).like(pattern),
                    func.lower(Employee.last_name).like(pattern),
                    func.lower(Employee.position).like(pattern),
                    func.lower(Employee.department).like(pattern),
                    func.lower(Employee.email).like(pattern),
                )
            )

        stmt = stmt.order_by(Employee.last_name, Employee.first_name)

        try:
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing employees: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve employees. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_employee(self, db: AsyncSession, employee_id: UUID) -> Employee:
        """
        Raises:
            NotFoundError: no employee with this id
        """
        try:
            result = await db.execute(select(Employee).where(Employee.id == employee_id))
            employee = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching employee %s: %s", employee_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the employee. Please try again.",
                context={"employee_id": str(employee_id)},
            )

        if employee is None:
            raise NotFoundError(resource="employee", resource_id=str(employee_id))
        return employee

    async def create_employee(
        self, db: AsyncSession, data: EmployeeCreateRequest
    ) -> Employee:
        now = datetime.now(timezone.utc)
        employee = Employee(
            first_name=data.first_name,
            last_name=data.last_name,
            position=data.position,
            department=data.department,
            email=str(data.email),
            created_at=now,
            updated_at=now,
        )
        try:
            db.add(employee)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating employee: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create_employee"})

        logger.info("Employee %s created (%s)", employee.id, employee.department)
        return employee

    async def update_employee(
        self, db: AsyncSession, employee_id: UUID, data: EmployeeUpdateRequest
    ) -> Employee:
        employee = await self.get_employee(db, employee_id)

        employee.first_name = data.first_name
        employee.last_name = data.last_name
        employee.position = data.position
        employee.department = data.department
        employee.email = str(data.email)
        employee.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating employee %s: %s", employee_id, str(e))
            raise DatabaseError(context={"operation": "update_employee"})

        logger.info("Employee %s updated", employee_id)
        return employee

    async def delete_employee(self, db: AsyncSession, employee_id: UUID) -> None:
        employee = await self.get_employee(db, employee_id)
        try:
            await db.delete(employee)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error deleting employee %s: %s", employee_id, str(e))
            raise DatabaseError(context={"operation": "delete_employee"})

        logger.info("Employee %s deleted", employee_id)


employee_service = EmployeeService()
