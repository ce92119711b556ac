"""
Roster Backend — ORM Models
============================

Importing this package registers every table on Base.metadata
(used by Alembic autogenerate and by the test schema setup).
"""

from roster.models.employee import Employee
from roster.models.report import Report
from roster.models.user import User, UserRole

__all__ = ["Employee", "Report", "User", "UserRole"]
