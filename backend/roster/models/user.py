"""
Roster Backend — User SQLAlchemy Model
=======================================

What:  ORM model for the `users` table (API accounts, not employees).

Columns:
    - password_hash: credential record from roster.security.credentials,
      base64 of salt || derived key (88 characters)
    - role: "Admin" or "User"; Admin is required for roster changes
    - reset_token / reset_token_expires_at: one pending password reset at most
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, Index, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from roster.database import Base


class UserRole:
    ADMIN = "Admin"
    USER = "User"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    username: Mapped[str] = mapped_column(String(50), nullable=False)

    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.USER,
        server_default=text("'User'"),
    )

    reset_token: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, default=None)

    reset_token_expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("ix_users_username", "username", unique=True),
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', role='{self.role}')>"
