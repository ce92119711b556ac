"""
Roster Backend — Report SQLAlchemy Model
=========================================

What:  ORM model for the `reports` table. A report is a text snapshot of
       the roster taken when it was generated; it is never re-rendered.

Index on created_at DESC: the report list is always newest first.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from roster.database import Base


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)

    # general, department, position, statistics, export
    type: Mapped[str] = mapped_column(String(20), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # Username of the caller that generated the report
    created_by: Mapped[str] = mapped_column(String(50), nullable=False)

    download_url: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    __table_args__ = (
        Index("ix_reports_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Report(id={self.id}, type='{self.type}', created_at='{self.created_at}')>"
