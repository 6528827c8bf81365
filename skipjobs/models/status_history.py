"""Append-only status history for skip jobs.

skip_job_id carries no foreign key: entries outlive the job they describe
(a deleted job keeps its trail, ending in ``cancelled``).
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Integer, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from skipjobs.models.base import Base, utcnow


class SkipJobStatusHistory(Base):
    __tablename__ = "skip_job_status_history"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    skip_job_id: Mapped[str] = mapped_column(String(36), index=True)
    old_status: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)
    new_status: Mapped[str] = mapped_column(String(20))
    changed_by: Mapped[str] = mapped_column(String(20), default="system")  # office | driver | system
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
