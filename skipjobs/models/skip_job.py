"""Skip job model, the aggregate the lifecycle engine mutates."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import String, Text, Date, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skipjobs.models.base import Base, UUIDMixin


class SkipJob(Base, UUIDMixin):
    __tablename__ = "skip_jobs"

    customer_id: Mapped[str] = mapped_column(String(36), ForeignKey("customers.id"))
    driver_id: Mapped[str] = mapped_column(String(36), ForeignKey("drivers.id"))
    truck_reg: Mapped[str] = mapped_column(String(20))
    job_date: Mapped[date] = mapped_column(Date, index=True)
    docket_no: Mapped[str] = mapped_column(String(32), unique=True)
    job_token: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    status: Mapped[str] = mapped_column(String(20), default="created")  # created | sent | in_progress | completed | cancelled
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    office_action: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)  # drop | pick | pick_drop
    skip_size: Mapped[str | None] = mapped_column(String(4), nullable=True, default=None)
    truck_type: Mapped[str | None] = mapped_column(String(20), nullable=True, default=None)  # chain_lift | hook_loader
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    started_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, default=None)

    customer = relationship("Customer", lazy="selectin")
    driver = relationship("Driver", lazy="selectin")
    completion = relationship(
        "SkipJobCompletion", back_populates="skip_job", uselist=False, lazy="selectin",
    )
