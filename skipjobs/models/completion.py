"""Completion record: written once when the driver completes a job."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, Text, Float, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skipjobs.models.base import Base, UUIDMixin
from skipjobs.services.geometry import TaggedLocation, locations_from_columns


class SkipJobCompletion(Base, UUIDMixin):
    __tablename__ = "skip_job_completion"

    skip_job_id: Mapped[str] = mapped_column(String(36), ForeignKey("skip_jobs.id"), unique=True)
    skip_size: Mapped[str | None] = mapped_column(String(4), nullable=True, default=None)
    action: Mapped[str] = mapped_column(String(20))  # drop | pick | pick_drop
    pick_size: Mapped[str | None] = mapped_column(String(4), nullable=True, default=None)
    drop_size: Mapped[str | None] = mapped_column(String(4), nullable=True, default=None)
    site_company: Mapped[str | None] = mapped_column(String(200), nullable=True, default=None)
    customer_signature: Mapped[str | None] = mapped_column(String(200), nullable=True, default=None)
    driver_notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    pick_lat: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    pick_lng: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    drop_lat: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    drop_lng: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    lat: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    lng: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    accuracy_m: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    net_weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    material_type: Mapped[str | None] = mapped_column(String(100), nullable=True, default=None)
    completed_time: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    skip_job = relationship("SkipJob", back_populates="completion", lazy="selectin")

    @property
    def locations(self) -> list[TaggedLocation]:
        return locations_from_columns(self)
