"""Driver model: receives job SMS and completes jobs in the field."""

from __future__ import annotations

from sqlalchemy import String, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from skipjobs.models.base import Base, UUIDMixin


class Driver(Base, UUIDMixin):
    __tablename__ = "drivers"

    name: Mapped[str] = mapped_column(String(200))
    phone: Mapped[str] = mapped_column(String(50), default="")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
