"""Customer model: the site a skip is delivered to or collected from."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from skipjobs.models.base import Base, UUIDMixin


class Customer(Base, UUIDMixin):
    __tablename__ = "customers"

    name: Mapped[str] = mapped_column(String(200))
    address: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    contact_name: Mapped[str | None] = mapped_column(String(200), nullable=True, default=None)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True, default=None)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
