from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Integer
from sqlalchemy.orm import Mapped, mapped_column

from skipjobs.models.base import Base


class DocketCounter(Base):
    """Last docket sequence issued per job date."""

    __tablename__ = "docket_counters"

    job_date: Mapped[date] = mapped_column(Date, primary_key=True)
    last_value: Mapped[int] = mapped_column(Integer, default=0)
