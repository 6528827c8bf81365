"""SQLAlchemy ORM models."""

from skipjobs.models.base import Base
from skipjobs.models.customer import Customer
from skipjobs.models.driver import Driver
from skipjobs.models.skip_job import SkipJob
from skipjobs.models.completion import SkipJobCompletion
from skipjobs.models.status_history import SkipJobStatusHistory
from skipjobs.models.docket_counter import DocketCounter

__all__ = [
    "Base", "Customer", "Driver", "SkipJob", "SkipJobCompletion",
    "SkipJobStatusHistory", "DocketCounter",
]
