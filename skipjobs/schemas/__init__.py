"""Pydantic request/response schemas."""

from skipjobs.schemas.customer import CustomerRead, DriverRead
from skipjobs.schemas.completion import (
    JobCompletionCreate, CompletionWeightUpdate, CompletionRead, LocationRead, SkipLocationRead,
)
from skipjobs.schemas.skip_job import JobCreate, JobPatch, JobRead
from skipjobs.schemas.status_history import StatusHistoryRead

__all__ = [
    "CustomerRead", "DriverRead",
    "JobCompletionCreate", "CompletionWeightUpdate", "CompletionRead", "LocationRead",
    "SkipLocationRead",
    "JobCreate", "JobPatch", "JobRead",
    "StatusHistoryRead",
]
