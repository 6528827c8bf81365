from __future__ import annotations
from datetime import date, datetime
from typing import Any
from pydantic import BaseModel

from skipjobs.schemas.completion import CompletionRead
from skipjobs.schemas.customer import CustomerRead, DriverRead


class JobCreate(BaseModel):
    customer_id: str | None = None
    driver_id: str | None = None
    truck_reg: str | None = None
    job_date: str | None = None
    notes: str | None = None
    office_action: str | None = None
    skip_size: str | None = None
    truck_type: str | None = None


class JobPatch(BaseModel):
    """Sparse office edit.

    Merge rule: a field absent from the payload is left untouched, a field
    present with null clears it. Required job fields may not be cleared.
    """

    customer_id: str | None = None
    driver_id: str | None = None
    truck_reg: str | None = None
    job_date: str | None = None
    notes: str | None = None
    office_action: str | None = None
    skip_size: str | None = None
    truck_type: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(include=self.model_fields_set)


class JobRead(BaseModel):
    id: str
    docket_no: str
    job_token: str
    status: str
    job_date: date
    truck_reg: str
    notes: str | None = None
    office_action: str | None = None
    skip_size: str | None = None
    truck_type: str | None = None
    customer_id: str
    driver_id: str
    created_at: datetime
    sent_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    customer: CustomerRead | None = None
    driver: DriverRead | None = None
    completion: CompletionRead | None = None

    model_config = {"from_attributes": True}
