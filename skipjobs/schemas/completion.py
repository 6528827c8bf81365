from __future__ import annotations
from datetime import datetime
from typing import Any
from pydantic import BaseModel

from skipjobs.services.geometry import LocationRole


class JobCompletionCreate(BaseModel):
    """Driver's completion form, submitted against the job token.

    Types are loose; the lifecycle engine validates every field
    and reports all violations together.
    """

    token: str | None = None
    action: str | None = None
    skip_size: str | None = None
    pick_size: str | None = None
    drop_size: str | None = None
    lat: float | None = None
    lng: float | None = None
    accuracy_m: float | None = None
    driver_notes: str | None = None
    customer_signature: str | None = None


class CompletionWeightUpdate(BaseModel):
    """Weighbridge data added by the office after completion.

    Absent fields are left alone; an explicit null clears the value.
    """

    net_weight_kg: Any = None
    material_type: Any = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(include=self.model_fields_set)


class LocationRead(BaseModel):
    role: LocationRole
    lat: float
    lng: float
    accuracy_m: float | None = None

    model_config = {"from_attributes": True}


class CompletionRead(BaseModel):
    id: str
    skip_job_id: str
    skip_size: str | None = None
    action: str
    pick_size: str | None = None
    drop_size: str | None = None
    site_company: str | None = None
    customer_signature: str | None = None
    driver_notes: str | None = None
    pick_lat: float | None = None
    pick_lng: float | None = None
    drop_lat: float | None = None
    drop_lng: float | None = None
    lat: float | None = None
    lng: float | None = None
    accuracy_m: float | None = None
    net_weight_kg: float | None = None
    material_type: str | None = None
    completed_time: datetime
    created_at: datetime
    locations: list[LocationRead] = []

    model_config = {"from_attributes": True}


class SkipLocationRead(BaseModel):
    """A skip currently sitting on a customer site."""

    completion_id: str
    docket_no: str | None = None
    skip_size: str | None = None
    customer_name: str
    customer_address: str | None = None
    driver_name: str | None = None
    lat: float | None = None
    lng: float | None = None
    completed_time: datetime
