from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel


class StatusHistoryRead(BaseModel):
    id: int
    skip_job_id: str
    old_status: str | None = None
    new_status: str
    changed_by: str
    created_at: datetime

    model_config = {"from_attributes": True}
