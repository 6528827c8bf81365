from __future__ import annotations
from pydantic import BaseModel


class CustomerRead(BaseModel):
    id: str
    name: str
    address: str | None = None
    contact_name: str | None = None
    contact_phone: str | None = None

    model_config = {"from_attributes": True}


class DriverRead(BaseModel):
    id: str
    name: str
    phone: str = ""
    is_active: bool = True

    model_config = {"from_attributes": True}
