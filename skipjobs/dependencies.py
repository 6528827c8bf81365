"""FastAPI dependency providers for settings, DB sessions and collaborators."""

from __future__ import annotations

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from skipjobs.config import Settings
from skipjobs.db.engine import get_db
from skipjobs.services.email import ResendMailer, build_mailer
from skipjobs.services.job_lifecycle import JobLifecycle
from skipjobs.services.sms import TwilioTransport, build_transport


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_sms_transport(
    request: Request,
    settings: Settings = Depends(get_settings_dep),
) -> TwilioTransport:
    """Transport bound to the process-wide httpx client opened by the lifespan."""
    return build_transport(request.app.state.http_client, settings.sms)


def get_mailer(settings: Settings = Depends(get_settings_dep)) -> ResendMailer:
    return build_mailer(settings)


async def get_lifecycle(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
    sms: TwilioTransport = Depends(get_sms_transport),
    mailer: ResendMailer = Depends(get_mailer),
) -> JobLifecycle:
    return JobLifecycle(db, settings, sms, mailer)
