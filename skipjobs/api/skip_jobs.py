"""Skip job API: office dispatch and driver deep-link actions."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from skipjobs.dependencies import get_lifecycle
from skipjobs.schemas import (
    CompletionRead, JobCompletionCreate, JobCreate, JobPatch, JobRead,
    SkipLocationRead, StatusHistoryRead,
)
from skipjobs.services.job_lifecycle import JobLifecycle

router = APIRouter(prefix="/api/skip-jobs", tags=["skip_jobs"])


@router.post("", status_code=201)
async def create_job(
    body: JobCreate,
    lifecycle: JobLifecycle = Depends(get_lifecycle),
):
    result = await lifecycle.create_job(body)
    return {"job": JobRead.model_validate(result.job), "sms_sent": result.sms_sent}


@router.get("", response_model=list[JobRead])
async def list_jobs(
    job_date: str | None = Query(default=None),
    status: str | None = Query(default=None),
    driver_id: str | None = Query(default=None),
    lifecycle: JobLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.list_jobs(job_date=job_date, status=status, driver_id=driver_id)


@router.get("/locations", response_model=list[SkipLocationRead])
async def list_skip_locations(lifecycle: JobLifecycle = Depends(get_lifecycle)):
    """Skips left on customer sites, for the office tracker."""
    return [SkipLocationRead.model_validate(loc, from_attributes=True)
            for loc in await lifecycle.list_skip_locations()]


@router.get("/by-token/{token}", response_model=JobRead)
async def get_job_by_token(token: str, lifecycle: JobLifecycle = Depends(get_lifecycle)):
    return await lifecycle.get_job_by_token(token)


@router.post("/complete")
async def complete_job(
    body: JobCompletionCreate,
    lifecycle: JobLifecycle = Depends(get_lifecycle),
):
    result = await lifecycle.complete_job(body)
    return {
        "success": True,
        "completion": CompletionRead.model_validate(result.completion),
        "email_sent": result.email_sent,
        "docket_no": result.docket_no,
    }


@router.get("/{job_id}", response_model=JobRead)
async def get_job(job_id: str, lifecycle: JobLifecycle = Depends(get_lifecycle)):
    return await lifecycle.get_job(job_id)


@router.get("/{job_id}/history", response_model=list[StatusHistoryRead])
async def get_job_history(job_id: str, lifecycle: JobLifecycle = Depends(get_lifecycle)):
    return await lifecycle.list_history(job_id)


@router.post("/{job_id}/send")
async def send_job(job_id: str, lifecycle: JobLifecycle = Depends(get_lifecycle)):
    result = await lifecycle.send_job(job_id)
    return {
        "job": JobRead.model_validate(result.job),
        "message_sent": result.message_sent,
        "driver_link": result.driver_link,
    }


@router.post("/{job_id}/start")
async def start_job(job_id: str, lifecycle: JobLifecycle = Depends(get_lifecycle)):
    job = await lifecycle.start_job(job_id)
    return {"success": True, "job": JobRead.model_validate(job)}


@router.put("/{job_id}")
async def update_job(
    job_id: str,
    body: JobPatch,
    lifecycle: JobLifecycle = Depends(get_lifecycle),
):
    job = await lifecycle.update_job(job_id, body)
    return {"job": JobRead.model_validate(job)}


@router.delete("/{job_id}")
async def delete_job(job_id: str, lifecycle: JobLifecycle = Depends(get_lifecycle)):
    await lifecycle.delete_job(job_id)
    return {"success": True}
