"""Completion API: weighbridge data entered by the office after the visit."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from skipjobs.dependencies import get_lifecycle
from skipjobs.schemas import CompletionRead, CompletionWeightUpdate
from skipjobs.services.job_lifecycle import JobLifecycle

router = APIRouter(prefix="/api/completions", tags=["completions"])


@router.put("/{completion_id}/weight")
async def update_completion_weight(
    completion_id: str,
    body: CompletionWeightUpdate,
    lifecycle: JobLifecycle = Depends(get_lifecycle),
):
    completion = await lifecycle.update_completion_weight(completion_id, body)
    return {"success": True, "completion": CompletionRead.model_validate(completion)}
