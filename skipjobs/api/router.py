"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from skipjobs.api.skip_jobs import router as skip_jobs_router
from skipjobs.api.completions import router as completions_router

api_router = APIRouter()
api_router.include_router(skip_jobs_router)
api_router.include_router(completions_router)
