"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from skipjobs.api.router import api_router
from skipjobs.config import Settings, get_settings
from skipjobs.db.engine import create_engine_for, create_session_factory, create_tables
from skipjobs.services.errors import SkipJobError

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    engine = create_engine_for(settings.database_url)
    await create_tables(engine)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.http_client = httpx.AsyncClient(timeout=settings.sms.timeout_s)
    logger.info("Skip dispatch started (db=%s)", engine.url.render_as_string(hide_password=True))

    yield

    await app.state.http_client.aclose()
    await engine.dispose()


async def skip_job_error_handler(request: Request, exc: SkipJobError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies in the same shape as field validation."""
    details = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        details.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Skip Dispatch",
        description="Skip job dispatch: office creates and sends jobs, drivers start and complete them.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_exception_handler(SkipJobError, skip_job_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(api_router)
    return app


app = create_app()
