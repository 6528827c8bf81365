"""Skip job lifecycle engine.

Every operation follows the same order:

1. validate all inbound fields (ValidationError lists every problem),
2. resolve the job (NotFoundError) and check the transition (ConflictError),
3. write the authoritative change and commit (DependencyFailure on error),
4. run secondary effects whose outcome is reported as a flag.

Status history rows are written in the same transaction as the change they
describe, inside a savepoint, so a failing audit table never blocks a
transition. Nothing is retried here; resending a job notification is the
``send`` transition.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from dataclasses import dataclass
from datetime import date, datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from skipjobs.config import Settings
from skipjobs.db import crud
from skipjobs.models import SkipJob, SkipJobCompletion, SkipJobStatusHistory
from skipjobs.schemas import CompletionWeightUpdate, JobCompletionCreate, JobCreate, JobPatch
from skipjobs.services import job_states
from skipjobs.services.email import ResendMailer, completion_subject, render_completion_email
from skipjobs.services.errors import ConflictError, DependencyFailure, NotFoundError
from skipjobs.services.geometry import involves_drop, involves_pick, locations_to_columns, resolve_locations
from skipjobs.services.pdf_generator import generate_docket_pdf
from skipjobs.services.sms import TwilioTransport, send_job_notification
from skipjobs.services.status_history import record_status_change
from skipjobs.services.validation import ValidationErrors

logger = logging.getLogger(__name__)

OFFICE = "office"
DRIVER = "driver"

_REQUIRED_JOB_FIELDS = ("customer_id", "driver_id", "truck_reg", "job_date")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def generate_job_token() -> str:
    """Unguessable driver-link token, independent of the job id."""
    return secrets.token_urlsafe(32)


@dataclass
class CreateResult:
    job: SkipJob
    sms_sent: bool


@dataclass
class DispatchResult:
    job: SkipJob
    message_sent: bool
    driver_link: str


@dataclass
class CompleteResult:
    job: SkipJob
    completion: SkipJobCompletion
    email_sent: bool
    docket_no: str


@dataclass
class SkipLocation:
    completion_id: str
    docket_no: str | None
    skip_size: str | None
    customer_name: str
    customer_address: str | None
    driver_name: str | None
    lat: float | None
    lng: float | None
    completed_time: datetime


class JobLifecycle:
    """Owns the skip job state machine and its side effects.

    Collaborators are passed in: the session (one per request), settings,
    the SMS transport and the mailer.
    """

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        sms: TwilioTransport,
        mailer: ResendMailer,
    ):
        self.db = db
        self.settings = settings
        self.sms = sms
        self.mailer = mailer

    def driver_link(self, job: SkipJob) -> str:
        return f"{self.settings.app_url.rstrip('/')}/driver/skip/{job.job_token}"

    # ── reads ────────────────────────────────────────────

    async def get_job(self, job_id: str) -> SkipJob:
        ValidationErrors().require_uuid("job_id", job_id).raise_if_errors()
        return await self._load_job(job_id)

    async def get_job_by_token(self, job_token: str) -> SkipJob:
        ValidationErrors().require_non_empty("token", job_token).raise_if_errors()
        job = await crud.get_job_by_token(self.db, job_token)
        if not job:
            raise NotFoundError("Invalid or expired token")
        return job

    async def list_jobs(
        self, job_date: str | None = None, status: str | None = None, driver_id: str | None = None,
    ) -> list[SkipJob]:
        v = ValidationErrors().optional_status("status", status).optional_uuid("driver_id", driver_id)
        if job_date is not None:
            v.require_date("job_date", job_date)
        v.raise_if_errors()
        return await crud.list_jobs(
            self.db,
            job_date=date.fromisoformat(job_date) if job_date else None,
            status=status,
            driver_id=driver_id,
        )

    async def list_history(self, job_id: str) -> list[SkipJobStatusHistory]:
        ValidationErrors().require_uuid("job_id", job_id).raise_if_errors()
        return await crud.list_status_history(self.db, job_id)

    async def list_skip_locations(self) -> list[SkipLocation]:
        """Skips currently left on customer sites, newest first."""
        locations = []
        for completion in await crud.list_drop_completions(self.db):
            job = completion.skip_job
            customer = job.customer if job else None
            locations.append(SkipLocation(
                completion_id=completion.id,
                docket_no=job.docket_no if job else None,
                skip_size=completion.drop_size or completion.skip_size,
                customer_name=customer.name if customer else "Unknown",
                customer_address=customer.address if customer else None,
                driver_name=job.driver.name if job and job.driver else None,
                lat=completion.drop_lat,
                lng=completion.drop_lng,
                completed_time=completion.completed_time,
            ))
        return locations

    # ── create ───────────────────────────────────────────

    async def create_job(self, data: JobCreate) -> CreateResult:
        (
            ValidationErrors()
            .require_uuid("customer_id", data.customer_id)
            .require_uuid("driver_id", data.driver_id)
            .require_non_empty("truck_reg", data.truck_reg)
            .require_date("job_date", data.job_date)
            .optional_action("office_action", data.office_action)
            .optional_skip_size("skip_size", data.skip_size)
            .optional_truck_type("truck_type", data.truck_type)
            .raise_if_errors()
        )

        customer = await crud.get_customer(self.db, data.customer_id)
        if not customer:
            raise NotFoundError("Customer not found")
        driver = await crud.get_driver(self.db, data.driver_id)
        if not driver:
            raise NotFoundError("Driver not found")

        job_date = date.fromisoformat(data.job_date)
        try:
            docket_no = await crud.allocate_docket_no(
                self.db, job_date, self.settings.company.docket_suffix,
            )
            job = SkipJob(
                customer_id=customer.id,
                driver_id=driver.id,
                truck_reg=data.truck_reg.strip(),
                job_date=job_date,
                docket_no=docket_no,
                job_token=generate_job_token(),
                status=job_states.CREATED,
                notes=data.notes,
                office_action=data.office_action,
                skip_size=data.skip_size,
                truck_type=data.truck_type,
            )
            self.db.add(job)
            await self.db.flush()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Job creation failed for %s", data.job_date)
            raise DependencyFailure("Failed to create job")

        await record_status_change(self.db, job.id, None, job_states.CREATED, OFFICE)
        await self._commit("Failed to create job")
        job = await self._load_job(job.id)

        sms_sent = False
        if driver.phone:
            result = await send_job_notification(
                self.sms, driver.phone, customer.name, customer.address, job.docket_no,
            )
            sms_sent = result.success
            if not result.success:
                logger.error("Failed to send SMS notification for %s: %s", job.docket_no, result.error)
        else:
            logger.info("No driver phone number available for SMS notification (%s)", job.docket_no)

        return CreateResult(job=job, sms_sent=sms_sent)

    # ── send ─────────────────────────────────────────────

    async def send_job(self, job_id: str) -> DispatchResult:
        """Dispatch (or re-dispatch) a job to its driver."""
        ValidationErrors().require_uuid("job_id", job_id).raise_if_errors()
        job = await self._load_job(job_id)

        old_status = job.status
        job.status = job_states.next_status("send", old_status)
        if job.sent_at is None:
            job.sent_at = _now()
        await self._flush("Failed to update job status")
        await record_status_change(self.db, job.id, old_status, job.status, OFFICE)
        await self._commit("Failed to update job status")
        job = await self._load_job(job.id)

        link = self.driver_link(job)
        message_sent = False
        if job.driver and job.driver.phone:
            result = await send_job_notification(
                self.sms,
                job.driver.phone,
                job.customer.name if job.customer else "Unknown Customer",
                job.customer.address if job.customer else None,
                job.docket_no,
                driver_link=link,
            )
            message_sent = result.success
            if not result.success:
                logger.error("Failed to send SMS notification for %s: %s", job.docket_no, result.error)
        else:
            logger.error("Missing driver phone for job %s", job.docket_no)

        return DispatchResult(job=job, message_sent=message_sent, driver_link=link)

    # ── start ────────────────────────────────────────────

    async def start_job(self, job_id: str) -> SkipJob:
        ValidationErrors().require_uuid("job_id", job_id).raise_if_errors()
        job = await self._load_job(job_id)

        old_status = job.status
        job.status = job_states.next_status("start", old_status)
        if job.started_at is None:
            job.started_at = _now()
        await self._flush("Failed to start job")
        await record_status_change(self.db, job.id, old_status, job.status, DRIVER)
        await self._commit("Failed to start job")
        return await self._load_job(job.id)

    # ── complete ─────────────────────────────────────────

    def _validate_completion(self, data: JobCompletionCreate) -> None:
        v = (
            ValidationErrors()
            .require_non_empty("token", data.token)
            .require_action("action", data.action)
            .optional_skip_size("skip_size", data.skip_size)
            .optional_skip_size("pick_size", data.pick_size)
            .optional_skip_size("drop_size", data.drop_size)
            .optional_number("lat", data.lat, minimum=-90, maximum=90)
            .optional_number("lng", data.lng, minimum=-180, maximum=180)
            .optional_number("accuracy_m", data.accuracy_m, minimum=0)
        )
        if (data.lat is None) != (data.lng is None):
            v.add("lat and lng must be provided together")
        if involves_pick(data.action) and not data.pick_size:
            v.add(f"pick_size is required when action is {data.action}")
        if involves_drop(data.action) and not data.drop_size:
            v.add(f"drop_size is required when action is {data.action}")
        v.raise_if_errors()

    async def complete_job(self, data: JobCompletionCreate) -> CompleteResult:
        """Record the driver's completion.

        The Completion row and the status change commit together. PDF and
        email run afterwards; their failure only clears ``email_sent``.
        Calling this again for the same token is a ConflictError.
        """
        self._validate_completion(data)

        job = await crud.get_job_by_token(self.db, data.token)
        if not job:
            raise NotFoundError("Invalid or expired token")

        old_status = job.status
        new_status = job_states.next_status("complete", old_status)
        completed_time = _now()

        yard = self.settings.yard
        if involves_pick(data.action) and not yard.configured:
            logger.warning("Yard coordinates not configured; pick location left empty for %s", job.docket_no)
        locations = resolve_locations(
            data.action, yard.lat, yard.lng, data.lat, data.lng, data.accuracy_m,
        )

        completion = SkipJobCompletion(
            skip_job_id=job.id,
            skip_size=data.skip_size or data.drop_size or data.pick_size,
            action=data.action,
            pick_size=data.pick_size,
            drop_size=data.drop_size,
            site_company=job.customer.name if job.customer else None,
            customer_signature=data.customer_signature or None,
            driver_notes=data.driver_notes,
            completed_time=completed_time,
            **locations_to_columns(locations),
        )
        self.db.add(completion)
        job.status = new_status
        job.completed_at = completed_time
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.warning("Duplicate completion rejected for job %s", job.id)
            raise ConflictError("Job already completed")
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception("Completion creation error for job %s", job.id)
            raise DependencyFailure("Failed to save completion")

        await record_status_change(self.db, job.id, old_status, new_status, DRIVER)
        await self._commit("Failed to save completion")

        job = await self._load_job(job.id)
        completion = job.completion
        email_sent = await self._send_completion_email(job, completion)

        return CompleteResult(
            job=job, completion=completion, email_sent=email_sent, docket_no=job.docket_no,
        )

    async def _send_completion_email(self, job: SkipJob, completion: SkipJobCompletion) -> bool:
        try:
            pdf_bytes = generate_docket_pdf(job, completion, self.settings.company)
        except Exception:
            logger.exception("Docket PDF generation failed for %s", job.docket_no)
            return False

        html = render_completion_email(job, completion)
        return await asyncio.to_thread(
            self.mailer.send,
            self.settings.email.to_address,
            completion_subject(job.docket_no),
            html,
            [(f"{job.docket_no}.pdf", pdf_bytes)],
        )

    # ── update ───────────────────────────────────────────

    async def update_job(self, job_id: str, patch: JobPatch) -> SkipJob:
        changes = patch.changes()
        v = ValidationErrors().require_uuid("job_id", job_id)
        for field in _REQUIRED_JOB_FIELDS:
            if field in changes and changes[field] is None:
                v.add(f"{field} cannot be cleared")
        if changes.get("customer_id") is not None:
            v.require_uuid("customer_id", changes["customer_id"])
        if changes.get("driver_id") is not None:
            v.require_uuid("driver_id", changes["driver_id"])
        if changes.get("truck_reg") is not None:
            v.require_non_empty("truck_reg", changes["truck_reg"])
        if changes.get("job_date") is not None:
            v.require_date("job_date", changes["job_date"])
        (
            v.optional_action("office_action", changes.get("office_action"))
            .optional_skip_size("skip_size", changes.get("skip_size"))
            .optional_truck_type("truck_type", changes.get("truck_type"))
            .raise_if_errors()
        )

        job = await self._load_job(job_id)
        job_states.next_status("update", job.status)

        if changes.get("customer_id") and not await crud.get_customer(self.db, changes["customer_id"]):
            raise NotFoundError("Customer not found")
        if changes.get("driver_id") and not await crud.get_driver(self.db, changes["driver_id"]):
            raise NotFoundError("Driver not found")

        if "job_date" in changes:
            changes["job_date"] = date.fromisoformat(changes["job_date"])
        if changes.get("truck_reg"):
            changes["truck_reg"] = changes["truck_reg"].strip()
        for field, value in changes.items():
            setattr(job, field, value)

        if changes:
            await self._commit("Failed to update job")
        return await self._load_job(job.id)

    # ── delete ───────────────────────────────────────────

    async def delete_job(self, job_id: str) -> None:
        """Hard-delete an open job after logging it as cancelled."""
        ValidationErrors().require_uuid("job_id", job_id).raise_if_errors()
        job = await self._load_job(job_id)

        old_status = job.status
        new_status = job_states.next_status("delete", old_status)
        await record_status_change(self.db, job.id, old_status, new_status, OFFICE)
        await self.db.delete(job)
        await self._commit("Failed to delete job")

    # ── weighbridge ──────────────────────────────────────

    async def update_completion_weight(
        self, completion_id: str, update: CompletionWeightUpdate,
    ) -> SkipJobCompletion:
        """The one edit allowed after completion: weight and material."""
        changes = update.changes()
        (
            ValidationErrors()
            .require_uuid("completion_id", completion_id)
            .optional_number("net_weight_kg", changes.get("net_weight_kg"), minimum=0)
            .optional_string("material_type", changes.get("material_type"))
            .raise_if_errors()
        )

        completion = await crud.get_completion(self.db, completion_id)
        if not completion:
            raise NotFoundError("Completion not found")

        if "net_weight_kg" in changes:
            completion.net_weight_kg = changes["net_weight_kg"]
        if "material_type" in changes:
            completion.material_type = changes["material_type"] or None

        if changes:
            await self._commit("Failed to update weight")
            await self.db.refresh(completion)
        return completion

    # ── helpers ──────────────────────────────────────────

    async def _load_job(self, job_id: str) -> SkipJob:
        job = await crud.get_job(self.db, job_id)
        if not job:
            raise NotFoundError("Job not found")
        return job

    async def _flush(self, failure_message: str) -> None:
        try:
            await self.db.flush()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(failure_message)
            raise DependencyFailure(failure_message)

    async def _commit(self, failure_message: str) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(failure_message)
            raise DependencyFailure(failure_message)
