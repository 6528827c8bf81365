"""CRUD operations for skip dispatch models."""

from __future__ import annotations

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skipjobs.models import (
    Customer, Driver, SkipJob, SkipJobCompletion, SkipJobStatusHistory, DocketCounter,
)


# ── Customer / Driver ─────────────────────────────────────

async def create_customer(
    db: AsyncSession, name: str, address: str | None = None,
    contact_name: str | None = None, contact_phone: str | None = None,
    notes: str | None = None,
) -> Customer:
    customer = Customer(
        name=name, address=address, contact_name=contact_name,
        contact_phone=contact_phone, notes=notes,
    )
    db.add(customer)
    await db.commit()
    await db.refresh(customer)
    return customer


async def get_customer(db: AsyncSession, customer_id: str) -> Customer | None:
    return await db.get(Customer, customer_id)


async def create_driver(db: AsyncSession, name: str, phone: str = "") -> Driver:
    driver = Driver(name=name, phone=phone)
    db.add(driver)
    await db.commit()
    await db.refresh(driver)
    return driver


async def get_driver(db: AsyncSession, driver_id: str) -> Driver | None:
    return await db.get(Driver, driver_id)


async def list_drivers(db: AsyncSession, active_only: bool = True) -> list[Driver]:
    stmt = select(Driver).order_by(Driver.name)
    if active_only:
        stmt = stmt.where(Driver.is_active == True)
    result = await db.execute(stmt)
    return list(result.scalars().all())


# ── Docket numbers ───────────────────────────────────────

def _dialect_insert(db: AsyncSession):
    if db.get_bind().dialect.name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        from sqlalchemy.dialects.sqlite import insert
    return insert


async def next_docket_sequence(db: AsyncSession, job_date: date) -> int:
    """Atomically advance and return the docket counter for ``job_date``.

    One INSERT .. ON CONFLICT DO UPDATE .. RETURNING statement; the value is
    never read and written back from Python. Runs inside the caller's
    transaction and is not committed here.
    """
    insert = _dialect_insert(db)
    stmt = insert(DocketCounter).values(job_date=job_date, last_value=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=[DocketCounter.job_date],
        set_={"last_value": DocketCounter.last_value + 1},
    ).returning(DocketCounter.last_value)
    result = await db.execute(stmt)
    return result.scalar_one()


def format_docket_no(job_date: date, sequence: int, suffix: str) -> str:
    """YYMMDD-NNNN-<suffix>, e.g. 250314-0007-IMR."""
    return f"{job_date:%y%m%d}-{sequence:04d}-{suffix}"


async def allocate_docket_no(db: AsyncSession, job_date: date, suffix: str) -> str:
    sequence = await next_docket_sequence(db, job_date)
    return format_docket_no(job_date, sequence, suffix)


# ── SkipJob ──────────────────────────────────────────────

async def get_job(db: AsyncSession, job_id: str) -> SkipJob | None:
    result = await db.execute(
        select(SkipJob)
        .where(SkipJob.id == job_id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def get_job_by_token(db: AsyncSession, job_token: str) -> SkipJob | None:
    result = await db.execute(
        select(SkipJob)
        .where(SkipJob.job_token == job_token)
        .execution_options(populate_existing=True)
    )
    return result.scalars().first()


async def list_jobs(
    db: AsyncSession, job_date: date | None = None,
    status: str | None = None, driver_id: str | None = None,
) -> list[SkipJob]:
    stmt = select(SkipJob).order_by(SkipJob.job_date.desc(), SkipJob.created_at.desc())
    if job_date is not None:
        stmt = stmt.where(SkipJob.job_date == job_date)
    if status is not None:
        stmt = stmt.where(SkipJob.status == status)
    if driver_id is not None:
        stmt = stmt.where(SkipJob.driver_id == driver_id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


# ── Completion ───────────────────────────────────────────

async def get_completion(db: AsyncSession, completion_id: str) -> SkipJobCompletion | None:
    return await db.get(SkipJobCompletion, completion_id)


async def get_completion_for_job(db: AsyncSession, job_id: str) -> SkipJobCompletion | None:
    result = await db.execute(
        select(SkipJobCompletion).where(SkipJobCompletion.skip_job_id == job_id)
    )
    return result.scalars().first()


async def count_completions_for_job(db: AsyncSession, job_id: str) -> int:
    result = await db.execute(
        select(SkipJobCompletion.id).where(SkipJobCompletion.skip_job_id == job_id)
    )
    return len(result.scalars().all())


async def list_drop_completions(db: AsyncSession) -> list[SkipJobCompletion]:
    result = await db.execute(
        select(SkipJobCompletion)
        .where(SkipJobCompletion.action.in_(("drop", "pick_drop")))
        .order_by(SkipJobCompletion.completed_time.desc())
    )
    return list(result.scalars().all())


# ── Status history ───────────────────────────────────────

async def list_status_history(db: AsyncSession, job_id: str) -> list[SkipJobStatusHistory]:
    result = await db.execute(
        select(SkipJobStatusHistory)
        .where(SkipJobStatusHistory.skip_job_id == job_id)
        .order_by(SkipJobStatusHistory.id)
    )
    return list(result.scalars().all())
