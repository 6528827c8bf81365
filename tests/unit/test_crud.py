import asyncio
from datetime import date

import pytest_asyncio

from skipjobs.db import crud
from skipjobs.db.engine import create_engine_for, create_session_factory, create_tables
from skipjobs.models import SkipJob
from skipjobs.services.status_history import record_status_change


@pytest_asyncio.fixture
async def file_factory(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'dockets.db'}")
    await create_tables(engine)
    yield create_session_factory(engine)
    await engine.dispose()


def test_docket_format():
    assert crud.format_docket_no(date(2025, 3, 14), 7, "IMR") == "250314-0007-IMR"
    assert crud.format_docket_no(date(2025, 12, 1), 1234, "XYZ") == "251201-1234-XYZ"


async def test_docket_numbers_are_sequential_per_date(db):
    day = date(2025, 3, 14)
    first = await crud.allocate_docket_no(db, day, "IMR")
    second = await crud.allocate_docket_no(db, day, "IMR")
    other_day = await crud.allocate_docket_no(db, date(2025, 3, 15), "IMR")
    await db.commit()

    assert first == "250314-0001-IMR"
    assert second == "250314-0002-IMR"
    assert other_day == "250315-0001-IMR"


async def test_rolled_back_allocation_does_not_advance(db):
    day = date(2025, 3, 14)
    await crud.allocate_docket_no(db, day, "IMR")
    await db.rollback()
    assert await crud.allocate_docket_no(db, day, "IMR") == "250314-0001-IMR"


async def test_concurrent_allocations_are_distinct(file_factory):
    day = date(2025, 3, 14)

    async def allocate():
        async with file_factory() as session:
            docket_no = await crud.allocate_docket_no(session, day, "IMR")
            await session.commit()
            return docket_no

    dockets = await asyncio.gather(*(allocate() for _ in range(10)))

    assert len(set(dockets)) == 10
    assert sorted(dockets) == [f"250314-{n:04d}-IMR" for n in range(1, 11)]


async def test_list_jobs_filters(db, customer, driver):
    for n, (day, status) in enumerate([
        (date(2025, 3, 14), "created"),
        (date(2025, 3, 14), "sent"),
        (date(2025, 3, 15), "created"),
    ]):
        db.add(SkipJob(
            customer_id=customer.id, driver_id=driver.id, truck_reg="191-D-1234",
            job_date=day, docket_no=f"D{n}", job_token=f"token-{n}", status=status,
        ))
    await db.commit()

    assert len(await crud.list_jobs(db)) == 3
    assert [j.docket_no for j in await crud.list_jobs(db, job_date=date(2025, 3, 14), status="sent")] == ["D1"]
    assert (await crud.list_jobs(db))[0].job_date == date(2025, 3, 15)
    assert await crud.list_jobs(db, driver_id="6f1c2b9e-7d1a-4c4e-9a51-1f2d3c4b5a69") == []


async def test_status_history_is_ordered(db):
    job_id = "6f1c2b9e-7d1a-4c4e-9a51-1f2d3c4b5a69"
    assert await record_status_change(db, job_id, None, "created", "office")
    assert await record_status_change(db, job_id, "created", "sent", "office")
    assert await record_status_change(db, job_id, "sent", "in_progress", "driver")
    await db.commit()

    history = await crud.list_status_history(db, job_id)
    assert [(h.old_status, h.new_status, h.changed_by) for h in history] == [
        (None, "created", "office"),
        ("created", "sent", "office"),
        ("sent", "in_progress", "driver"),
    ]


async def test_list_drivers_active_only(db):
    await crud.create_driver(db, "Zed", phone="0871111111")
    inactive = await crud.create_driver(db, "Amy", phone="0872222222")
    inactive.is_active = False
    await db.commit()

    assert [d.name for d in await crud.list_drivers(db)] == ["Zed"]
    assert [d.name for d in await crud.list_drivers(db, active_only=False)] == ["Amy", "Zed"]
