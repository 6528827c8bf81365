"""Seed the database with a demo customer and driver."""

import asyncio

from skipjobs.config import get_settings
from skipjobs.db import crud
from skipjobs.db.engine import create_engine_for, create_session_factory, create_tables


async def seed():
    engine = create_engine_for(get_settings().database_url)
    await create_tables(engine)
    factory = create_session_factory(engine)

    async with factory() as db:
        drivers = await crud.list_drivers(db, active_only=False)
        if any(d.name == "J. Doe" for d in drivers):
            print("Demo driver already exists, skipping seed.")
            await engine.dispose()
            return

        customer = await crud.create_customer(
            db, "Acme Ltd",
            address="14 Mill Road, Navan, Co. Meath",
            contact_name="Mary Byrne",
            contact_phone="046 902 1234",
        )
        print(f"Created customer: {customer.name} (id: {customer.id})")

        driver = await crud.create_driver(db, "J. Doe", phone="087 123 4567")
        print(f"Created driver: {driver.name} (id: {driver.id})")

    await engine.dispose()
    print("\nSeed complete. Start the server with: uvicorn skipjobs.main:app --reload")


if __name__ == "__main__":
    asyncio.run(seed())
