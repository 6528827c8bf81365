"""Skip dispatch CLI: create tables, add customers and drivers, inspect history."""

from __future__ import annotations

import argparse
import asyncio
import sys
from contextlib import asynccontextmanager

from skipjobs.config import get_settings


@asynccontextmanager
async def _session():
    from skipjobs.db.engine import create_engine_for, create_session_factory, create_tables

    engine = create_engine_for(get_settings().database_url)
    try:
        await create_tables(engine)
        factory = create_session_factory(engine)
        async with factory() as db:
            yield db
    finally:
        await engine.dispose()


async def cmd_init_db(args):
    """Create all tables in the configured database."""
    async with _session():
        pass
    print(f"Tables ready in {get_settings().database_url}")


async def cmd_add_customer(args):
    from skipjobs.db import crud

    name = args.name.strip()
    if not name:
        print("Customer name is required")
        sys.exit(1)

    async with _session() as db:
        customer = await crud.create_customer(
            db, name=name, address=args.address or None,
            contact_name=args.contact_name or None, contact_phone=args.contact_phone or None,
        )
    print(f"Customer created: {customer.name} (id={customer.id})")


async def cmd_add_driver(args):
    from skipjobs.db import crud
    from skipjobs.services.validation import is_valid_phone

    if args.phone and not is_valid_phone(args.phone):
        print(f"Invalid phone number: {args.phone}")
        sys.exit(1)

    async with _session() as db:
        driver = await crud.create_driver(db, name=args.name.strip(), phone=args.phone)
    print(f"Driver created: {driver.name} (id={driver.id})")


async def cmd_history(args):
    from skipjobs.db import crud

    async with _session() as db:
        entries = await crud.list_status_history(db, args.job_id)

    if not entries:
        print(f"No status history for job {args.job_id}")
        return
    for entry in entries:
        print(
            f"{entry.created_at:%Y-%m-%d %H:%M:%S}  "
            f"{entry.old_status or '-':>11} -> {entry.new_status:<11}  by {entry.changed_by}"
        )


def main():
    parser = argparse.ArgumentParser(description="Skip dispatch CLI")
    subparsers = parser.add_subparsers(dest="command")

    # init-db
    subparsers.add_parser("init-db", help="Create database tables")

    # add-customer
    ac = subparsers.add_parser("add-customer", help="Add a customer")
    ac.add_argument("--name", required=True, help="Customer name")
    ac.add_argument("--address", default="", help="Site address")
    ac.add_argument("--contact-name", default="", help="Contact name")
    ac.add_argument("--contact-phone", default="", help="Contact phone")

    # add-driver
    ad = subparsers.add_parser("add-driver", help="Add a driver")
    ad.add_argument("--name", required=True, help="Driver name")
    ad.add_argument("--phone", default="", help="Mobile number for job SMS")

    # history
    hi = subparsers.add_parser("history", help="Show a job's status history")
    hi.add_argument("job_id", help="Job id")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "add-customer":
        asyncio.run(cmd_add_customer(args))
    elif args.command == "add-driver":
        asyncio.run(cmd_add_driver(args))
    elif args.command == "history":
        asyncio.run(cmd_history(args))


if __name__ == "__main__":
    main()
