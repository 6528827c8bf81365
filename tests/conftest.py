import pytest
import pytest_asyncio

from skipjobs.config import Settings, YardConfig, EmailConfig, SmsConfig
from skipjobs.db import crud
from skipjobs.db.engine import create_engine_for, create_session_factory, create_tables
from skipjobs.services.job_lifecycle import JobLifecycle
from tests.fakes import FakeMailer, FakeTransport, YARD_LAT, YARD_LNG


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        app_url="https://dispatch.test",
        yard=YardConfig(lat=YARD_LAT, lng=YARD_LNG),
        sms=SmsConfig(account_sid="AC123", auth_token="secret", from_number="+15005550006"),
        email=EmailConfig(to_address="office@test.ie"),
    )


@pytest_asyncio.fixture
async def db():
    engine = create_engine_for("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    factory = create_session_factory(engine)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def sms():
    return FakeTransport()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def lifecycle(db, settings, sms, mailer):
    return JobLifecycle(db, settings, sms, mailer)


@pytest_asyncio.fixture
async def customer(db):
    return await crud.create_customer(db, "Acme Ltd", address="14 Mill Road, Navan")


@pytest_asyncio.fixture
async def driver(db):
    return await crud.create_driver(db, "J. Doe", phone="087 123 4567")
