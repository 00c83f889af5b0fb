import asyncio
import os
import tempfile
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

_TEST_DB_PATH = Path(tempfile.gettempdir()) / f"cardulary_test_{os.getpid()}.sqlite3"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_PATH}"
os.environ.setdefault("RESEND_API_KEY", "")
os.environ.setdefault("AI_API_KEY", "")

from cardulary.auth import CurrentOrganizer, get_current_organizer  # noqa: E402
from cardulary.config.database import async_session_maker, engine  # noqa: E402
from cardulary.guests.dtos import EventCategory, GuestStatus  # noqa: E402
from cardulary.guests.repository.orm_models import Event, Guest  # noqa: E402
from cardulary.guests.tokens import generate_guest_token  # noqa: E402
from cardulary.main import app  # noqa: E402
from cardulary.models import BaseModel, Organizer  # noqa: E402


async def _create_schema():
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
        await conn.run_sync(BaseModel.metadata.create_all)


@pytest.fixture(scope="session", autouse=True)
def database_schema():
    asyncio.run(_create_schema())
    yield
    _TEST_DB_PATH.unlink(missing_ok=True)


@pytest.fixture(autouse=True)
async def clean_tables():
    yield
    async with engine.begin() as conn:
        for table in reversed(BaseModel.metadata.sorted_tables):
            await conn.execute(table.delete())


@pytest.fixture
def organizer_id():
    return uuid4()


@pytest.fixture
def current_organizer(organizer_id):
    return CurrentOrganizer(organizer_id=organizer_id, name="Sam Rivera")


@pytest.fixture
def client_factory(current_organizer):
    @asynccontextmanager
    async def factory(overrides: dict | None = None, authenticated: bool = True):
        app.dependency_overrides.clear()
        if authenticated:
            app.dependency_overrides[get_current_organizer] = lambda: current_organizer
        for dependency, override in (overrides or {}).items():
            app.dependency_overrides[dependency] = override

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                yield client
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest.fixture
async def client(client_factory):
    async with client_factory() as ac:
        yield ac


class DatabaseSeeder:
    """Inserts rows through the test session so write models see them."""

    def __init__(self, session) -> None:
        self.session = session

    async def organizer(self, organizer_id=None, email="organizer@example.com", name="Sam Rivera"):
        organizer = Organizer(uuid=organizer_id or uuid4(), email=email, name=name)
        self.session.add(organizer)
        await self.session.flush()
        return organizer

    async def event(self, organizer, name="Holiday Cards 2026", custom_message=None):
        event = Event(
            organizer_id=organizer.uuid,
            name=name,
            category=EventCategory.HOLIDAY_CARDS,
            event_date=date(2026, 12, 1),
            custom_message=custom_message,
        )
        self.session.add(event)
        await self.session.flush()
        return event

    async def guest(
        self,
        event,
        first_name="Ada",
        last_name="Lovelace",
        email: str | None = "ada@example.com",
        phone: str | None = None,
        status=GuestStatus.NOT_SENT,
    ):
        guest = Guest(
            event_id=event.uuid,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            token=generate_guest_token(),
            status=status,
        )
        self.session.add(guest)
        await self.session.flush()
        return guest


@pytest.fixture
async def db_session():
    """Session that tests drive directly; everything it wrote is rolled back."""
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def seed(db_session):
    return DatabaseSeeder(db_session)


@pytest.fixture
async def committed_seed():
    """Seeder whose rows are committed, for tests that open their own sessions."""
    async with async_session_maker() as session:
        seeder = DatabaseSeeder(session)
        yield seeder
