'''
Pytest configuration for the FastAPI application.

This file sets up fixtures for:
1. Forcing the application into TEST_MODE before any code is imported.
2. Providing a fresh in-memory database, seeded through the factories, for each test.
3. Providing an httpx AsyncClient bound to the app for endpoint testing.
4. Providing instances of all service classes, pre-injected with the test db session.
'''
import os

# Must happen before the application (and its settings) are imported.
os.environ["TEST_MODE"] = "True"
os.environ["DATABASE_URL_TEST"] = "sqlite+aiosqlite://"

import pytest
import datetime
from typing import AsyncGenerator

import httpx
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker, AsyncEngine
from sqlalchemy.pool import StaticPool

# --- Constant Imports ----
from tests.constants import (
    TEST_ROOM_A_ID,
    TEST_ROOM_B_ID,
    TEST_ROOM_C_ID,
    TEST_SUBJECT_MATH_ID,
    TEST_SUBJECT_PHYSICS_ID,
    TEST_FACULTY_ID,
    TEST_OTHER_FACULTY_ID,
    TEST_DIVISION_A_ID,
    TEST_DIVISION_B_ID,
    TEST_REGULAR_ENTRY_ID,
    TEST_OTHER_REGULAR_ENTRY_ID,
    TEST_SPECIAL_ENTRY_ID,
    TEST_NEXT_WEDNESDAY,
)
from tests.database import factories

# --- Application Imports ---
from src.tuition_timetable.main import app
from src.tuition_timetable.common.config import settings
from src.tuition_timetable.database.engine import get_db_session
from src.tuition_timetable.database.models import Base
from src.tuition_timetable.models.enums import DayOfWeek, EventType
from src.tuition_timetable.services.entity_store import EntityStoreService
from src.tuition_timetable.services.timetable_service import TimetableService
from src.tuition_timetable.services.room_service import RoomService


@pytest.fixture(scope="session")
def anyio_backend():
    """
    Override the default 'anyio_backend' fixture.
    1. Forces the backend to 'asyncio' (aiosqlite does not run on trio).
    2. Promotes the scope to 'session' (solves 'ScopeMismatch').
    """
    return "asyncio"


# --- 1. Database Fixtures ---

@pytest.fixture(scope="function")
async def db_engine(anyio_backend) -> AsyncGenerator[AsyncEngine, None]:
    """
    A brand new in-memory SQLite database per test.
    StaticPool keeps the single connection alive, otherwise the
    in-memory database would vanish between checkouts.
    """
    assert settings.TEST_MODE is True, \
        "TEST_MODE was not set to True! Check your .env file or environment."

    engine = create_async_engine(
        settings.database_url,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides a single database session for service-level tests.
    The whole database is thrown away with the engine, so nothing is committed.
    """
    session_factory = async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)
    session = session_factory()
    try:
        yield session
    finally:
        await session.rollback()
        await session.close()


@pytest.fixture(scope="function")
async def seeded_db(db_session: AsyncSession) -> AsyncSession:
    """
    Seeds the reference records and three timetable entries:
    - 8th Math, Wednesdays 09:00-10:00 in Room A (regular)
    - 9th Physics, Wednesdays 11:00-12:00 in Room B (regular)
    - 8th Math exam revision on TEST_NEXT_WEDNESDAY 09:00-10:00 in Room B (special,
      overrides the first entry on that date)
    """
    print("Seeding data...")
    factories.test_db_session = db_session

    factories.RoomFactory.create(id=TEST_ROOM_A_ID, name="Room A", capacity=20)
    factories.RoomFactory.create(id=TEST_ROOM_B_ID, name="Room B", capacity=30)
    factories.RoomFactory.create(id=TEST_ROOM_C_ID, name="Room C", capacity=12)

    factories.SubjectFactory.create(id=TEST_SUBJECT_MATH_ID, name="Math", class_name="8th")
    factories.SubjectFactory.create(id=TEST_SUBJECT_PHYSICS_ID, name="Physics", class_name="9th")
    factories.FacultyFactory.create(id=TEST_FACULTY_ID, name="Anita Rao")
    factories.FacultyFactory.create(id=TEST_OTHER_FACULTY_ID, name="Vikram Shah")
    factories.DivisionFactory.create(id=TEST_DIVISION_A_ID, class_name="8th", name="Division A")
    factories.DivisionFactory.create(id=TEST_DIVISION_B_ID, class_name="8th", name="Division B")
    await db_session.flush()

    factories.RegularEntryFactory.create(
        id=TEST_REGULAR_ENTRY_ID,
        class_name="8th",
        subject_id=TEST_SUBJECT_MATH_ID,
        faculty_id=TEST_FACULTY_ID,
        room_id=TEST_ROOM_A_ID,
        day_of_week=DayOfWeek.WEDNESDAY.value,
        start_time=datetime.time(9, 0),
        end_time=datetime.time(10, 0),
    )
    factories.RegularEntryFactory.create(
        id=TEST_OTHER_REGULAR_ENTRY_ID,
        class_name="9th",
        subject_id=TEST_SUBJECT_PHYSICS_ID,
        faculty_id=TEST_OTHER_FACULTY_ID,
        room_id=TEST_ROOM_B_ID,
        day_of_week=DayOfWeek.WEDNESDAY.value,
        start_time=datetime.time(11, 0),
        end_time=datetime.time(12, 0),
    )
    factories.SpecialEntryFactory.create(
        id=TEST_SPECIAL_ENTRY_ID,
        class_name="8th",
        subject_id=TEST_SUBJECT_MATH_ID,
        faculty_id=TEST_FACULTY_ID,
        room_id=TEST_ROOM_B_ID,
        specific_date=TEST_NEXT_WEDNESDAY,
        event_type=EventType.EXAM_REVISION.value,
        notes="Chapters 1-4",
        start_time=datetime.time(9, 0),
        end_time=datetime.time(10, 0),
    )
    await db_session.flush()
    print("Data seeding complete.")

    yield db_session

    factories.test_db_session = None


# --- 2. Service Fixtures ---

@pytest.fixture(scope="function")
def entity_store(seeded_db: AsyncSession) -> EntityStoreService:
    return EntityStoreService(db=seeded_db)


@pytest.fixture(scope="function")
def timetable_service(entity_store: EntityStoreService) -> TimetableService:
    return TimetableService(store=entity_store)


@pytest.fixture(scope="function")
def room_service(entity_store: EntityStoreService) -> RoomService:
    return RoomService(store=entity_store)


# --- 3. API Client Fixture ---

@pytest.fixture(scope="function")
async def client(seeded_db: AsyncSession) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    An AsyncClient talking to the app in-process.
    `get_db_session` is overridden so every request shares the seeded session.
    The app lifespan does not run, so no real engine is ever created.
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield seeded_db

    app.dependency_overrides[get_db_session] = override_get_db_session

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()
