"""Shared pytest fixtures for all test suites."""

import os
import uuid
from collections.abc import AsyncGenerator, Callable
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.db.inmemory import InMemorySubmissionRepository
from backend.tripdesk.db.models import Base
from backend.tripdesk.models.common import Role
from backend.tripdesk.models.draft import BookingDraft, ItineraryDraft
from backend.tripdesk.models.inclusions import InclusionSet
from backend.tripdesk.models.items import Day, HotelNight, HotelOption
from backend.tripdesk.workflow.review import AdminReviewGateway
from backend.tripdesk.workflow.service import SubmissionWorkflow


def build_itinerary_draft() -> ItineraryDraft:
    """Itinerary that passes every draft rule."""
    return ItineraryDraft(
        guest_name="Mr. & Mrs. Sharma",
        destination="Bali",
        start_date=date(2025, 12, 1),
        duration=3,
        days=[Day(day_number=1, title="Arrival", description="Pickup")],
        hotels=[
            HotelNight(
                night_number=1,
                location="Ubud",
                check_in_date=date(2025, 12, 1),
                name="Ubud Village Resort",
                room_type="Deluxe Pool Villa",
                pax_distribution="2 adults",
            )
        ],
        inclusions=InclusionSet(selected=("Breakfast",)),
        accepted_terms=True,
    )


def build_booking_draft() -> BookingDraft:
    """Booking that passes every draft rule."""
    return BookingDraft(
        client_name="Asha Rao",
        destination="Phuket",
        travel_date="Nov 2025",
        days=[Day(day_number=1, title="Arrival", description="Hotel check-in")],
        hotels=[
            HotelOption(
                name="Patong Beach Hotel",
                package_cost_per_person=Decimal("45000"),
                package_cost_per_child=Decimal("15000"),
            )
        ],
        inclusions=InclusionSet(selected=("Airport transfers",)),
        accepted_terms=True,
    )


class SteppingClock:
    """Clock advancing one second per call, for ordering by created_at."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2025, 11, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


@pytest.fixture
def itinerary_draft() -> ItineraryDraft:
    return build_itinerary_draft()


@pytest.fixture
def booking_draft() -> BookingDraft:
    return build_booking_draft()


@pytest.fixture
def agent_ctx() -> RequestContext:
    return RequestContext(user_id=uuid.UUID("00000000-0000-0000-0000-0000000000a1"))


@pytest.fixture
def other_agent_ctx() -> RequestContext:
    return RequestContext(user_id=uuid.UUID("00000000-0000-0000-0000-0000000000a2"))


@pytest.fixture
def admin_ctx() -> RequestContext:
    return RequestContext(
        user_id=uuid.UUID("00000000-0000-0000-0000-0000000000ad"), role=Role.admin
    )


@pytest.fixture
def repository() -> InMemorySubmissionRepository:
    return InMemorySubmissionRepository()


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return SteppingClock()


@pytest.fixture
def workflow(
    repository: InMemorySubmissionRepository, clock: Callable[[], datetime]
) -> SubmissionWorkflow:
    return SubmissionWorkflow(repository, clock=clock)


@pytest.fixture
def review_gateway(workflow: SubmissionWorkflow) -> AdminReviewGateway:
    return AdminReviewGateway(workflow)


@pytest_asyncio.fixture
async def sqlite_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine shared across sessions (single connection)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def postgres_session(postgres_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create async session for PostgreSQL integration tests."""
    async with AsyncSession(postgres_engine) as session:
        yield session
        await session.rollback()
