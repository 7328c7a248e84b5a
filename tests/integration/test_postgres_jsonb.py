"""PostgreSQL-specific integration test for the JSONB submission payload.

This test requires a real PostgreSQL instance and validates that the payload
column is stored as JSONB (SQLite only has plain JSON).

Run with: DATABASE_URL='postgresql://...' pytest -m postgres
"""

import uuid
from datetime import UTC, datetime

import pytest
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from backend.tripdesk.db.sql_repositories import SqlSubmissionRepository
from backend.tripdesk.models.common import SubmissionStatus
from backend.tripdesk.models.draft import BookingDraft, ItineraryDraft


@pytest.mark.postgres
@pytest.mark.asyncio
async def test_payload_round_trips_through_jsonb(
    postgres_session: AsyncSession, itinerary_draft: ItineraryDraft
) -> None:
    repository = SqlSubmissionRepository(postgres_session)
    payload = itinerary_draft.to_submission_payload()

    created = await repository.create(uuid.uuid4(), payload, datetime.now(UTC))
    loaded = await repository.get(created.id)

    assert loaded is not None
    assert loaded.data == payload
    assert loaded.status is SubmissionStatus.pending


@pytest.mark.postgres
@pytest.mark.asyncio
async def test_jsonb_query_operations(
    postgres_session: AsyncSession,
    itinerary_draft: ItineraryDraft,
    booking_draft: BookingDraft,
) -> None:
    """Test PostgreSQL JSONB query operators (not available in SQLite)."""
    repository = SqlSubmissionRepository(postgres_session)
    owner_id = uuid.uuid4()

    itinerary = await repository.create(
        owner_id, itinerary_draft.to_submission_payload(), datetime.now(UTC)
    )
    await repository.create(owner_id, booking_draft.to_submission_payload(), datetime.now(UTC))

    result = await postgres_session.execute(
        text(
            "SELECT submission_id FROM submission WHERE "
            "data->>'destination' = :destination AND owner_id = :owner_id"
        ).bindparams(destination="Bali", owner_id=owner_id)
    )
    rows = result.all()

    assert len(rows) == 1
    assert rows[0][0] == itinerary.id
