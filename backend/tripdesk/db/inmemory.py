"""In-memory implementations of repository interfaces."""

import uuid
from datetime import datetime

from backend.tripdesk.db.repositories import (
    IdempotencyRecord,
    IdempotencyStatus,
    StoredResponse,
)
from backend.tripdesk.models.common import SubmissionStatus
from backend.tripdesk.models.draft import Payload
from backend.tripdesk.models.submission import Submission


class InMemorySubmissionRepository:
    """In-memory implementation of SubmissionRepository.

    Safe under a single event loop: no method awaits between reading and
    writing a record, so the status check in ``transition`` cannot interleave
    with another decision.
    """

    def __init__(self) -> None:
        self._submissions: dict[uuid.UUID, Submission] = {}

    async def create(
        self, owner_id: uuid.UUID, payload: Payload, created_at: datetime
    ) -> Submission:
        """Store a new pending submission."""
        submission = Submission(
            id=uuid.uuid4(),
            owner_id=owner_id,
            data=payload,
            status=SubmissionStatus.pending,
            created_at=created_at,
        )
        self._submissions[submission.id] = submission
        return submission

    async def get(self, submission_id: uuid.UUID) -> Submission | None:
        """Get a submission by ID."""
        return self._submissions.get(submission_id)

    async def list_submissions(
        self,
        *,
        owner_id: uuid.UUID | None = None,
        status: SubmissionStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Submission]:
        """List submissions newest first."""
        results = [
            s
            for s in self._submissions.values()
            if (owner_id is None or s.owner_id == owner_id)
            and (status is None or s.status == status)
        ]

        # Sort by created_at descending
        results.sort(key=lambda s: s.created_at, reverse=True)

        if limit is not None:
            return results[offset : offset + limit]
        return results[offset:]

    async def transition(
        self,
        submission_id: uuid.UUID,
        *,
        expected: SubmissionStatus,
        status: SubmissionStatus,
        decided_at: datetime,
        admin_message: str | None = None,
    ) -> Submission | None:
        """Compare-and-set the status."""
        current = self._submissions.get(submission_id)
        if current is None or current.status != expected:
            return None

        updated = current.model_copy(
            update={
                "status": status,
                "decided_at": decided_at,
                "admin_message": admin_message,
            }
        )
        self._submissions[submission_id] = updated
        return updated

    async def attach_document(
        self, submission_id: uuid.UUID, document_url: str
    ) -> Submission | None:
        """Set the document URL once, on approved submissions only."""
        current = self._submissions.get(submission_id)
        if (
            current is None
            or current.status != SubmissionStatus.approved
            or current.document_url is not None
        ):
            return None

        updated = current.model_copy(update={"document_url": document_url})
        self._submissions[submission_id] = updated
        return updated


class InMemoryIdempotencyStore:
    """In-memory implementation of IdempotencyStore."""

    def __init__(self) -> None:
        self._records: dict[tuple[str, uuid.UUID], IdempotencyRecord] = {}

    def get(self, key: str, user_id: uuid.UUID) -> IdempotencyRecord | None:
        """Get idempotency record."""
        record = self._records.get((key, user_id))

        if record is None:
            return None

        # Check if expired
        if datetime.now() > record.ttl_until:
            del self._records[(key, user_id)]
            return None

        return record

    def set_pending(self, key: str, user_id: uuid.UUID, ttl_until: datetime) -> None:
        """Set idempotency record to pending."""
        self._records[(key, user_id)] = IdempotencyRecord(
            key=key,
            user_id=user_id,
            ttl_until=ttl_until,
            status=IdempotencyStatus.pending,
            response=None,
        )

    def set_completed(
        self, key: str, user_id: uuid.UUID, ttl_until: datetime, response: StoredResponse
    ) -> None:
        """Set idempotency record to completed with full response envelope."""
        self._records[(key, user_id)] = IdempotencyRecord(
            key=key,
            user_id=user_id,
            ttl_until=ttl_until,
            status=IdempotencyStatus.completed,
            response=response,
        )

    def set_error(self, key: str, user_id: uuid.UUID, ttl_until: datetime) -> None:
        """Set idempotency record to error."""
        self._records[(key, user_id)] = IdempotencyRecord(
            key=key,
            user_id=user_id,
            ttl_until=ttl_until,
            status=IdempotencyStatus.error,
            response=None,
        )
