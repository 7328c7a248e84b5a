"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import UUID

from backend.tripdesk.models.common import SubmissionStatus
from backend.tripdesk.models.draft import Payload
from backend.tripdesk.models.submission import Submission


class SubmissionRepository(Protocol):
    """Repository for submission records.

    The repository is the authoritative owner of workflow state. Decisions go
    through ``transition``, a compare-and-set on ``status`` so at most one
    decision can ever be recorded for a submission.
    """

    async def create(self, owner_id: UUID, payload: Payload, created_at: datetime) -> Submission:
        """Store a new pending submission.

        Args:
            owner_id: Submitting user
            payload: Frozen draft
            created_at: Creation timestamp

        Returns:
            The stored submission
        """
        ...

    async def get(self, submission_id: UUID) -> Submission | None:
        """Get a submission by ID.

        Args:
            submission_id: Submission ID

        Returns:
            Submission or None if not found
        """
        ...

    async def list_submissions(
        self,
        *,
        owner_id: UUID | None = None,
        status: SubmissionStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Submission]:
        """List submissions newest first.

        Args:
            owner_id: Only this owner's submissions, if given
            status: Only this status, if given
            limit: Maximum number of results
            offset: Number of leading results to skip

        Returns:
            Submissions ordered by created_at descending
        """
        ...

    async def transition(
        self,
        submission_id: UUID,
        *,
        expected: SubmissionStatus,
        status: SubmissionStatus,
        decided_at: datetime,
        admin_message: str | None = None,
    ) -> Submission | None:
        """Move a submission from ``expected`` to ``status`` atomically.

        Returns:
            The updated submission, or None if it does not exist or its status
            is no longer ``expected`` (nothing is written in that case)
        """
        ...

    async def attach_document(self, submission_id: UUID, document_url: str) -> Submission | None:
        """Set the document URL of an approved submission that has none.

        Returns:
            The updated submission, or None if nothing was written
        """
        ...


class IdempotencyStatus(str, Enum):
    """Idempotency record status."""

    pending = "pending"
    completed = "completed"
    error = "error"


@dataclass
class StoredResponse:
    """Stored HTTP response envelope for idempotency replay."""

    status_code: int
    headers: dict[str, str]
    body: bytes


@dataclass
class IdempotencyRecord:
    """Idempotency record."""

    key: str
    user_id: UUID
    ttl_until: datetime
    status: IdempotencyStatus
    response: StoredResponse | None


class IdempotencyStore(Protocol):
    """Store for HTTP idempotency records."""

    def get(self, key: str, user_id: UUID) -> IdempotencyRecord | None:
        """Get idempotency record (None if missing or expired)."""
        ...

    def set_pending(self, key: str, user_id: UUID, ttl_until: datetime) -> None:
        """Mark a key as in progress."""
        ...

    def set_completed(
        self, key: str, user_id: UUID, ttl_until: datetime, response: StoredResponse
    ) -> None:
        """Mark a key as done with the response to replay."""
        ...

    def set_error(self, key: str, user_id: UUID, ttl_until: datetime) -> None:
        """Mark a key as failed."""
        ...
