"""SQL implementations of repository interfaces."""

import uuid
from datetime import datetime

from pydantic import TypeAdapter
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.tripdesk.db.models import SubmissionRow
from backend.tripdesk.models.common import SubmissionStatus
from backend.tripdesk.models.draft import Payload, SubmissionPayload
from backend.tripdesk.models.submission import Submission

_payload_adapter: TypeAdapter[Payload] = TypeAdapter(SubmissionPayload)


def _to_submission(row: SubmissionRow) -> Submission:
    return Submission(
        id=row.submission_id,
        owner_id=row.owner_id,
        data=_payload_adapter.validate_python(row.data),
        status=SubmissionStatus(row.status),
        created_at=row.created_at,
        decided_at=row.decided_at,
        admin_message=row.admin_message,
        document_url=row.document_url,
    )


class SqlSubmissionRepository:
    """SQL implementation of SubmissionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self, owner_id: uuid.UUID, payload: Payload, created_at: datetime
    ) -> Submission:
        """Store a new pending submission."""
        row = SubmissionRow(
            submission_id=uuid.uuid4(),
            owner_id=owner_id,
            variant=payload.variant,
            data=payload.model_dump(mode="json"),
            status=SubmissionStatus.pending.value,
            created_at=created_at,
        )

        submission = _to_submission(row)

        self._session.add(row)
        await self._session.commit()

        return submission

    async def get(self, submission_id: uuid.UUID) -> Submission | None:
        """Get a submission by ID."""
        row = await self._session.get(SubmissionRow, submission_id, populate_existing=True)
        if row is None:
            return None
        return _to_submission(row)

    async def list_submissions(
        self,
        *,
        owner_id: uuid.UUID | None = None,
        status: SubmissionStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Submission]:
        """List submissions newest first."""
        query = select(SubmissionRow)

        if owner_id is not None:
            query = query.where(SubmissionRow.owner_id == owner_id)
        if status is not None:
            query = query.where(SubmissionRow.status == status.value)

        # Sort by created_at desc (newest first)
        query = query.order_by(SubmissionRow.created_at.desc())
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        result = await self._session.execute(query)
        return [_to_submission(row) for row in result.scalars().all()]

    async def transition(
        self,
        submission_id: uuid.UUID,
        *,
        expected: SubmissionStatus,
        status: SubmissionStatus,
        decided_at: datetime,
        admin_message: str | None = None,
    ) -> Submission | None:
        """Compare-and-set the status with a conditional UPDATE."""
        result = await self._session.execute(
            update(SubmissionRow)
            .where(SubmissionRow.submission_id == submission_id)
            .where(SubmissionRow.status == expected.value)
            .values(status=status.value, decided_at=decided_at, admin_message=admin_message)
        )
        await self._session.commit()

        if result.rowcount != 1:  # type: ignore[attr-defined]
            return None
        return await self.get(submission_id)

    async def attach_document(
        self, submission_id: uuid.UUID, document_url: str
    ) -> Submission | None:
        """Set the document URL once, on approved submissions only."""
        result = await self._session.execute(
            update(SubmissionRow)
            .where(SubmissionRow.submission_id == submission_id)
            .where(SubmissionRow.status == SubmissionStatus.approved.value)
            .where(SubmissionRow.document_url.is_(None))
            .values(document_url=document_url)
        )
        await self._session.commit()

        if result.rowcount != 1:  # type: ignore[attr-defined]
            return None
        return await self.get(submission_id)
