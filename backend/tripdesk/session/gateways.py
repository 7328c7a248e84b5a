"""Gateways through which sessions reach the workflow.

``TripDeskClient`` satisfies both protocols over HTTP; the local adapters
bind an in-process workflow to a fixed session context.
"""

from typing import Protocol
from uuid import UUID

from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.models.common import StatusFilter
from backend.tripdesk.models.draft import Payload
from backend.tripdesk.models.submission import Submission, SubmissionDetail, SubmissionStats
from backend.tripdesk.workflow.review import AdminReviewGateway
from backend.tripdesk.workflow.service import SubmissionWorkflow
from backend.tripdesk.workflow.state_machine import Decision


class SubmissionGateway(Protocol):
    """Where an authoring session sends finished drafts."""

    async def submit(
        self, payload: Payload, idempotency_key: str | None = None
    ) -> Submission:
        """Create a pending submission.

        A repeated call with the same ``idempotency_key`` must not create a
        second submission.
        """
        ...


class AdminGateway(Protocol):
    """What a review board may ask of the workflow."""

    async def list_submissions(self, status_filter: StatusFilter) -> list[Submission]: ...

    async def get_detail(self, submission_id: UUID) -> SubmissionDetail: ...

    async def decide(self, submission_id: UUID, decision: Decision) -> Submission: ...

    async def stats(self) -> SubmissionStats: ...


class LocalSubmissionGateway:
    """In-process SubmissionGateway."""

    def __init__(self, workflow: SubmissionWorkflow, ctx: RequestContext) -> None:
        self._workflow = workflow
        self._ctx = ctx
        self._submitted: dict[str, Submission] = {}

    async def submit(
        self, payload: Payload, idempotency_key: str | None = None
    ) -> Submission:
        if idempotency_key is not None and idempotency_key in self._submitted:
            return self._submitted[idempotency_key]

        submission = await self._workflow.submit(self._ctx, payload)
        if idempotency_key is not None:
            self._submitted[idempotency_key] = submission
        return submission


class LocalAdminGateway:
    """In-process AdminGateway."""

    def __init__(self, gateway: AdminReviewGateway, ctx: RequestContext) -> None:
        self._gateway = gateway
        self._ctx = ctx

    async def list_submissions(self, status_filter: StatusFilter) -> list[Submission]:
        return await self._gateway.list(self._ctx, status_filter)

    async def get_detail(self, submission_id: UUID) -> SubmissionDetail:
        return await self._gateway.get_detail(self._ctx, submission_id)

    async def decide(self, submission_id: UUID, decision: Decision) -> Submission:
        return await self._gateway.decide(self._ctx, submission_id, decision)

    async def stats(self) -> SubmissionStats:
        return await self._gateway.stats(self._ctx)
