"""Submission workflow - the authoritative owner of review state."""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID

from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.db.repositories import SubmissionRepository
from backend.tripdesk.errors import (
    InvalidDecision,
    InvalidTransition,
    PermissionDenied,
    SubmissionNotFound,
    ValidationRejected,
)
from backend.tripdesk.models.common import SubmissionStatus
from backend.tripdesk.models.draft import Payload
from backend.tripdesk.models.submission import Submission
from backend.tripdesk.utils.logging import StructuredWorkflowLogger
from backend.tripdesk.utils.metrics import PrometheusWorkflowMetrics
from backend.tripdesk.validation.draft import check_draft
from backend.tripdesk.workflow.state_machine import (
    Decision,
    apply_decision,
    ensure_transition,
    normalize_decision,
)


def utcnow() -> datetime:
    return datetime.now(UTC)


class SubmissionWorkflow:
    """Creates submissions and applies review decisions.

    Every decision is written with a compare-and-set from ``pending``, so a
    duplicate or concurrent decision fails with InvalidTransition and never
    overwrites the first one.
    """

    def __init__(
        self,
        repository: SubmissionRepository,
        logger: StructuredWorkflowLogger | None = None,
        metrics: PrometheusWorkflowMetrics | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize the workflow.

        Args:
            repository: Submission store
            logger: Structured event logger
            metrics: Workflow counters
            clock: Source of timestamps (injectable for tests)
        """
        self._repository = repository
        self._logger = logger or StructuredWorkflowLogger()
        self._metrics = metrics or PrometheusWorkflowMetrics()
        self._clock = clock

    @property
    def repository(self) -> SubmissionRepository:
        return self._repository

    async def submit(self, ctx: RequestContext, payload: Payload) -> Submission:
        """Create a pending submission from a frozen draft.

        Args:
            ctx: Submitting session
            payload: Draft payload

        Returns:
            The new pending submission

        Raises:
            ValidationRejected: If the payload fails the draft rules
        """
        issue = check_draft(payload)
        if issue is not None:
            raise ValidationRejected(issue.message)

        submission = await self._repository.create(ctx.user_id, payload, self._clock())

        self._logger.log_submitted(ctx, submission.id, payload.variant)
        self._metrics.inc_submission(payload.variant)
        return submission

    async def get(self, ctx: RequestContext, submission_id: UUID) -> Submission:
        """Read one submission (owner or admin).

        Raises:
            SubmissionNotFound: If missing or owned by someone else
        """
        submission = await self._repository.get(submission_id)
        if submission is None or not (ctx.is_admin or submission.owner_id == ctx.user_id):
            raise SubmissionNotFound(f"Submission {submission_id} not found")
        return submission

    async def list_mine(self, ctx: RequestContext, limit: int | None = None) -> list[Submission]:
        """List the caller's submissions newest first."""
        return await self._repository.list_submissions(owner_id=ctx.user_id, limit=limit)

    async def list_all(
        self,
        ctx: RequestContext,
        status: SubmissionStatus | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Submission]:
        """List every submission, optionally by status (admin only)."""
        self._require_admin(ctx)
        return await self._repository.list_submissions(status=status, limit=limit, offset=offset)

    async def approve(self, ctx: RequestContext, submission_id: UUID) -> Submission:
        """Approve a pending submission."""
        return await self.decide(ctx, submission_id, Decision.approve())

    async def reject(self, ctx: RequestContext, submission_id: UUID, message: str) -> Submission:
        """Reject a pending submission with a reason."""
        return await self.decide(ctx, submission_id, Decision.reject(message))

    async def decide(
        self, ctx: RequestContext, submission_id: UUID, decision: Decision
    ) -> Submission:
        """Apply a decision to a pending submission.

        Args:
            ctx: Acting session, must be an admin
            submission_id: Submission to decide
            decision: Approve or reject (with message)

        Returns:
            The decided submission

        Raises:
            PermissionDenied: If the session is not an admin
            InvalidDecision: If a rejection has no message
            SubmissionNotFound: If the submission does not exist
            InvalidTransition: If the submission is already decided
        """
        self._require_admin(ctx)

        try:
            decision = normalize_decision(decision)
        except InvalidDecision:
            self._refused(ctx, submission_id, decision, "invalid")
            raise

        current = await self._repository.get(submission_id)
        if current is None:
            raise SubmissionNotFound(f"Submission {submission_id} not found")

        try:
            decided = apply_decision(current, decision, self._clock())
        except InvalidTransition:
            self._refused(ctx, submission_id, decision, "refused", current.status)
            raise

        updated = await self._repository.transition(
            submission_id,
            expected=current.status,
            status=decided.status,
            decided_at=decided.decided_at,
            admin_message=decided.admin_message,
        )
        if updated is None:
            # Lost the race against another decision
            latest = await self._repository.get(submission_id)
            latest_status = latest.status if latest is not None else None
            self._refused(ctx, submission_id, decision, "refused", latest_status)
            if latest is None:
                raise SubmissionNotFound(f"Submission {submission_id} not found")
            ensure_transition(latest, decision)
            raise InvalidTransition(f"Submission {submission_id} was decided concurrently")

        self._logger.log_transition(ctx, submission_id, decision.kind.value, "applied")
        self._metrics.inc_decision(decision.kind.value, "applied")
        return updated

    async def attach_document(self, submission_id: UUID, document_url: str) -> Submission | None:
        """Record the document of an approved submission.

        Returns:
            The updated submission, or None if it is not approved or already
            has a document
        """
        return await self._repository.attach_document(submission_id, document_url)

    def _require_admin(self, ctx: RequestContext) -> None:
        if not ctx.is_admin:
            raise PermissionDenied("Only administrators can review submissions")

    def _refused(
        self,
        ctx: RequestContext,
        submission_id: UUID,
        decision: Decision,
        outcome: str,
        current_status: SubmissionStatus | None = None,
    ) -> None:
        self._logger.log_transition(
            ctx,
            submission_id,
            decision.kind.value,
            outcome,
            current_status=current_status.value if current_status else None,
        )
        self._metrics.inc_decision(decision.kind.value, outcome)
