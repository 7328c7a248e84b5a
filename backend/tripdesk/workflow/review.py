"""Admin review gateway - what the reviewing session is allowed to do."""

from uuid import UUID

from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.errors import PermissionDenied
from backend.tripdesk.models.common import StatusFilter, SubmissionStatus
from backend.tripdesk.models.schema import FormSchema
from backend.tripdesk.models.submission import (
    Submission,
    SubmissionDetail,
    SubmissionStats,
    describe_submission,
)
from backend.tripdesk.workflow.service import SubmissionWorkflow
from backend.tripdesk.workflow.state_machine import Decision


class AdminReviewGateway:
    """Lists, inspects and decides submissions on behalf of an admin."""

    def __init__(self, workflow: SubmissionWorkflow, list_limit: int | None = None) -> None:
        self._workflow = workflow
        self._list_limit = list_limit

    async def list(
        self,
        ctx: RequestContext,
        status_filter: StatusFilter = StatusFilter.all,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Submission]:
        """List one page of submissions matching the filter, newest first.

        Pages never exceed the gateway's ``list_limit``; a larger ``limit``
        is clamped to it. Use ``offset`` to walk past the first page.
        ``stats`` always counts every submission.

        Raises:
            PermissionDenied: If the session is not an admin
        """
        page_size = limit
        if self._list_limit is not None:
            page_size = min(limit or self._list_limit, self._list_limit)
        return await self._workflow.list_all(
            ctx, status=status_filter.as_status(), limit=page_size, offset=offset
        )

    async def get_detail(
        self, ctx: RequestContext, submission_id: UUID, schema: FormSchema | None = None
    ) -> SubmissionDetail:
        """Submission with labelled scalar fields."""
        self._require_admin(ctx)
        submission = await self._workflow.get(ctx, submission_id)
        return describe_submission(submission, schema)

    async def decide(
        self, ctx: RequestContext, submission_id: UUID, decision: Decision
    ) -> Submission:
        """Apply a decision through the workflow."""
        return await self._workflow.decide(ctx, submission_id, decision)

    async def stats(self, ctx: RequestContext) -> SubmissionStats:
        """Count submissions per status."""
        submissions = await self._workflow.list_all(ctx)
        counts = {status: 0 for status in SubmissionStatus}
        for submission in submissions:
            counts[submission.status] += 1
        return SubmissionStats(
            total=len(submissions),
            pending=counts[SubmissionStatus.pending],
            approved=counts[SubmissionStatus.approved],
            rejected=counts[SubmissionStatus.rejected],
        )

    def _require_admin(self, ctx: RequestContext) -> None:
        if not ctx.is_admin:
            raise PermissionDenied("Only administrators can review submissions")
