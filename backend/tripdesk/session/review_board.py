"""Review board - the administrator's view of the submission queue."""

from uuid import UUID

from backend.tripdesk.errors import InvalidTransition
from backend.tripdesk.models.common import StatusFilter
from backend.tripdesk.models.submission import Submission, SubmissionDetail, SubmissionStats
from backend.tripdesk.session.gateways import AdminGateway
from backend.tripdesk.workflow.state_machine import Decision, normalize_decision


class ReviewBoard:
    """Cached, filtered submission list with guarded decisions.

    The list is never edited locally: after every decision attempt that
    reached the workflow it is fetched again. A submission decided (or
    definitively refused) in this view cannot be decided again from it.
    """

    def __init__(self, gateway: AdminGateway) -> None:
        self._gateway = gateway
        self.status_filter = StatusFilter.all
        self.submissions: list[Submission] = []
        self._decided: set[UUID] = set()

    @property
    def decided_ids(self) -> frozenset[UUID]:
        return frozenset(self._decided)

    async def refresh(self) -> list[Submission]:
        """Fetch the list for the current filter."""
        self.submissions = await self._gateway.list_submissions(self.status_filter)
        return self.submissions

    async def set_filter(self, status_filter: StatusFilter) -> list[Submission]:
        self.status_filter = status_filter
        return await self.refresh()

    async def detail(self, submission_id: UUID) -> SubmissionDetail:
        return await self._gateway.get_detail(submission_id)

    async def stats(self) -> SubmissionStats:
        return await self._gateway.stats()

    async def approve(self, submission_id: UUID) -> Submission:
        return await self.decide(submission_id, Decision.approve())

    async def reject(self, submission_id: UUID, message: str) -> Submission:
        return await self.decide(submission_id, Decision.reject(message))

    async def decide(self, submission_id: UUID, decision: Decision) -> Submission:
        """Send a decision and refresh the list.

        Raises:
            InvalidDecision: If a rejection has no message (not sent)
            InvalidTransition: If already decided in this view (not sent) or
                refused by the workflow
            RemoteError: If the gateway call fails (may be retried)
        """
        decision = normalize_decision(decision)
        self._ensure_undecided(submission_id)

        try:
            submission = await self._gateway.decide(submission_id, decision)
        except InvalidTransition:
            self._decided.add(submission_id)
            await self.refresh()
            raise

        self._decided.add(submission_id)
        await self.refresh()
        return submission

    def _ensure_undecided(self, submission_id: UUID) -> None:
        if submission_id in self._decided:
            raise InvalidTransition(f"Submission {submission_id} was already decided")

        for submission in self.submissions:
            if submission.id == submission_id and submission.status.is_terminal:
                raise InvalidTransition(
                    f"Submission {submission_id} is already {submission.status.value}"
                )
