"""Tests for the submission workflow."""

import asyncio
import uuid
from datetime import UTC, datetime

import pytest

from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.db.inmemory import InMemorySubmissionRepository
from backend.tripdesk.errors import (
    InvalidDecision,
    InvalidTransition,
    PermissionDenied,
    SubmissionNotFound,
    ValidationRejected,
)
from backend.tripdesk.models.common import SubmissionStatus
from backend.tripdesk.models.draft import ItineraryDraft
from backend.tripdesk.models.inclusions import InclusionSet
from backend.tripdesk.workflow.service import SubmissionWorkflow
from backend.tripdesk.workflow.state_machine import Decision, apply_decision


@pytest.mark.asyncio
async def test_submit_creates_pending(
    workflow: SubmissionWorkflow, agent_ctx: RequestContext, itinerary_draft: ItineraryDraft
) -> None:
    submission = await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())

    assert submission.status is SubmissionStatus.pending
    assert submission.owner_id == agent_ctx.user_id
    assert submission.decided_at is None
    assert submission.admin_message is None
    assert submission.document_url is None


@pytest.mark.asyncio
async def test_submit_revalidates_payload(
    workflow: SubmissionWorkflow,
    repository: InMemorySubmissionRepository,
    agent_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    itinerary_draft.inclusions = InclusionSet()

    with pytest.raises(ValidationRejected) as exc_info:
        await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())

    assert exc_info.value.message == "Please add at least one inclusion"
    assert await repository.list_submissions() == []


@pytest.mark.asyncio
async def test_owner_scoped_reads(
    workflow: SubmissionWorkflow,
    agent_ctx: RequestContext,
    other_agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    payload = itinerary_draft.to_submission_payload()
    mine = await workflow.submit(agent_ctx, payload)
    await workflow.submit(other_agent_ctx, payload)

    assert (await workflow.get(agent_ctx, mine.id)).id == mine.id
    assert (await workflow.get(admin_ctx, mine.id)).id == mine.id
    with pytest.raises(SubmissionNotFound):
        await workflow.get(other_agent_ctx, mine.id)

    assert [s.id for s in await workflow.list_mine(agent_ctx)] == [mine.id]


@pytest.mark.asyncio
async def test_list_mine_newest_first(
    workflow: SubmissionWorkflow, agent_ctx: RequestContext, itinerary_draft: ItineraryDraft
) -> None:
    payload = itinerary_draft.to_submission_payload()
    first = await workflow.submit(agent_ctx, payload)
    second = await workflow.submit(agent_ctx, payload)

    assert [s.id for s in await workflow.list_mine(agent_ctx)] == [second.id, first.id]


@pytest.mark.asyncio
async def test_only_admins_decide(
    workflow: SubmissionWorkflow, agent_ctx: RequestContext, itinerary_draft: ItineraryDraft
) -> None:
    submission = await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())

    with pytest.raises(PermissionDenied):
        await workflow.approve(agent_ctx, submission.id)

    assert (await workflow.get(agent_ctx, submission.id)).status is SubmissionStatus.pending


@pytest.mark.asyncio
async def test_approve_and_reject(
    workflow: SubmissionWorkflow,
    agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    payload = itinerary_draft.to_submission_payload()
    a = await workflow.submit(agent_ctx, payload)
    b = await workflow.submit(agent_ctx, payload)

    approved = await workflow.approve(admin_ctx, a.id)
    rejected = await workflow.reject(admin_ctx, b.id, "Hotel sold out")

    assert approved.status is SubmissionStatus.approved
    assert approved.decided_at is not None
    assert approved.document_pending is True
    assert rejected.status is SubmissionStatus.rejected
    assert rejected.admin_message == "Hotel sold out"


@pytest.mark.asyncio
async def test_reject_without_message(
    workflow: SubmissionWorkflow,
    agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    submission = await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())

    with pytest.raises(InvalidDecision):
        await workflow.reject(admin_ctx, submission.id, "")

    assert (await workflow.get(admin_ctx, submission.id)).status is SubmissionStatus.pending


@pytest.mark.asyncio
async def test_approve_rejected_submission_keeps_rejection(
    workflow: SubmissionWorkflow,
    agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    submission = await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())
    rejected = await workflow.reject(admin_ctx, submission.id, "Passport copy missing")

    with pytest.raises(InvalidTransition):
        await workflow.approve(admin_ctx, submission.id)

    after = await workflow.get(admin_ctx, submission.id)
    assert after == rejected
    assert after.admin_message == "Passport copy missing"


@pytest.mark.asyncio
async def test_decided_submissions_are_terminal(
    workflow: SubmissionWorkflow,
    agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    submission = await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())
    approved = await workflow.approve(admin_ctx, submission.id)
    approved = await workflow.attach_document(submission.id, "https://docs.test/a.pdf") or approved

    for attempt in (
        workflow.approve(admin_ctx, submission.id),
        workflow.reject(admin_ctx, submission.id, "Changed my mind"),
        workflow.reject(admin_ctx, submission.id, "Another reason"),
    ):
        with pytest.raises(InvalidTransition):
            await attempt

    assert await workflow.get(admin_ctx, submission.id) == approved


@pytest.mark.asyncio
async def test_concurrent_decisions_record_exactly_one(
    workflow: SubmissionWorkflow,
    agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    submission = await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())

    results = await asyncio.gather(
        workflow.approve(admin_ctx, submission.id),
        workflow.reject(admin_ctx, submission.id, "Too late"),
        workflow.approve(admin_ctx, submission.id),
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 1
    assert all(isinstance(f, InvalidTransition) for f in failures)
    assert (await workflow.get(admin_ctx, submission.id)) == successes[0]


@pytest.mark.asyncio
async def test_lost_race_in_repository_is_invalid_transition(
    agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    """A decision landing between the read and the write loses cleanly."""

    class RacingRepository(InMemorySubmissionRepository):
        async def transition(self, submission_id, **kwargs):  # type: ignore[no-untyped-def]
            await InMemorySubmissionRepository.transition(
                self,
                submission_id,
                expected=SubmissionStatus.pending,
                status=SubmissionStatus.rejected,
                decided_at=kwargs["decided_at"],
                admin_message="Rejected elsewhere",
            )
            return await super().transition(submission_id, **kwargs)

    racing = RacingRepository()
    workflow = SubmissionWorkflow(racing)
    submission = await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())

    with pytest.raises(InvalidTransition):
        await workflow.approve(admin_ctx, submission.id)

    after = await workflow.get(admin_ctx, submission.id)
    assert after.status is SubmissionStatus.rejected
    assert after.admin_message == "Rejected elsewhere"


@pytest.mark.asyncio
async def test_decide_unknown_submission(
    workflow: SubmissionWorkflow, admin_ctx: RequestContext
) -> None:
    with pytest.raises(SubmissionNotFound):
        await workflow.approve(admin_ctx, uuid.uuid4())


@pytest.mark.asyncio
async def test_attach_document_only_once_and_only_when_approved(
    workflow: SubmissionWorkflow,
    agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    payload = itinerary_draft.to_submission_payload()
    pending = await workflow.submit(agent_ctx, payload)
    approved = await workflow.submit(agent_ctx, payload)
    await workflow.approve(admin_ctx, approved.id)

    assert await workflow.attach_document(pending.id, "https://docs.test/p.pdf") is None

    attached = await workflow.attach_document(approved.id, "https://docs.test/a.pdf")
    assert attached is not None
    assert attached.document_url == "https://docs.test/a.pdf"
    assert await workflow.attach_document(approved.id, "https://docs.test/b.pdf") is None


@pytest.mark.asyncio
async def test_recorded_decision_matches_pure_transition(
    repository: InMemorySubmissionRepository,
    agent_ctx: RequestContext,
    admin_ctx: RequestContext,
    itinerary_draft: ItineraryDraft,
) -> None:
    decided_at = datetime(2025, 11, 2, 10, 30, tzinfo=UTC)
    workflow = SubmissionWorkflow(repository, clock=lambda: decided_at)
    submission = await workflow.submit(agent_ctx, itinerary_draft.to_submission_payload())
    decision = Decision.reject("  Passport copy missing ")

    recorded = await workflow.decide(admin_ctx, submission.id, decision)

    assert recorded == apply_decision(submission, decision, decided_at)
    assert recorded.admin_message == "Passport copy missing"
