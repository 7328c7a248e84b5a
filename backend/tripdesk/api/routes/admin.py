"""Admin review endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from pydantic import Field

from backend.tripdesk.adapters.documents import DocumentGenerator
from backend.tripdesk.adapters.schema_source import SchemaSource
from backend.tripdesk.api.auth import get_current_context
from backend.tripdesk.api.deps import (
    get_document_generator,
    get_repository_factory,
    get_review_gateway,
    get_schema_source,
)
from backend.tripdesk.db.context import RequestContext
from backend.tripdesk.errors import DocumentNotReady, SchemaUnavailable
from backend.tripdesk.models.common import DraftVariant, StatusFilter, SubmissionStatus, WireModel
from backend.tripdesk.models.submission import (
    Submission,
    SubmissionDetail,
    SubmissionStats,
    describe_submission,
)
from backend.tripdesk.workflow.documents import RepositoryFactory, generate_document
from backend.tripdesk.workflow.review import AdminReviewGateway
from backend.tripdesk.workflow.state_machine import Decision

router = APIRouter(prefix="/api/admin", tags=["admin"])


class RejectRequest(WireModel):
    """Request body for POST /api/admin/submissions/{id}/reject."""

    message: str = Field("", description="Reason shown to the submitting agent")


@router.get("/submissions", response_model=list[Submission])
async def list_submissions(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    gateway: Annotated[AdminReviewGateway, Depends(get_review_gateway)],
    status_filter: Annotated[StatusFilter, Query(alias="status")] = StatusFilter.all,
    offset: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int | None, Query(ge=1)] = None,
) -> list[Submission]:
    """One page of submissions matching the filter, newest first.

    Pages are capped at the configured list limit; page with ``offset``.
    """
    return await gateway.list(ctx, status_filter, offset=offset, limit=limit)


@router.get("/stats", response_model=SubmissionStats)
async def stats(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    gateway: Annotated[AdminReviewGateway, Depends(get_review_gateway)],
) -> SubmissionStats:
    """Submission counts per status."""
    return await gateway.stats(ctx)


@router.get("/submissions/{submission_id}", response_model=SubmissionDetail)
async def get_submission_detail(
    submission_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    gateway: Annotated[AdminReviewGateway, Depends(get_review_gateway)],
    source: Annotated[SchemaSource, Depends(get_schema_source)],
) -> SubmissionDetail:
    """Submission with its scalar fields labelled.

    Schema labels are used when the schema can be loaded; otherwise labels
    come from the built-in overrides.
    """
    detail = await gateway.get_detail(ctx, submission_id)
    try:
        schema = await source.load_schema(DraftVariant(detail.submission.data.variant))
    except SchemaUnavailable:
        return detail
    return describe_submission(detail.submission, schema)


@router.post("/submissions/{submission_id}/approve", response_model=Submission)
async def approve(
    submission_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    gateway: Annotated[AdminReviewGateway, Depends(get_review_gateway)],
    generator: Annotated[DocumentGenerator, Depends(get_document_generator)],
    repository_factory: Annotated[RepositoryFactory, Depends(get_repository_factory)],
) -> Submission:
    """Approve a pending submission and schedule its document."""
    submission = await gateway.decide(ctx, submission_id, Decision.approve())
    background_tasks.add_task(generate_document, submission.id, generator, repository_factory)
    return submission


@router.post("/submissions/{submission_id}/reject", response_model=Submission)
async def reject(
    submission_id: uuid.UUID,
    request: RejectRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    gateway: Annotated[AdminReviewGateway, Depends(get_review_gateway)],
) -> Submission:
    """Reject a pending submission with a reason."""
    return await gateway.decide(ctx, submission_id, Decision.reject(request.message))


@router.post(
    "/submissions/{submission_id}/document",
    response_model=Submission,
    status_code=status.HTTP_202_ACCEPTED,
)
async def regenerate_document(
    submission_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    gateway: Annotated[AdminReviewGateway, Depends(get_review_gateway)],
    generator: Annotated[DocumentGenerator, Depends(get_document_generator)],
    repository_factory: Annotated[RepositoryFactory, Depends(get_repository_factory)],
) -> Submission:
    """Schedule document generation again for an approved submission."""
    detail = await gateway.get_detail(ctx, submission_id)
    submission = detail.submission

    if submission.status is not SubmissionStatus.approved:
        raise DocumentNotReady("Only approved submissions have a document")

    if submission.document_url is None:
        background_tasks.add_task(
            generate_document, submission.id, generator, repository_factory
        )
    return submission
