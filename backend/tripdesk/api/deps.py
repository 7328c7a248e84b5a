"""FastAPI dependencies wiring repositories, workflow and collaborators."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.tripdesk.adapters.documents import (
    DocumentGenerator,
    HttpDocumentGenerator,
    UnavailableDocumentGenerator,
)
from backend.tripdesk.adapters.images import HttpImageStore, ImageStore, UnavailableImageStore
from backend.tripdesk.adapters.schema_source import (
    FixtureSchemaSource,
    HttpSchemaSource,
    SchemaSource,
)
from backend.tripdesk.config import Settings, get_settings
from backend.tripdesk.db.engine import get_session, get_session_factory
from backend.tripdesk.db.inmemory import InMemoryIdempotencyStore
from backend.tripdesk.db.repositories import SubmissionRepository
from backend.tripdesk.db.sql_repositories import SqlSubmissionRepository
from backend.tripdesk.middleware.idempotency import IdempotencyMiddleware
from backend.tripdesk.workflow.documents import RepositoryFactory
from backend.tripdesk.workflow.review import AdminReviewGateway
from backend.tripdesk.workflow.service import SubmissionWorkflow

_idempotency_store = InMemoryIdempotencyStore()


def get_submission_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> SubmissionRepository:
    return SqlSubmissionRepository(session)


def get_workflow(
    repository: Annotated[SubmissionRepository, Depends(get_submission_repository)],
) -> SubmissionWorkflow:
    return SubmissionWorkflow(repository)


def get_review_gateway(
    workflow: Annotated[SubmissionWorkflow, Depends(get_workflow)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> AdminReviewGateway:
    return AdminReviewGateway(workflow, list_limit=settings.submissions_list_limit)


def get_schema_source(settings: Annotated[Settings, Depends(get_settings)]) -> SchemaSource:
    """Remote schema service when configured, bundled fixtures otherwise."""
    if settings.schema_source_url:
        return HttpSchemaSource(settings.schema_source_url, settings.collaborator_timeout_s)
    return FixtureSchemaSource()


def get_document_generator(
    settings: Annotated[Settings, Depends(get_settings)],
) -> DocumentGenerator:
    if settings.document_renderer_url:
        return HttpDocumentGenerator(
            settings.document_renderer_url, settings.collaborator_timeout_s
        )
    return UnavailableDocumentGenerator()


def get_image_store(settings: Annotated[Settings, Depends(get_settings)]) -> ImageStore:
    if settings.image_store_url:
        return HttpImageStore(settings.image_store_url, settings.collaborator_timeout_s)
    return UnavailableImageStore()


@asynccontextmanager
async def sql_repository_scope() -> AsyncIterator[SubmissionRepository]:
    """Repository on a session of its own, for work outliving the request."""
    async with get_session_factory()() as session:
        yield SqlSubmissionRepository(session)


def get_repository_factory() -> RepositoryFactory:
    return sql_repository_scope


def get_idempotency(
    settings: Annotated[Settings, Depends(get_settings)],
) -> IdempotencyMiddleware:
    return IdempotencyMiddleware(_idempotency_store, ttl_seconds=settings.idempotency_ttl_seconds)
