"""Asynchronous document generation for approved submissions.

Runs after approval has been recorded. A failure here never undoes the
approval: the submission stays "approved, document pending" and an admin can
trigger generation again.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from uuid import UUID

from backend.tripdesk.adapters.documents import DocumentGenerator
from backend.tripdesk.db.repositories import SubmissionRepository
from backend.tripdesk.errors import DocumentGenerationFailed
from backend.tripdesk.models.common import SubmissionStatus
from backend.tripdesk.models.submission import Submission
from backend.tripdesk.utils.logging import StructuredWorkflowLogger
from backend.tripdesk.utils.metrics import PrometheusWorkflowMetrics

RepositoryFactory = Callable[[], AbstractAsyncContextManager[SubmissionRepository]]


async def generate_document(
    submission_id: UUID,
    generator: DocumentGenerator,
    repository_factory: RepositoryFactory,
    logger: StructuredWorkflowLogger | None = None,
    metrics: PrometheusWorkflowMetrics | None = None,
) -> Submission | None:
    """Render and attach the document of an approved submission.

    Args:
        submission_id: Approved submission
        generator: Document renderer
        repository_factory: Opens a repository scope of its own, since this
            runs after the request that scheduled it has finished
        logger: Structured event logger
        metrics: Workflow counters

    Returns:
        The submission with its document attached, or None if nothing was
        attached (not approved, already attached, or generation failed)
    """
    logger = logger or StructuredWorkflowLogger()
    metrics = metrics or PrometheusWorkflowMetrics()

    async with repository_factory() as repository:
        submission = await repository.get(submission_id)
        if (
            submission is None
            or submission.status is not SubmissionStatus.approved
            or submission.document_url is not None
        ):
            logger.log_document(submission_id, "skipped")
            metrics.inc_document("skipped")
            return None

        try:
            url = await generator.render(submission)
        except DocumentGenerationFailed as e:
            logger.log_document(submission_id, "failed", error_reason=e.message)
            metrics.inc_document("failed")
            return None

        updated = await repository.attach_document(submission_id, url)
        if updated is None:
            logger.log_document(submission_id, "skipped")
            metrics.inc_document("skipped")
            return None

        logger.log_document(submission_id, "attached")
        metrics.inc_document("attached")
        return updated
