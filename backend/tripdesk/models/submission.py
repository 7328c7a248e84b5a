"""Submission models - frozen drafts inside the review workflow."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, computed_field

from backend.tripdesk.models.common import FrozenWireModel, SubmissionStatus
from backend.tripdesk.models.draft import SubmissionPayload, scalar_fields
from backend.tripdesk.models.schema import FormSchema, display_label


class Submission(FrozenWireModel):
    """A submitted draft plus workflow metadata.

    ``admin_message`` is only set on rejection and ``document_url`` only on
    approval (possibly later than the approval itself).
    """

    id: UUID
    owner_id: UUID
    data: SubmissionPayload
    status: SubmissionStatus = SubmissionStatus.pending
    created_at: datetime
    decided_at: datetime | None = None
    admin_message: str | None = None
    document_url: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def document_pending(self) -> bool:
        """Approved but the document has not been produced yet."""
        return self.status is SubmissionStatus.approved and self.document_url is None


class LabelledField(FrozenWireModel):
    """One scalar field of a payload with its display label."""

    name: str
    label: str
    value: Any


class SubmissionDetail(FrozenWireModel):
    """Submission with its scalar fields labelled for review."""

    submission: Submission
    fields: list[LabelledField] = Field(default_factory=list)


class SubmissionStats(FrozenWireModel):
    """Per-status counts for the review dashboard."""

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0


def describe_submission(
    submission: Submission, schema: FormSchema | None = None
) -> SubmissionDetail:
    """Label every scalar field of the payload by field name."""
    fields = [
        LabelledField(name=name, label=display_label(name, schema), value=value)
        for name, value in scalar_fields(submission.data).items()
    ]
    return SubmissionDetail(submission=submission, fields=fields)
