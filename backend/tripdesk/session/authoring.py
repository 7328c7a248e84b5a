"""Authoring session - owns one draft from schema load to submission."""

import logging
import uuid
from typing import Any

from pydantic import ValidationError

from backend.tripdesk.adapters.schema_source import SchemaSource
from backend.tripdesk.errors import FieldValidationError
from backend.tripdesk.models.common import DraftVariant, FieldGroup
from backend.tripdesk.models.draft import Draft, new_draft
from backend.tripdesk.models.schema import FieldDescriptor, FormSchema, group_fields
from backend.tripdesk.models.submission import Submission
from backend.tripdesk.session.gateways import SubmissionGateway
from backend.tripdesk.validation.draft import ensure_submittable
from backend.tripdesk.validation.fields import parse_field

logger = logging.getLogger(__name__)


class SessionNotStarted(RuntimeError):
    """The session was used before ``start`` loaded a schema."""


class AuthoringSession:
    """Edits a draft against its schema and submits it.

    Field edits are advisory: a bad value is recorded in ``field_errors`` and
    left out of the draft. Submitting checks those first, then the draft
    rules, and only then calls the gateway. A failed submit keeps the draft.
    Each draft carries one idempotency key, kept across failed submits, so a
    retry after a lost response does not create a second submission.
    """

    def __init__(
        self,
        variant: DraftVariant,
        schema_source: SchemaSource,
        gateway: SubmissionGateway,
    ) -> None:
        self.variant = variant
        self._schema_source = schema_source
        self._gateway = gateway
        self._schema: FormSchema | None = None
        self._draft: Draft | None = None
        self.field_errors: dict[str, str] = {}
        self.idempotency_key: str | None = None
        self.last_submission: Submission | None = None

    async def start(self) -> None:
        """Load the schema and open a fresh draft.

        Raises:
            SchemaUnavailable: If the schema cannot be loaded; the session
                stays unusable
        """
        self._schema = await self._schema_source.load_schema(self.variant)
        self._reset()

    @property
    def started(self) -> bool:
        return self._draft is not None

    @property
    def schema(self) -> FormSchema:
        if self._schema is None:
            raise SessionNotStarted("Authoring session has no schema; call start() first")
        return self._schema

    @property
    def draft(self) -> Draft:
        if self._draft is None:
            raise SessionNotStarted("Authoring session has no draft; call start() first")
        return self._draft

    def sections(self) -> dict[FieldGroup, list[FieldDescriptor]]:
        """Schema fields grouped for display."""
        return group_fields(self.schema.fields)

    def set_field(self, name: str, value: Any) -> str | None:
        """Set a scalar draft field by its wire name.

        Returns:
            The validation message for the field, or None if accepted
        """
        draft = self.draft
        descriptor = self.schema.get(name)

        try:
            parsed = parse_field(descriptor, value) if descriptor is not None else value
        except FieldValidationError as e:
            self.field_errors[name] = e.message
            return e.message

        attribute = _draft_attribute(draft, name)
        if attribute is None:
            logger.debug("Field %s has no draft counterpart; value not stored", name)
            self.field_errors.pop(name, None)
            return None

        if parsed is None:
            parsed = type(draft).model_fields[attribute].get_default(call_default_factory=True)

        try:
            setattr(draft, attribute, parsed)
        except ValidationError as e:
            message = e.errors()[0]["msg"]
            self.field_errors[name] = message
            return message

        self.field_errors.pop(name, None)
        return None

    def toggle_inclusion(self, item: str) -> None:
        self.draft.inclusions = self.draft.inclusions.toggle(item)

    def toggle_exclusion(self, item: str) -> None:
        self.draft.exclusions = self.draft.exclusions.toggle(item)

    def add_custom_inclusion(self, item: str) -> None:
        self.draft.inclusions = self.draft.inclusions.add_custom(item)

    def add_custom_exclusion(self, item: str) -> None:
        self.draft.exclusions = self.draft.exclusions.add_custom(item)

    def custom_inclusions(self) -> list[str]:
        """Selected inclusions that are not in the schema catalog."""
        return self.draft.inclusions.custom_entries(self.schema.metadata.inclusions_list)

    def accept_terms(self, accepted: bool = True) -> None:
        self.draft.accepted_terms = accepted

    async def submit(self) -> Submission:
        """Validate and submit the draft, then start a fresh one.

        Raises:
            FieldValidationError: If a field edit is still invalid
            DraftValidationError: If a draft rule fails
            RemoteError: If the gateway call fails (draft kept for retry)
            ValidationRejected: If the workflow refuses the payload
        """
        draft = self.draft
        if self.field_errors:
            name, message = next(iter(self.field_errors.items()))
            raise FieldValidationError(name, message)

        ensure_submittable(draft)

        submission = await self._gateway.submit(
            draft.to_submission_payload(), idempotency_key=self.idempotency_key
        )

        logger.info(
            "Draft submitted",
            extra={"structured": {"submission_id": str(submission.id), "variant": self.variant.value}},
        )
        self.last_submission = submission
        self._reset()
        return submission

    def _reset(self) -> None:
        self._draft = new_draft(self.variant, self._schema)
        self.field_errors = {}
        self.idempotency_key = str(uuid.uuid4())


def _draft_attribute(draft: Draft, name: str) -> str | None:
    """Map a wire name (or attribute name) to the draft attribute."""
    for attribute, info in type(draft).model_fields.items():
        if name in (attribute, info.alias):
            return attribute
    return None
