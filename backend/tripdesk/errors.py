"""Error taxonomy shared by the core, the API and the client.

Every error carries a user-facing ``message``. The API turns these into the
``{"error": message}`` envelope and the HTTP client turns the envelope back
into the same types, so callers handle one set of exceptions regardless of
whether the workflow runs in-process or behind HTTP.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from backend.tripdesk.validation.draft import DraftIssue


class TripDeskError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FieldValidationError(TripDeskError):
    """A single field failed its descriptor constraints."""

    status_code = 422

    def __init__(self, field_name: str, message: str) -> None:
        super().__init__(message)
        self.field_name = field_name


class DraftValidationError(TripDeskError):
    """The draft failed one of the blocking submit rules."""

    status_code = 422

    def __init__(self, issue: "DraftIssue") -> None:
        super().__init__(issue.message)
        self.issue = issue


class ValidationRejected(TripDeskError):
    """The workflow owner re-validated a payload and refused it."""

    status_code = 422


class InvalidDecision(TripDeskError):
    """A decision request is malformed (e.g. reject without a reason)."""

    status_code = 422


class InvalidTransition(TripDeskError):
    """A decision was attempted on a submission that is already decided."""

    status_code = 409


class DocumentNotReady(TripDeskError):
    """The submission has no downloadable document (yet)."""

    status_code = 409


class SubmissionNotFound(TripDeskError):
    """No submission with that id is visible to the caller."""

    status_code = 404


class PermissionDenied(TripDeskError):
    """The session role does not allow the operation."""

    status_code = 403


class SchemaUnavailable(TripDeskError):
    """The form schema could not be obtained; no schema means no form."""

    status_code = 503


class RemoteError(TripDeskError):
    """Transport or collaborator failure. Safe to retry."""

    status_code = 502


class DocumentGenerationFailed(RemoteError):
    """The document renderer did not return a usable location."""


class ImageUploadFailed(RemoteError):
    """The image store did not accept the upload."""


class InvalidImage(TripDeskError):
    """An upload is not a base64 image or exceeds the size limit."""

    status_code = 422
