"""Models package - re-exports for convenience."""

from backend.tripdesk.models.common import (
    DraftVariant,
    FieldGroup,
    FieldKind,
    HotelCategory,
    MealPlan,
    Role,
    StarRating,
    StatusFilter,
    SubmissionStatus,
    TransferPlan,
)
from backend.tripdesk.models.draft import (
    BookingDraft,
    BookingPayload,
    ConsultantContact,
    ItineraryDraft,
    ItineraryPayload,
    SubmissionPayload,
    draft_from_payload,
    new_draft,
)
from backend.tripdesk.models.inclusions import InclusionSet
from backend.tripdesk.models.items import (
    ActivityRow,
    Day,
    HotelNight,
    HotelOption,
    TransportEntry,
)
from backend.tripdesk.models.schema import (
    FieldDescriptor,
    FieldOption,
    FormSchema,
    SchemaMetadata,
    display_label,
    group_fields,
)
from backend.tripdesk.models.submission import (
    LabelledField,
    Submission,
    SubmissionDetail,
    SubmissionStats,
    describe_submission,
)

__all__ = [
    # Common
    "DraftVariant",
    "FieldGroup",
    "FieldKind",
    "HotelCategory",
    "MealPlan",
    "Role",
    "StarRating",
    "StatusFilter",
    "SubmissionStatus",
    "TransferPlan",
    # Schema
    "FieldDescriptor",
    "FieldOption",
    "FormSchema",
    "SchemaMetadata",
    "display_label",
    "group_fields",
    # Items
    "Day",
    "HotelNight",
    "TransportEntry",
    "ActivityRow",
    "HotelOption",
    "InclusionSet",
    # Drafts
    "ItineraryDraft",
    "BookingDraft",
    "ItineraryPayload",
    "BookingPayload",
    "ConsultantContact",
    "SubmissionPayload",
    "new_draft",
    "draft_from_payload",
    # Submissions
    "Submission",
    "SubmissionDetail",
    "SubmissionStats",
    "LabelledField",
    "describe_submission",
]
