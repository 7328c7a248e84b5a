"""Common types and enums shared across all models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base for models exchanged with clients (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FrozenWireModel(BaseModel):
    """Immutable wire model."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class FieldKind(str, Enum):
    """Input kind of a schema field."""

    text = "text"
    email = "email"
    number = "number"
    date = "date"
    select = "select"
    checkbox = "checkbox"
    textarea = "textarea"


class FieldGroup(str, Enum):
    """Logical section a field is shown in."""

    contact = "contact"
    trip = "trip"
    pricing = "pricing"


class HotelCategory(str, Enum):
    """Hotel category for package quotes."""

    three_star = "3*"
    four_star = "4*"
    five_star = "5*"


class StarRating(str, Enum):
    """Rating of a booked hotel night."""

    three_star = "3*"
    four_star = "4*"
    five_star = "5*"
    resort = "Resort"
    budget = "Budget"


class MealPlan(str, Enum):
    """Board basis."""

    breakfast = "BREAKFAST"
    half_board = "HALF BOARD"
    full_board = "FULL BOARD"
    all_inclusive = "ALL INCLUSIVE"


class TransferPlan(str, Enum):
    """Ground transfer arrangement."""

    private = "PRIVATE"
    shared = "SHARED"
    sic = "SIC"  # seat in coach


class DraftVariant(str, Enum):
    """Payload shape tag."""

    itinerary = "itinerary"
    booking = "booking"


class SubmissionStatus(str, Enum):
    """Review workflow state."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not SubmissionStatus.pending


class StatusFilter(str, Enum):
    """Admin list filter."""

    all = "all"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"

    def as_status(self) -> SubmissionStatus | None:
        """Map to a concrete status, or None for ``all``."""
        if self is StatusFilter.all:
            return None
        return SubmissionStatus(self.value)


class Role(str, Enum):
    """Session role."""

    agent = "agent"
    admin = "admin"
