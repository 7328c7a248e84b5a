"""Draft aggregates and their frozen submission payloads.

Two shapes coexist: the current multi-section itinerary and the legacy
cost-estimate booking. Each has a mutable draft, edited by one authoring
session, and a frozen payload that is what a submission carries.
"""

from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend.tripdesk.editing.collection import CollectionEditor
from backend.tripdesk.models.common import (
    DraftVariant,
    FrozenWireModel,
    HotelCategory,
    MealPlan,
    TransferPlan,
    WireModel,
)
from backend.tripdesk.models.inclusions import InclusionSet
from backend.tripdesk.models.items import (
    ActivityRow,
    Day,
    HotelNight,
    HotelOption,
    TransportEntry,
)
from backend.tripdesk.models.schema import FormSchema

# Catalog entries preselected in a fresh draft.
PRESELECTED_INCLUSIONS = 3
PRESELECTED_EXCLUSIONS = 2

_DRAFT_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, validate_assignment=True
)
_PAYLOAD_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ConsultantContact(FrozenWireModel):
    """Travel consultant shown on the document."""

    name: str = ""
    phone: str = ""
    email: str = ""


class ItineraryFields(WireModel):
    """Scalar trip fields of the itinerary variant."""

    variant: Literal["itinerary"] = "itinerary"
    guest_name: str = ""
    destination: str = ""
    start_date: date | None = None
    duration: int = Field(3, ge=1, description="Nights")
    trip_id: str = ""
    quote_price: Decimal | None = Field(None, ge=0)
    payment_note: str = ""
    adults: int = Field(2, ge=1)
    children: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    hotel_category: HotelCategory = HotelCategory.three_star
    meal_plan: MealPlan = MealPlan.breakfast
    transfer_plan: TransferPlan = TransferPlan.private
    consultant: ConsultantContact = Field(default_factory=ConsultantContact)
    cover_hero_image_url: str | None = None
    accepted_terms: bool = False


class BookingFields(WireModel):
    """Scalar fields of the legacy booking variant."""

    variant: Literal["booking"] = "booking"
    client_name: str = ""
    email: str = ""
    contact_no: str = ""
    destination: str = ""
    travel_date: str = Field("", description="Free text, e.g. 'Nov 2025'")
    duration: int = Field(3, ge=1, description="Nights")
    adults: int = Field(2, ge=1)
    children: int = Field(0, ge=0)
    infants: int = Field(0, ge=0)
    hotel_category: HotelCategory = HotelCategory.three_star
    meal_plan: MealPlan = MealPlan.breakfast
    transfer_plan: TransferPlan = TransferPlan.private
    accepted_terms: bool = False


class ItineraryPayload(ItineraryFields):
    """Frozen itinerary as carried by a submission."""

    model_config = _PAYLOAD_CONFIG

    days: tuple[Day, ...] = ()
    hotels: tuple[HotelNight, ...] = ()
    transportation: tuple[TransportEntry, ...] = ()
    activities: tuple[ActivityRow, ...] = ()
    inclusions: InclusionSet = Field(default_factory=InclusionSet)
    exclusions: InclusionSet = Field(default_factory=InclusionSet)


class BookingPayload(BookingFields):
    """Frozen booking as carried by a submission."""

    model_config = _PAYLOAD_CONFIG

    days: tuple[Day, ...] = ()
    hotels: tuple[HotelOption, ...] = ()
    inclusions: InclusionSet = Field(default_factory=InclusionSet)
    exclusions: InclusionSet = Field(default_factory=InclusionSet)


SubmissionPayload = Annotated[ItineraryPayload | BookingPayload, Field(discriminator="variant")]


class ItineraryDraft(ItineraryFields):
    """Editable multi-section itinerary."""

    model_config = _DRAFT_CONFIG

    days: list[Day] = Field(default_factory=lambda: [Day()])
    hotels: list[HotelNight] = Field(default_factory=lambda: [HotelNight()])
    transportation: list[TransportEntry] = Field(default_factory=list)
    activities: list[ActivityRow] = Field(default_factory=list)
    inclusions: InclusionSet = Field(default_factory=InclusionSet)
    exclusions: InclusionSet = Field(default_factory=InclusionSet)

    @property
    def day_editor(self) -> CollectionEditor[Day]:
        return CollectionEditor(self.days, Day, ordinal_field="day_number", minimum=1)

    @property
    def hotel_editor(self) -> CollectionEditor[HotelNight]:
        return CollectionEditor(self.hotels, HotelNight, ordinal_field="night_number", minimum=1)

    @property
    def transport_editor(self) -> CollectionEditor[TransportEntry]:
        return CollectionEditor(self.transportation, TransportEntry)

    @property
    def activity_editor(self) -> CollectionEditor[ActivityRow]:
        return CollectionEditor(self.activities, ActivityRow)

    def to_submission_payload(self) -> ItineraryPayload:
        """Deep, frozen copy safe to persist."""
        return ItineraryPayload.model_validate(self.model_dump())


class BookingDraft(BookingFields):
    """Editable cost-estimate booking."""

    model_config = _DRAFT_CONFIG

    days: list[Day] = Field(default_factory=lambda: [Day()])
    hotels: list[HotelOption] = Field(default_factory=lambda: [HotelOption()])
    inclusions: InclusionSet = Field(default_factory=InclusionSet)
    exclusions: InclusionSet = Field(default_factory=InclusionSet)

    @property
    def day_editor(self) -> CollectionEditor[Day]:
        return CollectionEditor(self.days, Day, ordinal_field="day_number", minimum=1)

    @property
    def hotel_editor(self) -> CollectionEditor[HotelOption]:
        return CollectionEditor(self.hotels, HotelOption, minimum=1)

    def to_submission_payload(self) -> BookingPayload:
        """Deep, frozen copy safe to persist."""
        return BookingPayload.model_validate(self.model_dump())


Draft = ItineraryDraft | BookingDraft
Payload = ItineraryPayload | BookingPayload

_COLLECTION_FIELDS = frozenset(
    {"days", "hotels", "transportation", "activities", "inclusions", "exclusions"}
)


def new_draft(variant: DraftVariant, schema: FormSchema | None = None) -> Draft:
    """Create a fresh draft with catalog defaults preselected."""
    draft: Draft
    if variant is DraftVariant.itinerary:
        draft = ItineraryDraft()
    else:
        draft = BookingDraft()

    if schema is not None:
        draft.inclusions = InclusionSet.from_catalog(
            schema.metadata.inclusions_list, PRESELECTED_INCLUSIONS
        )
        draft.exclusions = InclusionSet.from_catalog(
            schema.metadata.exclusions_list, PRESELECTED_EXCLUSIONS
        )
    return draft


def draft_from_payload(payload: Payload) -> Draft:
    """Rebuild an editable draft from a submitted payload."""
    if isinstance(payload, ItineraryPayload):
        return ItineraryDraft.model_validate(payload.model_dump())
    return BookingDraft.model_validate(payload.model_dump())


def scalar_fields(payload: Payload) -> dict[str, Any]:
    """Wire-named scalar fields of a payload (collections excluded)."""
    dumped = payload.model_dump(mode="json", by_alias=True, exclude=set(_COLLECTION_FIELDS))
    dumped.pop("variant", None)
    return dumped
