"""Form schema models - field descriptors supplied by the schema source."""

import re
from typing import Any

from pydantic import AliasChoices, Field, field_validator, model_validator

from backend.tripdesk.models.common import FieldGroup, FieldKind, FrozenWireModel

# Positional section sizes used when a schema carries no group tags.
CONTACT_FIELD_COUNT = 3
TRIP_FIELD_COUNT = 7

# Display labels keyed by canonical field name.
LABEL_OVERRIDES: dict[str, str] = {
    "clientName": "Client Name",
    "email": "Email Address",
    "contactNo": "Contact Number",
    "duration": "Duration (Nights)",
    "checkInDate": "Check-in Date",
    "checkOutDate": "Check-out Date",
    "numberOfAdults": "Number of Adults",
    "costPerAdult": "Cost per Adult (INR)",
    "advanceAmount": "Advance Amount (INR)",
    "terms": "Terms Accepted",
    "acceptedTerms": "Terms Accepted",
    "fullName": "Full Name",
    "phone": "Phone Number",
    "dateOfBirth": "Date of Birth",
    "experience": "Years of Experience",
    "comments": "Additional Comments",
}


class FieldOption(FrozenWireModel):
    """Choice offered by a select field."""

    value: str
    label: str


class FieldDescriptor(FrozenWireModel):
    """Typed description of one form field."""

    name: str = Field(..., min_length=1)
    kind: FieldKind = Field(..., validation_alias=AliasChoices("kind", "type"))
    label: str
    required: bool = False
    min: float | None = None
    max: float | None = None
    options: tuple[FieldOption, ...] = ()
    placeholder: str | None = None
    group: FieldGroup | None = None

    @field_validator("options")
    @classmethod
    def validate_unique_option_values(
        cls, v: tuple[FieldOption, ...]
    ) -> tuple[FieldOption, ...]:
        """Ensure option values are unique."""
        values = [option.value for option in v]
        if len(values) != len(set(values)):
            raise ValueError("option values must be unique")
        return v

    @model_validator(mode="after")
    def validate_constraints(self) -> "FieldDescriptor":
        """Ensure select fields have options and min <= max."""
        if self.kind is FieldKind.select and not self.options:
            raise ValueError(f"select field '{self.name}' must define options")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"field '{self.name}' has min > max")
        return self


class SchemaMetadata(FrozenWireModel):
    """Catalogs and policy text that accompany a schema."""

    inclusions_list: tuple[str, ...] = ()
    exclusions_list: tuple[str, ...] = ()
    booking_policy: dict[str, Any] | None = None


class FormSchema(FrozenWireModel):
    """Complete schema for one draft variant."""

    fields: tuple[FieldDescriptor, ...]
    metadata: SchemaMetadata = Field(default_factory=SchemaMetadata)

    @field_validator("fields")
    @classmethod
    def validate_unique_names(
        cls, v: tuple[FieldDescriptor, ...]
    ) -> tuple[FieldDescriptor, ...]:
        """Ensure field names are unique keys."""
        seen: set[str] = set()
        for descriptor in v:
            if descriptor.name in seen:
                raise ValueError(f"duplicate field name '{descriptor.name}'")
            seen.add(descriptor.name)
        return v

    def get(self, name: str) -> FieldDescriptor | None:
        """Look up a descriptor by name."""
        for descriptor in self.fields:
            if descriptor.name == name:
                return descriptor
        return None


def group_fields(
    fields: tuple[FieldDescriptor, ...] | list[FieldDescriptor],
) -> dict[FieldGroup, list[FieldDescriptor]]:
    """Partition descriptors into display sections.

    Explicit ``group`` tags win when every descriptor has one. Untagged
    schemas fall back to positional slicing of the received order: the first
    3 fields are contact details, the next 7 trip details, the rest pricing.
    """
    groups: dict[FieldGroup, list[FieldDescriptor]] = {}

    if fields and all(f.group is not None for f in fields):
        for descriptor in fields:
            assert descriptor.group is not None
            groups.setdefault(descriptor.group, []).append(descriptor)
        return groups

    boundary = CONTACT_FIELD_COUNT + TRIP_FIELD_COUNT
    slices = (
        (FieldGroup.contact, fields[:CONTACT_FIELD_COUNT]),
        (FieldGroup.trip, fields[CONTACT_FIELD_COUNT:boundary]),
        (FieldGroup.pricing, fields[boundary:]),
    )
    for group, members in slices:
        if members:
            groups[group] = list(members)
    return groups


def humanize_field_name(name: str) -> str:
    """Turn ``costPerAdult`` into ``Cost Per Adult``."""
    spaced = re.sub(r"(?<=[a-z0-9])([A-Z])", r" \1", name).strip()
    return spaced[:1].upper() + spaced[1:]


def display_label(name: str, schema: FormSchema | None = None) -> str:
    """Resolve the label for a field name."""
    if schema is not None:
        descriptor = schema.get(name)
        if descriptor is not None:
            return descriptor.label
    return LABEL_OVERRIDES.get(name) or humanize_field_name(name)
