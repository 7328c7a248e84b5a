"""Per-field validation driven by field descriptors.

Advisory only: a field error is shown next to the field and keeps that value
out of the draft, but the blocking submit checks live in
``validation.draft``.
"""

import re
from collections.abc import Callable
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from backend.tripdesk.errors import FieldValidationError
from backend.tripdesk.models.common import FieldKind
from backend.tripdesk.models.schema import FieldDescriptor

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

FieldParser = Callable[[FieldDescriptor, Any], Any]


def _fail(descriptor: FieldDescriptor, message: str) -> FieldValidationError:
    return FieldValidationError(descriptor.name, message)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _parse_text(descriptor: FieldDescriptor, value: Any) -> str:
    if not isinstance(value, str):
        raise _fail(descriptor, f"{descriptor.label} must be text")
    length = len(value.strip())
    if descriptor.min is not None and length < descriptor.min:
        raise _fail(
            descriptor,
            f"{descriptor.label} must be at least {_format_bound(descriptor.min)} characters",
        )
    if descriptor.max is not None and length > descriptor.max:
        raise _fail(
            descriptor,
            f"{descriptor.label} must be at most {_format_bound(descriptor.max)} characters",
        )
    return value


def _parse_email(descriptor: FieldDescriptor, value: Any) -> str:
    text = _parse_text(descriptor, value).strip()
    if not EMAIL_PATTERN.match(text):
        raise _fail(descriptor, f"{descriptor.label} must be a valid email address")
    return text


def _parse_number(descriptor: FieldDescriptor, value: Any) -> int | Decimal:
    if isinstance(value, bool):
        raise _fail(descriptor, f"{descriptor.label} must be a number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise _fail(descriptor, f"{descriptor.label} must be a number") from e
    if not number.is_finite():
        raise _fail(descriptor, f"{descriptor.label} must be a number")

    if descriptor.min is not None and number < Decimal(str(descriptor.min)):
        raise _fail(
            descriptor, f"{descriptor.label} must be at least {_format_bound(descriptor.min)}"
        )
    if descriptor.max is not None and number > Decimal(str(descriptor.max)):
        raise _fail(
            descriptor, f"{descriptor.label} must be at most {_format_bound(descriptor.max)}"
        )

    if number == number.to_integral_value():
        return int(number)
    return number


def _parse_date(descriptor: FieldDescriptor, value: Any) -> date:
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as e:
            raise _fail(descriptor, f"{descriptor.label} must be a date (YYYY-MM-DD)") from e
    raise _fail(descriptor, f"{descriptor.label} must be a date (YYYY-MM-DD)")


def _parse_select(descriptor: FieldDescriptor, value: Any) -> str:
    allowed = {option.value for option in descriptor.options}
    if value not in allowed:
        raise _fail(descriptor, f"{descriptor.label} must be one of the listed options")
    return str(value)


def _parse_checkbox(descriptor: FieldDescriptor, value: Any) -> bool:
    if not isinstance(value, bool):
        raise _fail(descriptor, f"{descriptor.label} must be checked or unchecked")
    if descriptor.required and not value:
        raise _fail(descriptor, f"{descriptor.label} is required")
    return value


# One parser per kind; a unit test asserts this table covers FieldKind.
FIELD_PARSERS: dict[FieldKind, FieldParser] = {
    FieldKind.text: _parse_text,
    FieldKind.email: _parse_email,
    FieldKind.number: _parse_number,
    FieldKind.date: _parse_date,
    FieldKind.select: _parse_select,
    FieldKind.checkbox: _parse_checkbox,
    FieldKind.textarea: _parse_text,
}


def parse_field(descriptor: FieldDescriptor, value: Any) -> Any:
    """Validate a raw value and return it converted for the draft.

    Empty optional fields parse to None.

    Raises:
        FieldValidationError: If the value violates the descriptor
    """
    if descriptor.kind is FieldKind.checkbox and value is None:
        value = False
    elif _is_empty(value):
        if descriptor.required:
            raise _fail(descriptor, f"{descriptor.label} is required")
        return None

    parser = FIELD_PARSERS[descriptor.kind]
    return parser(descriptor, value)


def validate_field(descriptor: FieldDescriptor, value: Any) -> str | None:
    """Return the error message for a value, or None if it is acceptable."""
    try:
        parse_field(descriptor, value)
    except FieldValidationError as e:
        return e.message
    return None
