"""Blocking draft-level checks run before a draft may become a submission.

Rules run in a fixed order and the first failure is the only one reported:

1. days present and complete
2. hotels present and complete
3. at least one inclusion selected
4. terms accepted
"""

from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel

from backend.tripdesk.errors import DraftValidationError
from backend.tripdesk.models.draft import (
    BookingDraft,
    BookingPayload,
    ItineraryDraft,
    ItineraryPayload,
)
from backend.tripdesk.models.items import Day, HotelNight, HotelOption

Validatable = ItineraryDraft | BookingDraft | ItineraryPayload | BookingPayload


class DraftRule(str, Enum):
    """Draft-level rule identifiers, in evaluation order."""

    DAYS = "days"
    HOTELS = "hotels"
    INCLUSIONS = "inclusions"
    TERMS = "terms"


class DraftIssue(BaseModel):
    """The single reported draft validation failure."""

    rule: DraftRule
    message: str
    index: int | None = None  # offending collection position, if any


def _blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _day_missing(day: Day) -> bool:
    return _blank(day.title) or _blank(day.description)


def _night_missing(night: HotelNight) -> bool:
    return any(
        _blank(value)
        for value in (
            night.name,
            night.location,
            night.check_in_date,
            night.room_type,
            night.pax_distribution,
        )
    )


def _option_missing(option: HotelOption) -> bool:
    return _blank(option.name) or option.package_cost_per_person <= 0


def check_days(draft: Validatable) -> DraftIssue | None:
    """Rule 1: at least one day, each with title and description.

    Day dates are optional in both variants; the itinerary start date anchors
    the schedule.
    """
    if not draft.days:
        return DraftIssue(
            rule=DraftRule.DAYS, message="Please add at least one day to the itinerary"
        )

    for index, day in enumerate(draft.days):
        if _day_missing(day):
            return DraftIssue(
                rule=DraftRule.DAYS,
                message=f"Day {day.day_number}: Please fill in both title and description",
                index=index,
            )
    return None


def check_hotels(draft: Validatable) -> DraftIssue | None:
    """Rule 2: at least one hotel entry, each complete for its variant."""
    if not draft.hotels:
        return DraftIssue(rule=DraftRule.HOTELS, message="Please add at least one hotel option")

    for index, hotel in enumerate(draft.hotels):
        if isinstance(hotel, HotelNight):
            if _night_missing(hotel):
                return DraftIssue(
                    rule=DraftRule.HOTELS,
                    message=(
                        f"Night {hotel.night_number}: Please fill in hotel name, location, "
                        "check-in date, room type and pax distribution"
                    ),
                    index=index,
                )
        elif _option_missing(hotel):
            return DraftIssue(
                rule=DraftRule.HOTELS,
                message="Please fill in all hotel details with valid pricing",
                index=index,
            )
    return None


def check_inclusions(draft: Validatable) -> DraftIssue | None:
    """Rule 3: at least one inclusion chosen."""
    if not draft.inclusions.selected:
        return DraftIssue(
            rule=DraftRule.INCLUSIONS, message="Please add at least one inclusion"
        )
    return None


def check_terms(draft: Validatable) -> DraftIssue | None:
    """Rule 4: terms accepted."""
    if not draft.accepted_terms:
        return DraftIssue(rule=DraftRule.TERMS, message="You must accept the terms")
    return None


DRAFT_RULES: tuple[Callable[[Validatable], DraftIssue | None], ...] = (
    check_days,
    check_hotels,
    check_inclusions,
    check_terms,
)


def check_draft(draft: Validatable) -> DraftIssue | None:
    """Run the rules in order and return the first failure, if any."""
    for rule in DRAFT_RULES:
        issue = rule(draft)
        if issue is not None:
            return issue
    return None


def ensure_submittable(draft: Validatable) -> None:
    """Raise DraftValidationError unless every rule passes."""
    issue = check_draft(draft)
    if issue is not None:
        raise DraftValidationError(issue)
