"""Tests for the blocking draft rules and their evaluation order."""

from datetime import date
from decimal import Decimal

import pytest

from backend.tripdesk.errors import DraftValidationError
from backend.tripdesk.models.draft import BookingDraft, ItineraryDraft
from backend.tripdesk.models.inclusions import InclusionSet
from backend.tripdesk.models.items import Day, HotelNight, HotelOption
from backend.tripdesk.validation.draft import (
    DRAFT_RULES,
    DraftRule,
    check_days,
    check_draft,
    ensure_submittable,
)


def test_complete_itinerary_passes(itinerary_draft: ItineraryDraft) -> None:
    assert check_draft(itinerary_draft) is None
    ensure_submittable(itinerary_draft)


def test_complete_booking_passes(booking_draft: BookingDraft) -> None:
    assert check_draft(booking_draft) is None


def test_missing_inclusions_reported(itinerary_draft: ItineraryDraft) -> None:
    itinerary_draft.inclusions = InclusionSet()

    with pytest.raises(DraftValidationError) as exc_info:
        ensure_submittable(itinerary_draft)

    assert exc_info.value.issue.rule is DraftRule.INCLUSIONS
    assert exc_info.value.message == "Please add at least one inclusion"


def test_days_rule_wins_over_inclusions_rule(itinerary_draft: ItineraryDraft) -> None:
    """With rules 1 and 3 both failing, rule 1 is reported."""
    itinerary_draft.day_editor.update_at(0, description="")
    itinerary_draft.inclusions = InclusionSet()

    issue = check_draft(itinerary_draft)

    assert issue is not None
    assert issue.rule is DraftRule.DAYS
    assert issue.message == "Day 1: Please fill in both title and description"
    assert issue.index == 0


def test_rules_run_in_fixed_order() -> None:
    assert [rule.__name__ for rule in DRAFT_RULES] == [
        "check_days",
        "check_hotels",
        "check_inclusions",
        "check_terms",
    ]


def test_empty_days_message() -> None:
    draft = ItineraryDraft()
    draft.days = []

    issue = check_days(draft)

    assert issue is not None
    assert issue.message == "Please add at least one day to the itinerary"


def test_day_without_date_is_accepted(itinerary_draft: ItineraryDraft) -> None:
    assert itinerary_draft.days[0].day_date is None
    assert check_days(itinerary_draft) is None


def test_blank_title_is_incomplete(itinerary_draft: ItineraryDraft) -> None:
    itinerary_draft.day_editor.append(Day(title="   ", description="Free day"))

    issue = check_draft(itinerary_draft)

    assert issue is not None
    assert issue.message.startswith("Day 2:")
    assert issue.index == 1


def test_incomplete_hotel_night(itinerary_draft: ItineraryDraft) -> None:
    itinerary_draft.hotel_editor.append(
        HotelNight(location="Seminyak", check_in_date=date(2025, 12, 2), name="Sea View")
    )

    issue = check_draft(itinerary_draft)

    assert issue is not None
    assert issue.rule is DraftRule.HOTELS
    assert issue.message.startswith("Night 2: Please fill in hotel name")


def test_booking_option_needs_positive_price(booking_draft: BookingDraft) -> None:
    booking_draft.hotel_editor.append(HotelOption(name="Budget Inn", package_cost_per_person=Decimal("0")))

    issue = check_draft(booking_draft)

    assert issue is not None
    assert issue.message == "Please fill in all hotel details with valid pricing"
    assert issue.index == 1


def test_no_hotels(booking_draft: BookingDraft) -> None:
    booking_draft.hotels = []

    issue = check_draft(booking_draft)

    assert issue is not None
    assert issue.message == "Please add at least one hotel option"


def test_terms_must_be_accepted(itinerary_draft: ItineraryDraft) -> None:
    itinerary_draft.accepted_terms = False

    issue = check_draft(itinerary_draft)

    assert issue is not None
    assert issue.rule is DraftRule.TERMS
    assert issue.message == "You must accept the terms"


def test_payload_is_checked_like_draft(itinerary_draft: ItineraryDraft) -> None:
    itinerary_draft.accepted_terms = False

    issue = check_draft(itinerary_draft.to_submission_payload())

    assert issue is not None
    assert issue.rule is DraftRule.TERMS
