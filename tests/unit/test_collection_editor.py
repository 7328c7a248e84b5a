"""Tests for the collection editor: renumbering and minimum size."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from backend.tripdesk.editing.collection import CollectionEditor
from backend.tripdesk.models.draft import BookingDraft, ItineraryDraft
from backend.tripdesk.models.items import ActivityRow, Day, HotelNight


def _ordinals(items: list[Day]) -> list[int]:
    return [day.day_number for day in items]


def test_remove_only_day_leaves_collection_unchanged() -> None:
    """Removing the last remaining day is a no-op."""
    draft = ItineraryDraft()
    draft.day_editor.update_at(0, title="Arrival", description="Pickup")
    before = list(draft.days)

    removed = draft.day_editor.remove_at(0)

    assert removed is False
    assert draft.days == before
    assert len(draft.days) == 1


def test_append_then_remove_first_renumbers_remaining_day() -> None:
    """The surviving day is renumbered from 2 to 1."""
    draft = ItineraryDraft()
    editor = draft.day_editor

    second = editor.append(Day(title="Second"))
    assert second.day_number == 2

    assert editor.remove_at(0) is True

    assert len(draft.days) == 1
    assert draft.days[0].title == "Second"
    assert draft.days[0].day_number == 1


def test_append_assigns_next_ordinal_regardless_of_input() -> None:
    draft = ItineraryDraft()

    appended = draft.day_editor.append(Day(day_number=42, title="Beach"))

    assert appended.day_number == 2
    assert _ordinals(draft.days) == [1, 2]


def test_ordinals_stay_dense_after_mixed_operations() -> None:
    editor = CollectionEditor([Day()], Day, ordinal_field="day_number", minimum=1)
    operations = [
        ("append", None),
        ("append", None),
        ("append", None),
        ("remove", 1),
        ("append", None),
        ("remove", 0),
        ("remove", -1),
        ("append", None),
        ("remove", 2),
    ]

    for op, index in operations:
        if op == "append":
            editor.append()
        else:
            assert index is not None
            editor.remove_at(index)
        assert _ordinals(editor.items) == list(range(1, len(editor) + 1))


def test_update_at_ignores_ordinal_in_patch() -> None:
    draft = ItineraryDraft()
    draft.day_editor.append()

    updated = draft.day_editor.update_at(1, day_number=7, title="Temple tour")

    assert updated.day_number == 2
    assert updated.title == "Temple tour"
    assert _ordinals(draft.days) == [1, 2]


def test_update_at_ignores_ordinal_under_wire_name() -> None:
    draft = ItineraryDraft()
    draft.day_editor.append()
    draft.hotel_editor.append()

    draft.day_editor.update_at(1, dayNumber=7, title="x")
    draft.hotel_editor.update_at(0, nightNumber=4, location="Ubud")

    assert _ordinals(draft.days) == [1, 2]
    assert [night.night_number for night in draft.hotels] == [1, 2]
    assert draft.hotels[0].location == "Ubud"


def test_update_at_accepts_wire_alias_for_day_date() -> None:
    draft = ItineraryDraft()

    updated = draft.day_editor.update_at(0, day_date=date(2025, 12, 2))

    assert updated.day_date == date(2025, 12, 2)
    assert updated.model_dump(by_alias=True)["date"] == date(2025, 12, 2)


def test_update_at_rejects_invalid_values() -> None:
    draft = ItineraryDraft()
    draft.activity_editor.append()

    with pytest.raises(ValidationError):
        draft.activity_editor.update_at(0, price_per_person=Decimal("-1"))

    assert draft.activities[0].price_per_person == Decimal("0")


def test_remove_at_out_of_range_raises() -> None:
    draft = ItineraryDraft()
    draft.day_editor.append()

    with pytest.raises(IndexError):
        draft.day_editor.remove_at(5)


def test_hotel_nights_keep_minimum_and_numbering() -> None:
    draft = ItineraryDraft()
    editor = draft.hotel_editor

    editor.append(HotelNight(location="Ubud"))
    editor.append(HotelNight(location="Seminyak"))
    editor.remove_at(0)

    assert [night.night_number for night in draft.hotels] == [1, 2]
    assert [night.location for night in draft.hotels] == ["Ubud", "Seminyak"]

    editor.remove_at(0)
    assert editor.remove_at(0) is False
    assert len(draft.hotels) == 1


def test_unnumbered_collections_can_be_emptied() -> None:
    draft = ItineraryDraft()
    draft.activity_editor.append(ActivityRow(activity_name="Snorkelling"))

    assert draft.activity_editor.remove_at(0) is True
    assert draft.activities == []
    assert draft.transport_editor.numbered is False


def test_booking_hotel_options_keep_one_entry() -> None:
    draft = BookingDraft()

    assert draft.hotel_editor.remove_at(0) is False
    assert len(draft.hotels) == 1
