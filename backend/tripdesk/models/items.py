"""Repeatable sub-records of a draft.

Items are immutable values. Editing an item replaces it in the owning list,
which is what lets the collection editor guarantee ordinals.
"""

from datetime import date
from decimal import Decimal

from pydantic import Field

from backend.tripdesk.models.common import (
    FrozenWireModel,
    HotelCategory,
    MealPlan,
    StarRating,
)


class Day(FrozenWireModel):
    """One day of the day-by-day plan."""

    day_number: int = Field(1, ge=1)
    day_date: date | None = Field(None, alias="date")
    title: str = ""
    description: str = ""
    ticket_inclusion: str | None = None
    image_url: str | None = None


class HotelNight(FrozenWireModel):
    """One night's accommodation."""

    night_number: int = Field(1, ge=1)
    location: str = ""
    check_in_date: date | None = None
    name: str = ""
    star_rating: StarRating = StarRating.three_star
    room_type: str = ""
    number_of_rooms: int = Field(1, ge=1)
    pax_distribution: str = ""
    meal_plan: MealPlan = MealPlan.breakfast
    image_url: str | None = None


class TransportEntry(FrozenWireModel):
    """Ground or ferry service line."""

    day: str = ""
    service_description: str = ""
    vehicle_type: str | None = None
    tickets_included: str | None = None
    ferry_details: str | None = None


class ActivityRow(FrozenWireModel):
    """Optional activity rate card row."""

    activity_name: str = ""
    price_per_person: Decimal = Field(Decimal("0"), ge=0)
    note: str | None = None


class HotelOption(FrozenWireModel):
    """Priced hotel choice of the booking variant."""

    name: str = ""
    category: HotelCategory = HotelCategory.three_star
    package_cost_per_person: Decimal = Field(Decimal("0"), ge=0)
    package_cost_per_child: Decimal = Field(Decimal("0"), ge=0)
