"""Fare and rental price computation.

All amounts are in the catalog's unit. Surcharges are flat per traveler
(flights) or per rental day (cars) and are never pro-rated.
"""
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from tripbook.core.errors import (
    CarUnavailable,
    InsufficientCapacity,
    InvalidDateRange,
    ValidationError,
)
from tripbook.models.domain import (
    Car,
    CarAddons,
    ClassType,
    Flight,
    FlightAddons,
    InsuranceTier,
    Travelers,
)

TRAVEL_INSURANCE_PER_TRAVELER = 50.0
EXTRA_BAGGAGE_PER_TRAVELER = 30.0
SEAT_SELECTION_PER_TRAVELER = 15.0

INSURANCE_PER_DAY: Dict[InsuranceTier, float] = {
    InsuranceTier.none: 0.0,
    InsuranceTier.basic: 15.0,
    InsuranceTier.premium: 25.0,
}
GPS_PER_DAY = 5.0
CHILD_SEAT_PER_DAY = 8.0
ADDITIONAL_INSURANCE_PER_DAY = 12.0
ADDITIONAL_DRIVER_PER_DAY = 10.0
YOUNG_DRIVER_PER_DAY = 20.0
YOUNG_DRIVER_AGE = 25


@dataclass(frozen=True)
class CarQuote:
    days: int
    total_price: float


def price_flight(
    flight: Flight,
    class_type: ClassType,
    travelers: Travelers,
    addons: FlightAddons,
    seats_available: Optional[int] = None,
) -> float:
    """Total for a party in one fare class.

    ``seats_available`` defaults to the catalog inventory; the booking
    service passes the ledger's live count instead.
    """
    if class_type not in flight.price:
        raise ValidationError(f"{flight.flight_number} has no {class_type.value} fare")
    if seats_available is None:
        seats_available = flight.available_seats.get(class_type, 0)
    if seats_available < travelers.total:
        raise InsufficientCapacity(
            f"{flight.flight_number} {class_type.value}: {seats_available} seats left, "
            f"{travelers.total} requested"
        )

    # infants travel on a lap and pay no seat fare
    total = flight.price[class_type] * travelers.seated

    if addons.travel_insurance:
        total += TRAVEL_INSURANCE_PER_TRAVELER * travelers.total
    if addons.extra_baggage:
        total += EXTRA_BAGGAGE_PER_TRAVELER * travelers.total
    if addons.seat_selection:
        total += SEAT_SELECTION_PER_TRAVELER * travelers.total
    return total


def rental_days(pickup_date: date, return_date: date) -> int:
    days = (return_date - pickup_date).days
    if days <= 0:
        raise InvalidDateRange("Return date must be after pickup date")
    return days


def price_car_rental(
    car: Car,
    pickup_date: date,
    return_date: date,
    driver_age: int,
    additional_drivers: int = 0,
    insurance: InsuranceTier = InsuranceTier.basic,
    addons: CarAddons = CarAddons(),
) -> CarQuote:
    days = rental_days(pickup_date, return_date)
    if not car.available:
        raise CarUnavailable(f"{car.make} {car.model} is not available")

    per_day = car.daily_rate + INSURANCE_PER_DAY[insurance]
    if addons.gps:
        per_day += GPS_PER_DAY
    if addons.child_seat:
        per_day += CHILD_SEAT_PER_DAY
    if addons.additional_insurance:
        per_day += ADDITIONAL_INSURANCE_PER_DAY
    per_day += ADDITIONAL_DRIVER_PER_DAY * additional_drivers
    if driver_age < YOUNG_DRIVER_AGE:
        per_day += YOUNG_DRIVER_PER_DAY

    return CarQuote(days=days, total_price=per_day * days)
