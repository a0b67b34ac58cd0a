import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence
from uuid import uuid4

from tripbook.core.errors import (
    BookingNotFound,
    CarNotFound,
    EngineError,
    FlightNotFound,
    ValidationError,
)
from tripbook.models.domain import (
    BookingKind,
    CarAddons,
    CarRentalBooking,
    CarRentalStatus,
    ClassType,
    FlightAddons,
    FlightBooking,
    FlightBookingStatus,
    InsuranceTier,
    Passenger,
    PassengerType,
    PaymentStatus,
    Travelers,
)
from tripbook.services.access import get_owned_trip, require_user
from tripbook.services.availability import AvailabilityLedger
from tripbook.services.pricing import price_car_rental, price_flight
from tripbook.services.rate_catalog import RateCatalog
from tripbook.services.references import (
    CAR_RENTAL_PREFIX,
    FLIGHT_PREFIX,
    ReferenceGenerator,
)
from tripbook.storage.repository import Booking, InMemoryRepository

logger = logging.getLogger(__name__)

MIN_DRIVER_AGE = 18
DEFAULT_RENTAL_TIME = "10:00"


@dataclass
class FlightBookingRequest:
    flight_id: str
    class_type: ClassType
    travelers: Travelers
    passenger_names: Sequence[str]
    addons: FlightAddons = field(default_factory=FlightAddons)
    trip_id: Optional[str] = None


@dataclass
class CarRentalRequest:
    car_id: str
    pickup_location: str
    pickup_date: date
    return_date: date
    driver_age: int
    additional_drivers: int = 0
    insurance: InsuranceTier = InsuranceTier.basic
    addons: CarAddons = field(default_factory=CarAddons)
    pickup_time: str = DEFAULT_RENTAL_TIME
    return_time: str = DEFAULT_RENTAL_TIME
    trip_id: Optional[str] = None
    stop_id: Optional[str] = None


def assign_passenger_types(travelers: Travelers, names: Sequence[str]) -> List[Passenger]:
    """Adults first, then children, then infants, in the order names were given."""
    types = (
        [PassengerType.adult] * travelers.adults
        + [PassengerType.child] * travelers.children
        + [PassengerType.infant] * travelers.infants
    )
    return [Passenger(name=name.strip(), type=kind) for name, kind in zip(names, types)]


class BookingService:
    def __init__(
        self,
        repository: InMemoryRepository,
        catalog: RateCatalog,
        ledger: AvailabilityLedger,
        references: ReferenceGenerator,
    ):
        self.repository = repository
        self.catalog = catalog
        self.ledger = ledger
        self.references = references

    # flights

    def _validate_flight_request(self, request: FlightBookingRequest) -> None:
        travelers = request.travelers
        if min(travelers.adults, travelers.children, travelers.infants) < 0:
            raise ValidationError("Traveler counts must not be negative")
        if travelers.total == 0:
            raise ValidationError("At least one traveler is required")
        if len(request.passenger_names) != travelers.total:
            raise ValidationError(
                f"Expected {travelers.total} passenger names, got {len(request.passenger_names)}"
            )
        if any(not name or not name.strip() for name in request.passenger_names):
            raise ValidationError("Every passenger needs a name")

    def book_flight(self, user_id: str, request: FlightBookingRequest) -> FlightBooking:
        user_id = require_user(user_id)
        self._validate_flight_request(request)
        if request.trip_id:
            get_owned_trip(self.repository, request.trip_id, user_id)
        flight = self.catalog.get_flight(request.flight_id)
        if flight is None:
            raise FlightNotFound(f"Flight {request.flight_id} not found")

        with self.ledger.hold_flight(flight.id, request.class_type):
            try:
                total_price = price_flight(
                    flight,
                    request.class_type,
                    request.travelers,
                    request.addons,
                    seats_available=self.ledger.seats_left(flight, request.class_type),
                )
            except EngineError as exc:
                logger.warning("Flight booking rejected for %s: %s", user_id, exc.detail)
                raise
            booking = FlightBooking(
                booking_id=str(uuid4()),
                user_id=user_id,
                flight_id=flight.id,
                departure_date=flight.departure_date,
                class_type=request.class_type,
                travelers=request.travelers,
                passengers=assign_passenger_types(request.travelers, request.passenger_names),
                addons=request.addons,
                total_price=total_price,
                status=FlightBookingStatus.upcoming,
                payment_status=PaymentStatus.paid,
                booking_reference=self.references.generate(FLIGHT_PREFIX),
                created_at=datetime.utcnow(),
                trip_id=request.trip_id,
            )
            self.repository.save_booking(booking)
            self.ledger.take_seats(flight, request.class_type, request.travelers.total)

        logger.info(
            "Booked flight %s (%s) for %s: %s, total %.2f",
            flight.flight_number,
            request.class_type.value,
            user_id,
            booking.booking_reference,
            total_price,
        )
        return booking

    # car rentals

    def _validate_car_request(self, request: CarRentalRequest) -> None:
        if not request.pickup_location or not request.pickup_location.strip():
            raise ValidationError("pickup_location is required")
        if request.driver_age < MIN_DRIVER_AGE:
            raise ValidationError(f"Driver must be at least {MIN_DRIVER_AGE}")
        if request.additional_drivers < 0:
            raise ValidationError("additional_drivers must not be negative")

    def book_car_rental(self, user_id: str, request: CarRentalRequest) -> CarRentalBooking:
        user_id = require_user(user_id)
        self._validate_car_request(request)
        if request.trip_id:
            trip = get_owned_trip(self.repository, request.trip_id, user_id)
            if request.stop_id:
                stop = self.repository.get_stop(request.stop_id)
                if stop is None or stop.trip_id != trip.trip_id:
                    raise ValidationError(f"Stop {request.stop_id} is not part of this trip")
        elif request.stop_id:
            raise ValidationError("stop_id requires trip_id")
        car = self.catalog.get_car(request.car_id)
        if car is None:
            raise CarNotFound(f"Car {request.car_id} not found")

        with self.ledger.hold_car(car.id):
            try:
                quote = price_car_rental(
                    car,
                    request.pickup_date,
                    request.return_date,
                    driver_age=request.driver_age,
                    additional_drivers=request.additional_drivers,
                    insurance=request.insurance,
                    addons=request.addons,
                )
                self.ledger.ensure_car_free(car, request.pickup_date, request.return_date)
            except EngineError as exc:
                logger.warning("Car rental rejected for %s: %s", user_id, exc.detail)
                raise
            booking = CarRentalBooking(
                booking_id=str(uuid4()),
                user_id=user_id,
                car_id=car.id,
                pickup_location=request.pickup_location.strip(),
                pickup_date=request.pickup_date,
                pickup_time=request.pickup_time or DEFAULT_RENTAL_TIME,
                return_date=request.return_date,
                return_time=request.return_time or DEFAULT_RENTAL_TIME,
                driver_age=request.driver_age,
                additional_drivers=request.additional_drivers,
                insurance=request.insurance,
                addons=request.addons,
                days=quote.days,
                total_price=quote.total_price,
                status=CarRentalStatus.upcoming,
                payment_status=PaymentStatus.paid,
                booking_reference=self.references.generate(CAR_RENTAL_PREFIX),
                created_at=datetime.utcnow(),
                trip_id=request.trip_id,
                stop_id=request.stop_id,
            )
            self.repository.save_booking(booking)
            self.ledger.reserve_car(car.id, booking.booking_id, request.pickup_date, request.return_date)

        logger.info(
            "Booked car %s for %s: %s, %d days, total %.2f",
            car.id,
            user_id,
            booking.booking_reference,
            quote.days,
            quote.total_price,
        )
        return booking

    # lifecycle

    def get_booking(self, user_id: str, booking_id: str) -> Booking:
        user_id = require_user(user_id)
        booking = self.repository.get_booking(booking_id)
        if booking is None or booking.user_id != user_id:
            raise BookingNotFound(f"Booking {booking_id} not found")
        return booking

    def list_bookings(self, user_id: str, trip_id: Optional[str] = None) -> List[Booking]:
        user_id = require_user(user_id)
        if trip_id:
            get_owned_trip(self.repository, trip_id, user_id)
            return self.repository.list_bookings_for_trip(trip_id)
        return self.repository.list_bookings_for_user(user_id)

    def cancel_booking(self, user_id: str, booking_id: str) -> Booking:
        booking = self.get_booking(user_id, booking_id)
        if booking.is_cancelled:
            return booking

        if booking.kind == BookingKind.flight:
            flight = self.catalog.get_flight(booking.flight_id)
            with self.ledger.hold_flight(booking.flight_id, booking.class_type):
                if booking.is_cancelled:
                    return booking
                booking.status = FlightBookingStatus.cancelled
                booking.payment_status = PaymentStatus.refunded
                self.repository.save_booking(booking)
                if flight is not None:
                    self.ledger.release_seats(flight, booking.class_type, booking.travelers.total)
        else:
            with self.ledger.hold_car(booking.car_id):
                if booking.is_cancelled:
                    return booking
                booking.status = CarRentalStatus.cancelled
                booking.payment_status = PaymentStatus.refunded
                self.repository.save_booking(booking)
                self.ledger.release_car(booking.car_id, booking.booking_id)

        logger.info("Cancelled booking %s (%s)", booking.booking_reference, booking.kind.value)
        return booking
