from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from tripbook.api import (
    get_booking_service,
    get_catalog,
    get_current_user,
    get_ledger,
)
from tripbook.models.domain import CarRentalBooking, ClassType, FlightBooking, Travelers
from tripbook.models.schemas import (
    BookingListResponse,
    CarRentalBookingSchema,
    CarRentalCreate,
    CarSchema,
    FlightBookingCreate,
    FlightBookingSchema,
    FlightSchema,
    booking_to_schema,
)
from tripbook.services.availability import AvailabilityLedger
from tripbook.services.booking_service import (
    BookingService,
    CarRentalRequest,
    FlightBookingRequest,
)
from tripbook.services.rate_catalog import RateCatalog, search_cars, search_flights

router = APIRouter()


def _split(value: Optional[str]) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


@router.get("/flights", response_model=List[FlightSchema])
def find_flights(
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    class_type: ClassType = ClassType.economy,
    adults: int = Query(1, ge=0),
    children: int = Query(0, ge=0),
    infants: int = Query(0, ge=0),
    direct_only: bool = False,
    catalog: RateCatalog = Depends(get_catalog),
    ledger: AvailabilityLedger = Depends(get_ledger),
) -> List[FlightSchema]:
    flights = search_flights(
        catalog,
        origin=origin,
        destination=destination,
        class_type=class_type,
        travelers=Travelers(adults=adults, children=children, infants=infants),
        direct_only=direct_only,
        seats_left=ledger.seats_left,
    )
    return [
        FlightSchema.from_domain(
            f, seats={c: ledger.seats_left(f, c) for c in ClassType}
        )
        for f in flights
    ]


@router.post("/flights/book", response_model=FlightBookingSchema, status_code=201)
def book_flight(
    payload: FlightBookingCreate,
    user_id: str = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
) -> FlightBookingSchema:
    booking = service.book_flight(
        user_id,
        FlightBookingRequest(
            flight_id=payload.flight_id,
            class_type=payload.class_type,
            travelers=payload.travelers.to_domain(),
            passenger_names=payload.passenger_names,
            addons=payload.addons.to_domain(),
            trip_id=payload.trip_id,
        ),
    )
    return FlightBookingSchema.from_domain(booking)


@router.get("/cars", response_model=List[CarSchema])
def find_cars(
    car_type: Optional[str] = None,
    transmission: Optional[str] = None,
    fuel: Optional[str] = None,
    min_price: float = 0.0,
    max_price: float = 500.0,
    features: Optional[str] = None,
    catalog: RateCatalog = Depends(get_catalog),
) -> List[CarSchema]:
    cars = search_cars(
        catalog,
        car_types=_split(car_type),
        transmissions=_split(transmission),
        fuels=_split(fuel),
        min_price=min_price,
        max_price=max_price,
        features=_split(features),
    )
    return [CarSchema.from_domain(c) for c in cars]


@router.post("/cars/book", response_model=CarRentalBookingSchema, status_code=201)
def book_car(
    payload: CarRentalCreate,
    user_id: str = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
) -> CarRentalBookingSchema:
    booking = service.book_car_rental(
        user_id,
        CarRentalRequest(
            car_id=payload.car_id,
            pickup_location=payload.pickup_location,
            pickup_date=payload.pickup_date,
            return_date=payload.return_date,
            pickup_time=payload.pickup_time,
            return_time=payload.return_time,
            driver_age=payload.driver_age,
            additional_drivers=payload.additional_drivers,
            insurance=payload.insurance,
            addons=payload.addons.to_domain(),
            trip_id=payload.trip_id,
            stop_id=payload.stop_id,
        ),
    )
    return CarRentalBookingSchema.from_domain(booking)


@router.get("/bookings", response_model=BookingListResponse)
def list_bookings(
    trip_id: Optional[str] = None,
    user_id: str = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
) -> BookingListResponse:
    bookings = service.list_bookings(user_id, trip_id=trip_id)
    return BookingListResponse(
        flights=[
            FlightBookingSchema.from_domain(b) for b in bookings if isinstance(b, FlightBooking)
        ],
        car_rentals=[
            CarRentalBookingSchema.from_domain(b)
            for b in bookings
            if isinstance(b, CarRentalBooking)
        ],
    )


@router.get("/bookings/{booking_id}")
def get_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return booking_to_schema(service.get_booking(user_id, booking_id))


@router.post("/bookings/{booking_id}/cancel")
def cancel_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return booking_to_schema(service.cancel_booking(user_id, booking_id))
