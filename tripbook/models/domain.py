from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional


class ClassType(str, Enum):
    economy = "economy"
    business = "business"
    first = "first"


class FlightBookingStatus(str, Enum):
    upcoming = "upcoming"
    completed = "completed"
    cancelled = "cancelled"
    check_in = "check-in"


class CarRentalStatus(str, Enum):
    upcoming = "upcoming"
    active = "active"
    completed = "completed"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    paid = "paid"
    pending = "pending"
    refunded = "refunded"


class InsuranceTier(str, Enum):
    none = "none"
    basic = "basic"
    premium = "premium"


class PassengerType(str, Enum):
    adult = "adult"
    child = "child"
    infant = "infant"


class ActivityCategory(str, Enum):
    SIGHTSEEING = "SIGHTSEEING"
    FOOD = "FOOD"
    ADVENTURE = "ADVENTURE"
    CULTURE = "CULTURE"
    NIGHTLIFE = "NIGHTLIFE"
    SHOPPING = "SHOPPING"
    NATURE = "NATURE"
    SPORTS = "SPORTS"
    RELAXATION = "RELAXATION"
    OTHER = "OTHER"


class ExpenseCategory(str, Enum):
    TRANSPORT = "TRANSPORT"
    ACCOMMODATION = "ACCOMMODATION"
    ACTIVITY = "ACTIVITY"
    MEAL = "MEAL"
    OTHER = "OTHER"


class BookingKind(str, Enum):
    flight = "flight"
    car_rental = "car_rental"


# Catalog records (read-only reference data)


@dataclass(frozen=True)
class Flight:
    id: str
    airline: str
    flight_number: str
    origin_airport: str
    origin_city: str
    destination_airport: str
    destination_city: str
    departure_date: date
    departure_time: str
    arrival_date: date
    arrival_time: str
    stops: int
    price: Dict[ClassType, float]
    available_seats: Dict[ClassType, int]


@dataclass(frozen=True)
class Car:
    id: str
    make: str
    model: str
    type: str
    seats: int
    transmission: str
    fuel: str
    daily_rate: float
    features: List[str] = field(default_factory=list)
    available: bool = True


@dataclass(frozen=True)
class CatalogActivity:
    id: str
    name: str
    category: ActivityCategory
    cost: float
    duration_hours: float


# Trip records


@dataclass
class Trip:
    trip_id: str
    user_id: str
    name: str
    start_date: date
    end_date: date
    budget: float
    created_at: datetime


@dataclass
class Stop:
    stop_id: str
    trip_id: str
    city: str
    arrival_date: date
    departure_date: date
    order: int


@dataclass
class Activity:
    activity_id: str
    stop_id: str
    catalog_id: str
    name: str
    category: ActivityCategory
    cost: float
    duration_hours: float


@dataclass
class Expense:
    expense_id: str
    trip_id: str
    description: str
    amount: float
    category: ExpenseCategory
    date: date
    location: Optional[str] = None


# Bookings


@dataclass(frozen=True)
class Travelers:
    adults: int = 1
    children: int = 0
    infants: int = 0

    @property
    def total(self) -> int:
        return self.adults + self.children + self.infants

    @property
    def seated(self) -> int:
        """Travelers who pay a seat fare."""
        return self.adults + self.children


@dataclass(frozen=True)
class FlightAddons:
    travel_insurance: bool = False
    extra_baggage: bool = False
    seat_selection: bool = False


@dataclass(frozen=True)
class CarAddons:
    gps: bool = False
    child_seat: bool = False
    additional_insurance: bool = False


@dataclass
class Passenger:
    name: str
    type: PassengerType


@dataclass
class FlightBooking:
    booking_id: str
    user_id: str
    flight_id: str
    departure_date: date
    class_type: ClassType
    travelers: Travelers
    passengers: List[Passenger]
    addons: FlightAddons
    total_price: float
    status: FlightBookingStatus
    payment_status: PaymentStatus
    booking_reference: str
    created_at: datetime
    trip_id: Optional[str] = None
    kind: BookingKind = BookingKind.flight

    @property
    def is_cancelled(self) -> bool:
        return self.status == FlightBookingStatus.cancelled


@dataclass
class CarRentalBooking:
    booking_id: str
    user_id: str
    car_id: str
    pickup_location: str
    pickup_date: date
    pickup_time: str
    return_date: date
    return_time: str
    driver_age: int
    additional_drivers: int
    insurance: InsuranceTier
    addons: CarAddons
    days: int
    total_price: float
    status: CarRentalStatus
    payment_status: PaymentStatus
    booking_reference: str
    created_at: datetime
    trip_id: Optional[str] = None
    stop_id: Optional[str] = None
    kind: BookingKind = BookingKind.car_rental

    @property
    def is_cancelled(self) -> bool:
        return self.status == CarRentalStatus.cancelled


# Derived values


@dataclass
class DailySpend:
    date: date
    label: str
    amount: float
    over_budget: bool


@dataclass
class BudgetSummary:
    total_budget: float
    total_estimated: float
    breakdown: Dict[str, float]
    percentages: Dict[str, float]
    days: int
    cost_per_day: float
    remaining: float
    over_budget: bool
    daily_limit: float
    daily: List[DailySpend] = field(default_factory=list)
