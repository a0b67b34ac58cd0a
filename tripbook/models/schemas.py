from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from tripbook.models.domain import (
    Activity,
    ActivityCategory,
    BudgetSummary,
    Car,
    CarAddons,
    CarRentalBooking,
    CarRentalStatus,
    ClassType,
    Expense,
    ExpenseCategory,
    Flight,
    FlightAddons,
    FlightBooking,
    FlightBookingStatus,
    InsuranceTier,
    PassengerType,
    PaymentStatus,
    Stop,
    Travelers,
    Trip,
)

# requests


class TripCreate(BaseModel):
    name: str
    start_date: date
    end_date: date
    budget: float = 0.0


class TripUpdate(BaseModel):
    name: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[float] = None


class StopCreate(BaseModel):
    city: str
    arrival_date: Optional[date] = None
    departure_date: Optional[date] = None


class StopUpdate(BaseModel):
    arrival_date: Optional[date] = None
    departure_date: Optional[date] = None


class ActivityAdd(BaseModel):
    stop_id: str
    activity_id: str


class ExpenseCreate(BaseModel):
    description: str
    amount: float
    category: ExpenseCategory
    date: date
    location: Optional[str] = None


class TravelersSchema(BaseModel):
    adults: int = 1
    children: int = 0
    infants: int = 0

    def to_domain(self) -> Travelers:
        return Travelers(adults=self.adults, children=self.children, infants=self.infants)


class FlightAddonsSchema(BaseModel):
    travel_insurance: bool = False
    extra_baggage: bool = False
    seat_selection: bool = False

    def to_domain(self) -> FlightAddons:
        return FlightAddons(**self.model_dump())


class CarAddonsSchema(BaseModel):
    gps: bool = False
    child_seat: bool = False
    additional_insurance: bool = False

    def to_domain(self) -> CarAddons:
        return CarAddons(**self.model_dump())


class FlightBookingCreate(BaseModel):
    flight_id: str
    class_type: ClassType = ClassType.economy
    travelers: TravelersSchema = Field(default_factory=TravelersSchema)
    passenger_names: List[str]
    addons: FlightAddonsSchema = Field(default_factory=FlightAddonsSchema)
    trip_id: Optional[str] = None


class CarRentalCreate(BaseModel):
    car_id: str
    pickup_location: str
    pickup_date: date
    return_date: date
    pickup_time: str = "10:00"
    return_time: str = "10:00"
    driver_age: int = 25
    additional_drivers: int = 0
    insurance: InsuranceTier = InsuranceTier.basic
    addons: CarAddonsSchema = Field(default_factory=CarAddonsSchema)
    trip_id: Optional[str] = None
    stop_id: Optional[str] = None


# responses


class TripSchema(BaseModel):
    trip_id: str
    user_id: str
    name: str
    start_date: date
    end_date: date
    budget: float
    created_at: datetime

    @classmethod
    def from_domain(cls, obj: Trip) -> "TripSchema":
        return cls(
            trip_id=obj.trip_id,
            user_id=obj.user_id,
            name=obj.name,
            start_date=obj.start_date,
            end_date=obj.end_date,
            budget=obj.budget,
            created_at=obj.created_at,
        )


class ActivitySchema(BaseModel):
    activity_id: str
    stop_id: str
    catalog_id: str
    name: str
    category: ActivityCategory
    cost: float
    duration_hours: float

    @classmethod
    def from_domain(cls, obj: Activity) -> "ActivitySchema":
        return cls(
            activity_id=obj.activity_id,
            stop_id=obj.stop_id,
            catalog_id=obj.catalog_id,
            name=obj.name,
            category=obj.category,
            cost=obj.cost,
            duration_hours=obj.duration_hours,
        )


class StopSchema(BaseModel):
    stop_id: str
    trip_id: str
    city: str
    arrival_date: date
    departure_date: date
    order: int
    activities: List[ActivitySchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, obj: Stop, activities: Optional[List[Activity]] = None) -> "StopSchema":
        return cls(
            stop_id=obj.stop_id,
            trip_id=obj.trip_id,
            city=obj.city,
            arrival_date=obj.arrival_date,
            departure_date=obj.departure_date,
            order=obj.order,
            activities=[ActivitySchema.from_domain(a) for a in activities or []],
        )


class TripDetailResponse(BaseModel):
    trip: TripSchema
    stops: List[StopSchema]


class ExpenseSchema(BaseModel):
    expense_id: str
    trip_id: str
    description: str
    amount: float
    category: ExpenseCategory
    date: date
    location: Optional[str] = None

    @classmethod
    def from_domain(cls, obj: Expense) -> "ExpenseSchema":
        return cls(
            expense_id=obj.expense_id,
            trip_id=obj.trip_id,
            description=obj.description,
            amount=obj.amount,
            category=obj.category,
            date=obj.date,
            location=obj.location,
        )


class DailySpendSchema(BaseModel):
    date: date
    label: str
    amount: float
    over_budget: bool


class BudgetSummarySchema(BaseModel):
    total_budget: float
    total_estimated: float
    breakdown: Dict[str, float]
    percentages: Dict[str, float]
    days: int
    cost_per_day: float
    remaining: float
    over_budget: bool
    daily_limit: float
    daily: List[DailySpendSchema]

    @classmethod
    def from_domain(cls, obj: BudgetSummary) -> "BudgetSummarySchema":
        return cls(
            total_budget=obj.total_budget,
            total_estimated=obj.total_estimated,
            breakdown=obj.breakdown,
            percentages=obj.percentages,
            days=obj.days,
            cost_per_day=obj.cost_per_day,
            remaining=obj.remaining,
            over_budget=obj.over_budget,
            daily_limit=obj.daily_limit,
            daily=[
                DailySpendSchema(
                    date=d.date, label=d.label, amount=d.amount, over_budget=d.over_budget
                )
                for d in obj.daily
            ],
        )


class FlightSchema(BaseModel):
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

    @classmethod
    def from_domain(cls, obj: Flight, seats: Optional[Dict[ClassType, int]] = None) -> "FlightSchema":
        return cls(
            id=obj.id,
            airline=obj.airline,
            flight_number=obj.flight_number,
            origin_airport=obj.origin_airport,
            origin_city=obj.origin_city,
            destination_airport=obj.destination_airport,
            destination_city=obj.destination_city,
            departure_date=obj.departure_date,
            departure_time=obj.departure_time,
            arrival_date=obj.arrival_date,
            arrival_time=obj.arrival_time,
            stops=obj.stops,
            price=dict(obj.price),
            available_seats=seats if seats is not None else dict(obj.available_seats),
        )


class CarSchema(BaseModel):
    id: str
    make: str
    model: str
    type: str
    seats: int
    transmission: str
    fuel: str
    daily_rate: float
    features: List[str]
    available: bool

    @classmethod
    def from_domain(cls, obj: Car) -> "CarSchema":
        return cls(
            id=obj.id,
            make=obj.make,
            model=obj.model,
            type=obj.type,
            seats=obj.seats,
            transmission=obj.transmission,
            fuel=obj.fuel,
            daily_rate=obj.daily_rate,
            features=list(obj.features),
            available=obj.available,
        )


class PassengerSchema(BaseModel):
    name: str
    type: PassengerType


class FlightBookingSchema(BaseModel):
    kind: str = "flight"
    booking_id: str
    user_id: str
    trip_id: Optional[str] = None
    flight_id: str
    departure_date: date
    class_type: ClassType
    travelers: TravelersSchema
    passengers: List[PassengerSchema]
    addons: FlightAddonsSchema
    total_price: float
    status: FlightBookingStatus
    payment_status: PaymentStatus
    booking_reference: str
    created_at: datetime

    @classmethod
    def from_domain(cls, obj: FlightBooking) -> "FlightBookingSchema":
        return cls(
            booking_id=obj.booking_id,
            user_id=obj.user_id,
            trip_id=obj.trip_id,
            flight_id=obj.flight_id,
            departure_date=obj.departure_date,
            class_type=obj.class_type,
            travelers=TravelersSchema(
                adults=obj.travelers.adults,
                children=obj.travelers.children,
                infants=obj.travelers.infants,
            ),
            passengers=[PassengerSchema(name=p.name, type=p.type) for p in obj.passengers],
            addons=FlightAddonsSchema(
                travel_insurance=obj.addons.travel_insurance,
                extra_baggage=obj.addons.extra_baggage,
                seat_selection=obj.addons.seat_selection,
            ),
            total_price=obj.total_price,
            status=obj.status,
            payment_status=obj.payment_status,
            booking_reference=obj.booking_reference,
            created_at=obj.created_at,
        )


class CarRentalBookingSchema(BaseModel):
    kind: str = "car_rental"
    booking_id: str
    user_id: str
    trip_id: Optional[str] = None
    stop_id: Optional[str] = None
    car_id: str
    pickup_location: str
    pickup_date: date
    pickup_time: str
    return_date: date
    return_time: str
    driver_age: int
    additional_drivers: int
    insurance: InsuranceTier
    addons: CarAddonsSchema
    days: int
    total_price: float
    status: CarRentalStatus
    payment_status: PaymentStatus
    booking_reference: str
    created_at: datetime

    @classmethod
    def from_domain(cls, obj: CarRentalBooking) -> "CarRentalBookingSchema":
        return cls(
            booking_id=obj.booking_id,
            user_id=obj.user_id,
            trip_id=obj.trip_id,
            stop_id=obj.stop_id,
            car_id=obj.car_id,
            pickup_location=obj.pickup_location,
            pickup_date=obj.pickup_date,
            pickup_time=obj.pickup_time,
            return_date=obj.return_date,
            return_time=obj.return_time,
            driver_age=obj.driver_age,
            additional_drivers=obj.additional_drivers,
            insurance=obj.insurance,
            addons=CarAddonsSchema(
                gps=obj.addons.gps,
                child_seat=obj.addons.child_seat,
                additional_insurance=obj.addons.additional_insurance,
            ),
            days=obj.days,
            total_price=obj.total_price,
            status=obj.status,
            payment_status=obj.payment_status,
            booking_reference=obj.booking_reference,
            created_at=obj.created_at,
        )


def booking_to_schema(obj):
    if isinstance(obj, FlightBooking):
        return FlightBookingSchema.from_domain(obj)
    return CarRentalBookingSchema.from_domain(obj)


class BookingListResponse(BaseModel):
    flights: List[FlightBookingSchema]
    car_rentals: List[CarRentalBookingSchema]
