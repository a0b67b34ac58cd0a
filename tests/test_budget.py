from datetime import date

from tripbook.models.domain import (
    ActivityCategory,
    CatalogActivity,
    ClassType,
    ExpenseCategory,
    Flight,
    InsuranceTier,
    Travelers,
)
from tripbook.services.availability import AvailabilityLedger
from tripbook.services.booking_service import (
    BookingService,
    CarRentalRequest,
    FlightBookingRequest,
)
from tripbook.services.budget_service import BudgetAggregator
from tripbook.services.expense_service import ExpenseService
from tripbook.services.itinerary_service import ItinerarySequencer
from tripbook.services.rate_catalog import StaticRateCatalog
from tripbook.services.references import RandomReferenceGenerator
from tripbook.storage.repository import InMemoryRepository

USER = "u1"

FLIGHT = Flight(
    id="F1",
    airline="Test Air",
    flight_number="TA100",
    origin_airport="JFK",
    origin_city="New York",
    destination_airport="MAA",
    destination_city="Chennai",
    departure_date=date(2024, 3, 1),
    departure_time="10:00",
    arrival_date=date(2024, 3, 2),
    arrival_time="12:00",
    stops=0,
    price={ClassType.economy: 750.0, ClassType.business: 2000.0, ClassType.first: 3500.0},
    available_seats={ClassType.economy: 9, ClassType.business: 4, ClassType.first: 1},
)
MUSEUM = CatalogActivity("museum", "Government Museum", ActivityCategory.CULTURE, 100.0, 2.0)


class Engine:
    def __init__(self):
        self.repository = InMemoryRepository()
        catalog = StaticRateCatalog(flights=[FLIGHT], activities=[MUSEUM])
        self.itinerary = ItinerarySequencer(self.repository, catalog)
        self.bookings = BookingService(
            self.repository,
            catalog,
            AvailabilityLedger(),
            RandomReferenceGenerator(exists=self.repository.has_booking_reference),
        )
        self.expenses = ExpenseService(self.repository)
        self.budget = BudgetAggregator(self.repository)


def _book_two_adults(engine, trip):
    return engine.bookings.book_flight(
        USER,
        FlightBookingRequest(
            flight_id="F1",
            class_type=ClassType.economy,
            travelers=Travelers(adults=2),
            passenger_names=["Ann", "Ben"],
            trip_id=trip.trip_id,
        ),
    )


def test_empty_trip_has_zero_spend():
    engine = Engine()
    trip = engine.itinerary.create_trip(USER, "Quiet", date(2024, 3, 1), date(2024, 3, 4), 800)
    summary = engine.budget.compute_budget(USER, trip.trip_id)

    assert summary.total_estimated == 0
    assert summary.over_budget is False
    assert summary.remaining == 800
    assert summary.days == 4
    assert set(summary.percentages.values()) == {0.0}
    assert [d.label for d in summary.daily] == ["D1", "D2", "D3", "D4"]


def test_flight_and_activity_against_budget():
    engine = Engine()
    trip = engine.itinerary.create_trip(USER, "Chennai", date(2024, 3, 1), date(2024, 3, 5), 2000)
    _book_two_adults(engine, trip)
    stop = engine.itinerary.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 2), date(2024, 3, 4))
    engine.itinerary.add_activity(USER, trip.trip_id, stop.stop_id, "museum")

    summary = engine.budget.compute_budget(USER, trip.trip_id)
    assert summary.total_estimated == 1600
    assert summary.breakdown["transport"] == 1500
    assert summary.breakdown["activities"] == 100
    assert summary.days == 5
    assert summary.cost_per_day == 1600 / 5
    assert summary.over_budget is False
    assert summary.remaining == 400
    assert summary.percentages["transport"] == 1500 / 1600 * 100


def test_cancelled_bookings_are_excluded():
    engine = Engine()
    trip = engine.itinerary.create_trip(USER, "Chennai", date(2024, 3, 1), date(2024, 3, 5), 1000)
    booking = _book_two_adults(engine, trip)
    assert engine.budget.compute_budget(USER, trip.trip_id).over_budget is True

    engine.bookings.cancel_booking(USER, booking.booking_id)
    summary = engine.budget.compute_budget(USER, trip.trip_id)
    assert summary.total_estimated == 0
    assert summary.over_budget is False


def test_every_source_lands_in_exactly_one_category():
    engine = Engine()
    trip = engine.itinerary.create_trip(USER, "Loop", date(2024, 3, 1), date(2024, 3, 6), 3000)
    _book_two_adults(engine, trip)
    engine.bookings.book_car_rental(
        USER,
        CarRentalRequest(
            car_id="1",
            pickup_location="Chennai",
            pickup_date=date(2024, 3, 2),
            return_date=date(2024, 3, 4),
            driver_age=30,
            insurance=InsuranceTier.none,
            trip_id=trip.trip_id,
        ),
    )
    stop = engine.itinerary.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 1), date(2024, 3, 3))
    engine.itinerary.add_activity(USER, trip.trip_id, stop.stop_id, "museum")
    engine.expenses.add_expense(USER, trip.trip_id, "Hotel", 240.5, ExpenseCategory.ACCOMMODATION, date(2024, 3, 1))
    engine.expenses.add_expense(USER, trip.trip_id, "Dinner", 35.25, ExpenseCategory.MEAL, date(2024, 3, 3))
    engine.expenses.add_expense(USER, trip.trip_id, "Taxi", 12.1, ExpenseCategory.TRANSPORT, date(2024, 3, 3))
    engine.expenses.add_expense(USER, trip.trip_id, "SIM card", 9.9, ExpenseCategory.OTHER, date(2024, 3, 2))
    engine.expenses.add_expense(USER, trip.trip_id, "Boat ride", 20, ExpenseCategory.ACTIVITY, date(2024, 3, 5))

    summary = engine.budget.compute_budget(USER, trip.trip_id)
    assert set(summary.breakdown) == {"transport", "accommodation", "activities", "meals", "other"}
    assert sum(summary.breakdown.values()) == summary.total_estimated
    assert summary.breakdown["transport"] == 1500 + 90 + 12.1
    assert summary.breakdown["activities"] == 120
    assert summary.breakdown["meals"] == 35.25
    assert abs(sum(d.amount for d in summary.daily) - summary.total_estimated) < 1e-9


def test_daily_series_flags_days_over_the_limit():
    engine = Engine()
    trip = engine.itinerary.create_trip(USER, "Chennai", date(2024, 3, 1), date(2024, 3, 4), 2000)
    _book_two_adults(engine, trip)
    engine.expenses.add_expense(USER, trip.trip_id, "Hotel", 300, ExpenseCategory.ACCOMMODATION, date(2024, 3, 2))

    summary = engine.budget.compute_budget(USER, trip.trip_id)
    assert summary.daily_limit == 500
    assert [d.amount for d in summary.daily] == [1500, 300, 0, 0]
    assert [d.over_budget for d in summary.daily] == [True, False, False, False]

    strict = engine.budget.compute_budget(USER, trip.trip_id, daily_limit=200)
    assert [d.over_budget for d in strict.daily] == [True, True, False, False]


def test_costs_outside_trip_dates_are_clamped():
    engine = Engine()
    trip = engine.itinerary.create_trip(USER, "Late start", date(2024, 3, 3), date(2024, 3, 5), 5000)
    _book_two_adults(engine, trip)  # departs 2024-03-01
    engine.expenses.add_expense(USER, trip.trip_id, "Checkout", 50, ExpenseCategory.OTHER, date(2024, 3, 9))

    summary = engine.budget.compute_budget(USER, trip.trip_id)
    assert summary.daily[0].amount == 1500
    assert summary.daily[-1].amount == 50


def test_budget_is_idempotent():
    engine = Engine()
    trip = engine.itinerary.create_trip(USER, "Chennai", date(2024, 3, 1), date(2024, 3, 5), 2000)
    _book_two_adults(engine, trip)
    engine.expenses.add_expense(USER, trip.trip_id, "Lunch", 14.3, ExpenseCategory.MEAL, date(2024, 3, 2))

    assert engine.budget.compute_budget(USER, trip.trip_id) == engine.budget.compute_budget(USER, trip.trip_id)
