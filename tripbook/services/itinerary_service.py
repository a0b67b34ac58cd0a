import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple
from uuid import uuid4

from tripbook.core.errors import (
    ActivityNotFound,
    InvalidDateRange,
    StopNotFound,
    ValidationError,
)
from tripbook.models.domain import Activity, Stop, Trip
from tripbook.services.access import get_owned_trip, require_user
from tripbook.services.rate_catalog import RateCatalog
from tripbook.storage.repository import InMemoryRepository

logger = logging.getLogger(__name__)

DEFAULT_STOP_NIGHTS = 2


class ItinerarySequencer:
    """
    Owns trips and their ordered stops.

    Stops are ordered strictly by insertion; there is no reorder primitive.
    Removing a stop closes the gap so orders always read 1..N.
    """

    def __init__(self, repository: InMemoryRepository, catalog: RateCatalog):
        self.repository = repository
        self.catalog = catalog

    # trips

    def create_trip(
        self,
        user_id: str,
        name: str,
        start_date: date,
        end_date: date,
        budget: float,
    ) -> Trip:
        user_id = require_user(user_id)
        if not name or not name.strip():
            raise ValidationError("Trip name is required")
        if start_date > end_date:
            raise InvalidDateRange("Trip start date must not be after its end date")
        if budget < 0:
            raise ValidationError("Budget must not be negative")
        trip = Trip(
            trip_id=str(uuid4()),
            user_id=user_id,
            name=name.strip(),
            start_date=start_date,
            end_date=end_date,
            budget=float(budget),
            created_at=datetime.utcnow(),
        )
        self.repository.save_trip(trip)
        logger.info("Created trip %s for %s", trip.trip_id, user_id)
        return trip

    def get_trip(self, user_id: str, trip_id: str) -> Trip:
        return get_owned_trip(self.repository, trip_id, user_id)

    def list_trips(self, user_id: str) -> List[Trip]:
        return self.repository.list_trips_for_user(require_user(user_id))

    def update_trip(
        self,
        user_id: str,
        trip_id: str,
        name: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        budget: Optional[float] = None,
    ) -> Trip:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        if name is not None and not name.strip():
            raise ValidationError("Trip name is required")
        if budget is not None and budget < 0:
            raise ValidationError("Budget must not be negative")
        with self.repository.transaction():
            start = start_date or trip.start_date
            end = end_date or trip.end_date
            if start > end:
                raise InvalidDateRange("Trip start date must not be after its end date")
            if name is not None:
                trip.name = name.strip()
            if budget is not None:
                trip.budget = float(budget)
            trip.start_date = start
            trip.end_date = end
            self.repository.save_trip(trip)
        logger.info("Updated trip %s", trip.trip_id)
        return trip

    def delete_trip(self, user_id: str, trip_id: str) -> None:
        """Drop the trip with its stops, activities and expenses.

        Bookings belong to the user and keep their seats; they are only
        detached from the trip.
        """
        trip = get_owned_trip(self.repository, trip_id, user_id)
        with self.repository.transaction():
            for stop in self.repository.list_stops_for_trip(trip.trip_id):
                for activity in self.repository.list_activities_for_stop(stop.stop_id):
                    self.repository.delete_activity(activity.activity_id)
                self.repository.delete_stop(stop.stop_id)
            for expense in self.repository.list_expenses_for_trip(trip.trip_id):
                self.repository.delete_expense(expense.expense_id)
            for booking in self.repository.list_bookings_for_trip(trip.trip_id):
                booking.trip_id = None
                if hasattr(booking, "stop_id"):
                    booking.stop_id = None
                self.repository.save_booking(booking)
            self.repository.delete_trip(trip.trip_id)
        logger.info("Deleted trip %s", trip.trip_id)

    def list_stops(self, user_id: str, trip_id: str) -> List[Stop]:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        return self.repository.list_stops_for_trip(trip.trip_id)

    def list_activities(self, stop_id: str) -> List[Activity]:
        return self.repository.list_activities_for_stop(stop_id)

    # stops

    def propose_stop_dates(self, trip: Trip) -> Tuple[date, date]:
        """Default range for a new stop: start where the last stop leaves
        (or at the trip start) and stay two nights."""
        stops = self.repository.list_stops_for_trip(trip.trip_id)
        arrival = stops[-1].departure_date if stops else trip.start_date
        return arrival, arrival + timedelta(days=DEFAULT_STOP_NIGHTS)

    def add_stop(
        self,
        user_id: str,
        trip_id: str,
        city: str,
        arrival_date: date,
        departure_date: date,
    ) -> Stop:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        if not city or not city.strip():
            raise ValidationError("City is required")
        if arrival_date >= departure_date:
            raise InvalidDateRange(
                f"Arrival {arrival_date} must be before departure {departure_date}"
            )
        with self.repository.transaction():
            count = len(self.repository.list_stops_for_trip(trip.trip_id))
            stop = Stop(
                stop_id=str(uuid4()),
                trip_id=trip.trip_id,
                city=city.strip(),
                arrival_date=arrival_date,
                departure_date=departure_date,
                order=count + 1,
            )
            self.repository.save_stop(stop)
        logger.info("Added stop %s (%s) to trip %s as #%d", stop.stop_id, stop.city, trip.trip_id, stop.order)
        return stop

    def update_stop_dates(
        self,
        user_id: str,
        trip_id: str,
        stop_id: str,
        arrival_date: Optional[date] = None,
        departure_date: Optional[date] = None,
    ) -> Stop:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        with self.repository.transaction():
            stop = self._get_stop(trip, stop_id)
            arrival = arrival_date or stop.arrival_date
            departure = departure_date or stop.departure_date
            if arrival >= departure:
                raise InvalidDateRange(
                    f"Arrival {arrival} must be before departure {departure}"
                )
            stop.arrival_date = arrival
            stop.departure_date = departure
            self.repository.save_stop(stop)
        return stop

    def remove_stop(self, user_id: str, trip_id: str, stop_id: str) -> None:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        with self.repository.transaction():
            stop = self._get_stop(trip, stop_id)
            for activity in self.repository.list_activities_for_stop(stop.stop_id):
                self.repository.delete_activity(activity.activity_id)
            self._detach_rentals(trip, stop.stop_id)
            self.repository.delete_stop(stop.stop_id)
            for index, remaining in enumerate(
                self.repository.list_stops_for_trip(trip.trip_id), start=1
            ):
                if remaining.order != index:
                    remaining.order = index
                    self.repository.save_stop(remaining)
        logger.info("Removed stop %s from trip %s", stop_id, trip.trip_id)

    def _detach_rentals(self, trip: Trip, stop_id: str) -> None:
        for booking in self.repository.list_bookings_for_trip(trip.trip_id):
            if getattr(booking, "stop_id", None) == stop_id:
                booking.stop_id = None
                self.repository.save_booking(booking)

    def _get_stop(self, trip: Trip, stop_id: str) -> Stop:
        stop = self.repository.get_stop(stop_id)
        if stop is None or stop.trip_id != trip.trip_id:
            raise StopNotFound(f"Stop {stop_id} not found")
        return stop

    # activities

    def add_activity(
        self, user_id: str, trip_id: str, stop_id: str, catalog_activity_id: str
    ) -> Activity:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        template = self.catalog.get_activity(catalog_activity_id)
        if template is None:
            raise ActivityNotFound(f"Activity {catalog_activity_id} not in catalog")
        with self.repository.transaction():
            stop = self._get_stop(trip, stop_id)
            activity = Activity(
                activity_id=str(uuid4()),
                stop_id=stop.stop_id,
                catalog_id=template.id,
                name=template.name,
                category=template.category,
                cost=template.cost,
                duration_hours=template.duration_hours,
            )
            self.repository.save_activity(activity)
        return activity

    def remove_activity(self, user_id: str, trip_id: str, activity_id: str) -> None:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        with self.repository.transaction():
            activity = self.repository.get_activity(activity_id)
            stop = self.repository.get_stop(activity.stop_id) if activity else None
            if stop is None or stop.trip_id != trip.trip_id:
                raise ActivityNotFound(f"Activity {activity_id} not found in this trip")
            self.repository.delete_activity(activity_id)
