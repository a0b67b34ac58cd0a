from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Union

from tripbook.models.domain import (
    Activity,
    CarRentalBooking,
    Expense,
    FlightBooking,
    Stop,
    Trip,
)

Booking = Union[FlightBooking, CarRentalBooking]


class InMemoryRepository:
    """Record store stand-in. Multi-record reads and writes go through
    ``transaction()`` so they are never observed half-applied."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.trips: Dict[str, Trip] = {}
        self.stops: Dict[str, Stop] = {}
        self.activities: Dict[str, Activity] = {}
        self.expenses: Dict[str, Expense] = {}
        self.bookings: Dict[str, Booking] = {}

    @contextmanager
    def transaction(self) -> Iterator[InMemoryRepository]:
        with self._lock:
            yield self

    # trips

    def save_trip(self, trip: Trip) -> Trip:
        with self._lock:
            self.trips[trip.trip_id] = trip
        return trip

    def get_trip(self, trip_id: str) -> Optional[Trip]:
        return self.trips.get(trip_id)

    def list_trips_for_user(self, user_id: str) -> List[Trip]:
        with self._lock:
            trips = [t for t in self.trips.values() if t.user_id == user_id]
        return sorted(trips, key=lambda t: t.created_at)

    def delete_trip(self, trip_id: str) -> None:
        with self._lock:
            self.trips.pop(trip_id, None)

    # stops

    def save_stop(self, stop: Stop) -> Stop:
        with self._lock:
            self.stops[stop.stop_id] = stop
        return stop

    def get_stop(self, stop_id: str) -> Optional[Stop]:
        return self.stops.get(stop_id)

    def list_stops_for_trip(self, trip_id: str) -> List[Stop]:
        with self._lock:
            stops = [s for s in self.stops.values() if s.trip_id == trip_id]
        return sorted(stops, key=lambda s: s.order)

    def delete_stop(self, stop_id: str) -> None:
        with self._lock:
            self.stops.pop(stop_id, None)

    # activities

    def save_activity(self, activity: Activity) -> Activity:
        with self._lock:
            self.activities[activity.activity_id] = activity
        return activity

    def get_activity(self, activity_id: str) -> Optional[Activity]:
        return self.activities.get(activity_id)

    def list_activities_for_stop(self, stop_id: str) -> List[Activity]:
        with self._lock:
            return [a for a in self.activities.values() if a.stop_id == stop_id]

    def delete_activity(self, activity_id: str) -> None:
        with self._lock:
            self.activities.pop(activity_id, None)

    # expenses

    def save_expense(self, expense: Expense) -> Expense:
        with self._lock:
            self.expenses[expense.expense_id] = expense
        return expense

    def get_expense(self, expense_id: str) -> Optional[Expense]:
        return self.expenses.get(expense_id)

    def list_expenses_for_trip(self, trip_id: str) -> List[Expense]:
        with self._lock:
            return [e for e in self.expenses.values() if e.trip_id == trip_id]

    def delete_expense(self, expense_id: str) -> None:
        with self._lock:
            self.expenses.pop(expense_id, None)

    # bookings

    def save_booking(self, booking: Booking) -> Booking:
        with self._lock:
            self.bookings[booking.booking_id] = booking
        return booking

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        return self.bookings.get(booking_id)

    def list_bookings_for_trip(self, trip_id: str) -> List[Booking]:
        with self._lock:
            return [b for b in self.bookings.values() if b.trip_id == trip_id]

    def list_bookings_for_user(self, user_id: str) -> List[Booking]:
        with self._lock:
            bookings = [b for b in self.bookings.values() if b.user_id == user_id]
        return sorted(bookings, key=lambda b: b.created_at)

    def has_booking_reference(self, reference: str) -> bool:
        with self._lock:
            return any(
                b.booking_reference == reference for b in self.bookings.values()
            )
