from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterator, Tuple

from tripbook.core.errors import CarUnavailable, InsufficientCapacity
from tripbook.models.domain import Car, ClassType, Flight

logger = logging.getLogger(__name__)

Window = Tuple[date, date]


class AvailabilityLedger:
    """
    Live inventory on top of the read-only catalog: remaining seats per
    flight/class and reserved rental windows per car.

    Callers hold ``hold_flight`` / ``hold_car`` around check, price, record
    creation and the matching ``take_*`` / ``reserve_*`` call so the whole
    booking is one atomic step per resource.
    """

    def __init__(self, prevent_car_double_booking: bool = True) -> None:
        self.prevent_car_double_booking = prevent_car_double_booking
        self._guard = threading.Lock()
        self._locks: Dict[tuple, threading.Lock] = {}
        self._seats: Dict[Tuple[str, ClassType], int] = {}
        self._car_windows: Dict[str, Dict[str, Window]] = {}

    def _lock_for(self, key: tuple) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    @contextmanager
    def hold_flight(self, flight_id: str, class_type: ClassType) -> Iterator[None]:
        with self._lock_for(("flight", flight_id, class_type)):
            yield

    @contextmanager
    def hold_car(self, car_id: str) -> Iterator[None]:
        with self._lock_for(("car", car_id)):
            yield

    # seats

    def seats_left(self, flight: Flight, class_type: ClassType) -> int:
        with self._guard:
            key = (flight.id, class_type)
            if key not in self._seats:
                self._seats[key] = flight.available_seats.get(class_type, 0)
            return self._seats[key]

    def take_seats(self, flight: Flight, class_type: ClassType, count: int) -> int:
        left = self.seats_left(flight, class_type)
        if left < count:
            raise InsufficientCapacity(
                f"{flight.flight_number} {class_type.value}: {left} seats left, {count} requested"
            )
        with self._guard:
            self._seats[(flight.id, class_type)] = left - count
        logger.debug("Took %d %s seats on %s, %d left", count, class_type.value, flight.id, left - count)
        return left - count

    def release_seats(self, flight: Flight, class_type: ClassType, count: int) -> int:
        with self._guard:
            key = (flight.id, class_type)
            current = self._seats.get(key, flight.available_seats.get(class_type, 0))
            self._seats[key] = current + count
            return self._seats[key]

    # cars

    def ensure_car_free(self, car: Car, pickup_date: date, return_date: date) -> None:
        if not car.available:
            raise CarUnavailable(f"{car.make} {car.model} is not available")
        if not self.prevent_car_double_booking:
            return
        with self._guard:
            windows = list(self._car_windows.get(car.id, {}).values())
        for start, end in windows:
            if pickup_date < end and start < return_date:
                raise CarUnavailable(
                    f"{car.make} {car.model} is already rented from {start} to {end}"
                )

    def reserve_car(self, car_id: str, booking_id: str, pickup_date: date, return_date: date) -> None:
        with self._guard:
            self._car_windows.setdefault(car_id, {})[booking_id] = (pickup_date, return_date)

    def release_car(self, car_id: str, booking_id: str) -> None:
        with self._guard:
            self._car_windows.get(car_id, {}).pop(booking_id, None)

    def reserved_windows(self, car_id: str) -> Dict[str, Window]:
        with self._guard:
            return dict(self._car_windows.get(car_id, {}))
