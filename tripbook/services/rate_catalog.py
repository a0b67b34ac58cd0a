from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol

from tripbook.models.domain import (
    ActivityCategory,
    Car,
    CatalogActivity,
    ClassType,
    Flight,
    Travelers,
)


class RateCatalog(Protocol):
    """Read-only source of fares, car rates and activity templates."""

    def get_flight(self, flight_id: str) -> Optional[Flight]:
        ...

    def list_flights(self) -> List[Flight]:
        ...

    def get_car(self, car_id: str) -> Optional[Car]:
        ...

    def list_cars(self) -> List[Car]:
        ...

    def get_activity(self, activity_id: str) -> Optional[CatalogActivity]:
        ...


def _flight(
    flight_id: str,
    airline: str,
    number: str,
    origin: tuple,
    destination: tuple,
    stops: int,
    price: tuple,
    seats: tuple,
) -> Flight:
    return Flight(
        id=flight_id,
        airline=airline,
        flight_number=number,
        origin_airport=origin[0],
        origin_city=origin[1],
        departure_date=date.fromisoformat(origin[2]),
        departure_time=origin[3],
        destination_airport=destination[0],
        destination_city=destination[1],
        arrival_date=date.fromisoformat(destination[2]),
        arrival_time=destination[3],
        stops=stops,
        price=dict(zip(ClassType, (float(p) for p in price))),
        available_seats=dict(zip(ClassType, seats)),
    )


SAMPLE_FLIGHTS: List[Flight] = [
    _flight("FL001", "Emirates", "EK202",
            ("JFK", "New York", "2024-01-14", "10:45"),
            ("MAA", "Chennai", "2024-01-15", "13:15"),
            0, (850, 2500, 4500), (45, 12, 4)),
    _flight("FL002", "Qatar Airways", "QR543",
            ("JFK", "New York", "2024-01-14", "15:20"),
            ("MAA", "Chennai", "2024-01-15", "17:35"),
            1, (790, 2200, 3800), (38, 8, 2)),
    _flight("FL003", "Lufthansa", "LH400",
            ("JFK", "New York", "2024-01-14", "18:00"),
            ("MAA", "Chennai", "2024-01-15", "21:45"),
            1, (820, 2400, 4200), (52, 15, 6)),
    _flight("FL005", "Air India", "AI144",
            ("EWR", "Newark", "2024-01-14", "21:00"),
            ("MAA", "Chennai", "2024-01-15", "23:30"),
            0, (750, 2000, 3500), (65, 18, 8)),
    _flight("FL007", "SpiceJet", "SG524",
            ("CJB", "Coimbatore", "2024-01-14", "06:10"),
            ("MAA", "Chennai", "2024-01-14", "07:15"),
            0, (2500, 4500, 6500), (85, 12, 4)),
]

SAMPLE_CARS: List[Car] = [
    Car("1", "Toyota", "Corolla", "economy", 5, "automatic", "gasoline", 45.0,
        ["Air Conditioning", "Bluetooth", "USB", "Cruise Control"]),
    Car("2", "Honda", "Civic", "compact", 5, "automatic", "gasoline", 55.0,
        ["Air Conditioning", "Bluetooth", "USB", "Parking Sensors"]),
    Car("3", "Tesla", "Model 3", "midsize", 5, "automatic", "electric", 95.0,
        ["Autopilot", "GPS", "Bluetooth", "Climate Control", "Premium Audio"]),
    Car("4", "Ford", "Explorer", "suv", 7, "automatic", "gasoline", 85.0,
        ["Air Conditioning", "Bluetooth", "USB", "Backup Camera", "3rd Row Seating"]),
    Car("5", "BMW", "5 Series", "luxury", 5, "automatic", "gasoline", 150.0,
        ["Leather Seats", "GPS", "Bluetooth", "Climate Control", "Sunroof"]),
    Car("6", "Nissan", "Leaf", "compact", 5, "automatic", "electric", 65.0,
        ["GPS", "Bluetooth", "USB", "Climate Control", "Eco Mode"], available=False),
    Car("8", "Jeep", "Wrangler", "suv", 4, "manual", "gasoline", 95.0,
        ["4WD", "Air Conditioning", "Bluetooth", "Removable Top"]),
]

SAMPLE_ACTIVITIES: List[CatalogActivity] = [
    CatalogActivity("act-fort", "Fort St. George tour", ActivityCategory.CULTURE, 25.0, 2.0),
    CatalogActivity("act-marina", "Marina Beach sunrise walk", ActivityCategory.NATURE, 0.0, 1.5),
    CatalogActivity("act-thali", "South Indian thali tasting", ActivityCategory.FOOD, 18.0, 1.0),
    CatalogActivity("act-kayak", "Muttukadu backwater kayaking", ActivityCategory.ADVENTURE, 40.0, 3.0),
    CatalogActivity("act-temple", "Kapaleeshwarar temple visit", ActivityCategory.SIGHTSEEING, 5.0, 1.5),
]


class StaticRateCatalog:
    def __init__(
        self,
        flights: Optional[Iterable[Flight]] = None,
        cars: Optional[Iterable[Car]] = None,
        activities: Optional[Iterable[CatalogActivity]] = None,
    ) -> None:
        self.flights: Dict[str, Flight] = {
            f.id: f for f in (SAMPLE_FLIGHTS if flights is None else flights)
        }
        self.cars: Dict[str, Car] = {
            c.id: c for c in (SAMPLE_CARS if cars is None else cars)
        }
        self.activities: Dict[str, CatalogActivity] = {
            a.id: a for a in (SAMPLE_ACTIVITIES if activities is None else activities)
        }

    def get_flight(self, flight_id: str) -> Optional[Flight]:
        return self.flights.get(flight_id)

    def list_flights(self) -> List[Flight]:
        return list(self.flights.values())

    def get_car(self, car_id: str) -> Optional[Car]:
        return self.cars.get(car_id)

    def list_cars(self) -> List[Car]:
        return list(self.cars.values())

    def get_activity(self, activity_id: str) -> Optional[CatalogActivity]:
        return self.activities.get(activity_id)


def _place_matches(query: str, airport: str, city: str) -> bool:
    q = query.lower()
    return any(
        q in value.lower() or value.lower() in q for value in (airport, city)
    )


def search_flights(
    catalog: RateCatalog,
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    class_type: ClassType = ClassType.economy,
    travelers: Travelers = Travelers(),
    direct_only: bool = False,
    seats_left=None,
) -> List[Flight]:
    """Filter the catalog by route, stops and party size, cheapest first.

    ``seats_left`` lets the caller substitute live inventory for the
    catalog's starting seat counts.
    """
    results = []
    for flight in catalog.list_flights():
        if origin and not _place_matches(origin, flight.origin_airport, flight.origin_city):
            continue
        if destination and not _place_matches(
            destination, flight.destination_airport, flight.destination_city
        ):
            continue
        if direct_only and flight.stops != 0:
            continue
        if class_type not in flight.price:
            continue
        seats = (
            seats_left(flight, class_type)
            if seats_left
            else flight.available_seats.get(class_type, 0)
        )
        if seats < travelers.total:
            continue
        results.append(flight)
    results.sort(key=lambda f: f.price[class_type])
    return results


def search_cars(
    catalog: RateCatalog,
    car_types: Optional[List[str]] = None,
    transmissions: Optional[List[str]] = None,
    fuels: Optional[List[str]] = None,
    min_price: float = 0.0,
    max_price: float = 500.0,
    features: Optional[List[str]] = None,
) -> List[Car]:
    results = []
    for car in catalog.list_cars():
        if car.daily_rate < min_price or car.daily_rate > max_price:
            continue
        if car_types and car.type not in car_types:
            continue
        if transmissions and car.transmission not in transmissions:
            continue
        if fuels and car.fuel not in fuels:
            continue
        if features and not all(
            any(wanted.lower() in have.lower() for have in car.features)
            for wanted in features
        ):
            continue
        results.append(car)
    # available cars first, then cheapest
    results.sort(key=lambda c: (not c.available, c.daily_rate))
    return results
