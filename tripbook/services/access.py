from tripbook.core.errors import TripNotFound, Unauthorized
from tripbook.models.domain import Trip
from tripbook.storage.repository import InMemoryRepository


def require_user(user_id: str | None) -> str:
    if not user_id or not user_id.strip():
        raise Unauthorized("An authenticated user is required")
    return user_id


def get_owned_trip(repository: InMemoryRepository, trip_id: str, user_id: str | None) -> Trip:
    user_id = require_user(user_id)
    trip = repository.get_trip(trip_id)
    if trip is None:
        raise TripNotFound(f"Trip {trip_id} not found")
    if trip.user_id != user_id:
        raise Unauthorized("Trip belongs to another user")
    return trip
