from datetime import date, timedelta

import pytest

from tripbook.core.errors import (
    ActivityNotFound,
    InvalidDateRange,
    StopNotFound,
    TripNotFound,
    Unauthorized,
    ValidationError,
)
from tripbook.models.domain import ExpenseCategory
from tripbook.services.expense_service import ExpenseService
from tripbook.services.itinerary_service import ItinerarySequencer
from tripbook.services.rate_catalog import StaticRateCatalog
from tripbook.storage.repository import InMemoryRepository

USER = "u1"


def _sequencer():
    return ItinerarySequencer(repository=InMemoryRepository(), catalog=StaticRateCatalog())


def _trip(sequencer, start=date(2024, 3, 1), end=date(2024, 3, 10), budget=2000.0):
    return sequencer.create_trip(USER, "India loop", start, end, budget)


def _orders(sequencer, trip):
    return [s.order for s in sequencer.list_stops(USER, trip.trip_id)]


def test_create_trip_validates_dates_and_budget():
    sequencer = _sequencer()
    with pytest.raises(InvalidDateRange):
        sequencer.create_trip(USER, "Backwards", date(2024, 3, 5), date(2024, 3, 1), 100)
    with pytest.raises(ValidationError):
        sequencer.create_trip(USER, "Negative", date(2024, 3, 1), date(2024, 3, 5), -1)
    with pytest.raises(Unauthorized):
        sequencer.create_trip("", "Anonymous", date(2024, 3, 1), date(2024, 3, 5), 100)
    same_day = sequencer.create_trip(USER, "Day trip", date(2024, 3, 1), date(2024, 3, 1), 0)
    assert same_day.start_date == same_day.end_date


def test_add_stop_appends_in_insertion_order():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    first = sequencer.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 1), date(2024, 3, 3))
    second = sequencer.add_stop(USER, trip.trip_id, "Madurai", date(2024, 3, 3), date(2024, 3, 5))
    assert (first.order, second.order) == (1, 2)


def test_add_stop_rejects_inverted_range_without_mutation():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    sequencer.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 1), date(2024, 3, 3))

    with pytest.raises(InvalidDateRange):
        sequencer.add_stop(USER, trip.trip_id, "Kochi", date(2024, 3, 5), date(2024, 3, 3))
    with pytest.raises(InvalidDateRange):
        sequencer.add_stop(USER, trip.trip_id, "Kochi", date(2024, 3, 5), date(2024, 3, 5))

    assert len(sequencer.list_stops(USER, trip.trip_id)) == 1


def test_remove_middle_stop_renumbers_the_rest():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    stops = [
        sequencer.add_stop(USER, trip.trip_id, city, date(2024, 3, 1) + timedelta(days=2 * i), date(2024, 3, 3) + timedelta(days=2 * i))
        for i, city in enumerate(["Chennai", "Madurai", "Kochi"])
    ]
    sequencer.remove_stop(USER, trip.trip_id, stops[1].stop_id)

    remaining = sequencer.list_stops(USER, trip.trip_id)
    assert [s.city for s in remaining] == ["Chennai", "Kochi"]
    assert [s.order for s in remaining] == [1, 2]


def test_orders_stay_contiguous_after_mixed_edits():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    ids = []
    for step in range(6):
        arrival = date(2024, 3, 1) + timedelta(days=step)
        ids.append(sequencer.add_stop(USER, trip.trip_id, f"City {step}", arrival, arrival + timedelta(days=1)).stop_id)
        if step % 2:
            sequencer.remove_stop(USER, trip.trip_id, ids.pop(0))
        assert _orders(sequencer, trip) == list(range(1, len(ids) + 1))


def test_remove_unknown_stop_fails():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    with pytest.raises(StopNotFound):
        sequencer.remove_stop(USER, trip.trip_id, "missing")


def test_remove_stop_drops_its_activities():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    stop = sequencer.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 1), date(2024, 3, 3))
    activity = sequencer.add_activity(USER, trip.trip_id, stop.stop_id, "act-fort")
    sequencer.remove_stop(USER, trip.trip_id, stop.stop_id)
    assert sequencer.repository.get_activity(activity.activity_id) is None


def test_proposed_dates_follow_previous_stop():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    assert sequencer.propose_stop_dates(trip) == (date(2024, 3, 1), date(2024, 3, 3))
    sequencer.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 2), date(2024, 3, 4))
    assert sequencer.propose_stop_dates(trip) == (date(2024, 3, 4), date(2024, 3, 6))


def test_shift_stop_dates_keeps_order_and_invariant():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    stop = sequencer.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 1), date(2024, 3, 3))

    shifted = sequencer.update_stop_dates(USER, trip.trip_id, stop.stop_id, departure_date=date(2024, 3, 4))
    assert shifted.departure_date == date(2024, 3, 4)
    assert shifted.order == 1

    with pytest.raises(InvalidDateRange):
        sequencer.update_stop_dates(USER, trip.trip_id, stop.stop_id, arrival_date=date(2024, 3, 4))
    assert sequencer.repository.get_stop(stop.stop_id).arrival_date == date(2024, 3, 1)


def test_activity_copies_catalog_values():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    stop = sequencer.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 1), date(2024, 3, 3))
    activity = sequencer.add_activity(USER, trip.trip_id, stop.stop_id, "act-kayak")
    template = sequencer.catalog.get_activity("act-kayak")
    assert (activity.name, activity.cost, activity.category) == (template.name, template.cost, template.category)

    sequencer.remove_activity(USER, trip.trip_id, activity.activity_id)
    with pytest.raises(ActivityNotFound):
        sequencer.remove_activity(USER, trip.trip_id, activity.activity_id)


def test_other_users_cannot_edit_trip():
    sequencer = _sequencer()
    trip = _trip(sequencer)
    with pytest.raises(Unauthorized):
        sequencer.add_stop("intruder", trip.trip_id, "Chennai", date(2024, 3, 1), date(2024, 3, 3))


def test_update_trip_merges_fields_and_rechecks_invariants():
    sequencer = _sequencer()
    trip = _trip(sequencer)

    updated = sequencer.update_trip(USER, trip.trip_id, end_date=date(2024, 3, 15), budget=2500)
    assert (updated.start_date, updated.end_date, updated.budget) == (date(2024, 3, 1), date(2024, 3, 15), 2500)
    assert updated.name == "India loop"

    with pytest.raises(InvalidDateRange):
        sequencer.update_trip(USER, trip.trip_id, start_date=date(2024, 3, 20))
    with pytest.raises(ValidationError):
        sequencer.update_trip(USER, trip.trip_id, budget=-5)
    with pytest.raises(ValidationError):
        sequencer.update_trip(USER, trip.trip_id, name="  ")
    with pytest.raises(Unauthorized):
        sequencer.update_trip("intruder", trip.trip_id, budget=1)

    stored = sequencer.get_trip(USER, trip.trip_id)
    assert (stored.start_date, stored.end_date, stored.budget) == (date(2024, 3, 1), date(2024, 3, 15), 2500)


def test_delete_trip_drops_stops_activities_and_expenses():
    sequencer = _sequencer()
    repository = sequencer.repository
    trip = _trip(sequencer)
    stop = sequencer.add_stop(USER, trip.trip_id, "Chennai", date(2024, 3, 1), date(2024, 3, 3))
    activity = sequencer.add_activity(USER, trip.trip_id, stop.stop_id, "act-fort")
    ExpenseService(repository).add_expense(
        USER, trip.trip_id, "Auto rickshaw", 4.5, ExpenseCategory.TRANSPORT, date(2024, 3, 1)
    )
    other = sequencer.create_trip(USER, "Keep me", date(2024, 4, 1), date(2024, 4, 2), 0)

    sequencer.delete_trip(USER, trip.trip_id)

    assert repository.get_trip(trip.trip_id) is None
    assert repository.get_stop(stop.stop_id) is None
    assert repository.get_activity(activity.activity_id) is None
    assert repository.list_expenses_for_trip(trip.trip_id) == []
    assert [t.trip_id for t in sequencer.list_trips(USER)] == [other.trip_id]
    with pytest.raises(TripNotFound):
        sequencer.delete_trip(USER, trip.trip_id)
