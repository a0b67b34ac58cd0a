from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from tripbook.api import (
    get_budget_aggregator,
    get_current_user,
    get_expense_service,
    get_itinerary,
)
from tripbook.models.schemas import (
    ActivityAdd,
    ActivitySchema,
    BudgetSummarySchema,
    ExpenseCreate,
    ExpenseSchema,
    StopCreate,
    StopSchema,
    StopUpdate,
    TripCreate,
    TripDetailResponse,
    TripSchema,
    TripUpdate,
)
from tripbook.services.budget_service import BudgetAggregator
from tripbook.services.expense_service import ExpenseService
from tripbook.services.itinerary_service import DEFAULT_STOP_NIGHTS, ItinerarySequencer

router = APIRouter()


@router.post("/", response_model=TripSchema, status_code=201)
def create_trip(
    payload: TripCreate,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> TripSchema:
    trip = itinerary.create_trip(
        user_id=user_id,
        name=payload.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
        budget=payload.budget,
    )
    return TripSchema.from_domain(trip)


@router.get("/", response_model=List[TripSchema])
def list_trips(
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> List[TripSchema]:
    return [TripSchema.from_domain(t) for t in itinerary.list_trips(user_id)]


@router.get("/{trip_id}", response_model=TripDetailResponse)
def get_trip(
    trip_id: str,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> TripDetailResponse:
    trip = itinerary.get_trip(user_id, trip_id)
    stops = [
        StopSchema.from_domain(stop, itinerary.list_activities(stop.stop_id))
        for stop in itinerary.list_stops(user_id, trip_id)
    ]
    return TripDetailResponse(trip=TripSchema.from_domain(trip), stops=stops)


@router.patch("/{trip_id}", response_model=TripSchema)
def update_trip(
    trip_id: str,
    payload: TripUpdate,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> TripSchema:
    trip = itinerary.update_trip(
        user_id,
        trip_id,
        name=payload.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
        budget=payload.budget,
    )
    return TripSchema.from_domain(trip)


@router.delete("/{trip_id}", status_code=204)
def delete_trip(
    trip_id: str,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> Response:
    itinerary.delete_trip(user_id, trip_id)
    return Response(status_code=204)


@router.post("/{trip_id}/stops", response_model=StopSchema, status_code=201)
def add_stop(
    trip_id: str,
    payload: StopCreate,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> StopSchema:
    arrival, departure = payload.arrival_date, payload.departure_date
    if arrival is None:
        arrival, _ = itinerary.propose_stop_dates(itinerary.get_trip(user_id, trip_id))
    if departure is None:
        departure = arrival + timedelta(days=DEFAULT_STOP_NIGHTS)
    stop = itinerary.add_stop(user_id, trip_id, payload.city, arrival, departure)
    return StopSchema.from_domain(stop)


@router.patch("/{trip_id}/stops/{stop_id}", response_model=StopSchema)
def update_stop(
    trip_id: str,
    stop_id: str,
    payload: StopUpdate,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> StopSchema:
    stop = itinerary.update_stop_dates(
        user_id,
        trip_id,
        stop_id,
        arrival_date=payload.arrival_date,
        departure_date=payload.departure_date,
    )
    return StopSchema.from_domain(stop, itinerary.list_activities(stop.stop_id))


@router.delete("/{trip_id}/stops/{stop_id}", status_code=204)
def remove_stop(
    trip_id: str,
    stop_id: str,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> Response:
    itinerary.remove_stop(user_id, trip_id, stop_id)
    return Response(status_code=204)


@router.post("/{trip_id}/activities", response_model=ActivitySchema, status_code=201)
def add_activity(
    trip_id: str,
    payload: ActivityAdd,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> ActivitySchema:
    activity = itinerary.add_activity(user_id, trip_id, payload.stop_id, payload.activity_id)
    return ActivitySchema.from_domain(activity)


@router.delete("/{trip_id}/activities/{activity_id}", status_code=204)
def remove_activity(
    trip_id: str,
    activity_id: str,
    user_id: str = Depends(get_current_user),
    itinerary: ItinerarySequencer = Depends(get_itinerary),
) -> Response:
    itinerary.remove_activity(user_id, trip_id, activity_id)
    return Response(status_code=204)


@router.post("/{trip_id}/expenses", response_model=ExpenseSchema, status_code=201)
def add_expense(
    trip_id: str,
    payload: ExpenseCreate,
    user_id: str = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
) -> ExpenseSchema:
    expense = service.add_expense(
        user_id,
        trip_id,
        description=payload.description,
        amount=payload.amount,
        category=payload.category,
        spent_on=payload.date,
        location=payload.location,
    )
    return ExpenseSchema.from_domain(expense)


@router.get("/{trip_id}/expenses", response_model=List[ExpenseSchema])
def list_expenses(
    trip_id: str,
    user_id: str = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
) -> List[ExpenseSchema]:
    return [ExpenseSchema.from_domain(e) for e in service.list_expenses(user_id, trip_id)]


@router.delete("/{trip_id}/expenses/{expense_id}", status_code=204)
def remove_expense(
    trip_id: str,
    expense_id: str,
    user_id: str = Depends(get_current_user),
    service: ExpenseService = Depends(get_expense_service),
) -> Response:
    service.remove_expense(user_id, trip_id, expense_id)
    return Response(status_code=204)


@router.get("/{trip_id}/budget", response_model=BudgetSummarySchema)
def get_budget(
    trip_id: str,
    daily_limit: Optional[float] = Query(None, ge=0),
    user_id: str = Depends(get_current_user),
    aggregator: BudgetAggregator = Depends(get_budget_aggregator),
) -> BudgetSummarySchema:
    summary = aggregator.compute_budget(user_id, trip_id, daily_limit=daily_limit)
    return BudgetSummarySchema.from_domain(summary)
