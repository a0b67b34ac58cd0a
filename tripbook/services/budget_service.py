from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterator, List, Optional, Tuple

from tripbook.models.domain import (
    BudgetSummary,
    DailySpend,
    ExpenseCategory,
    Trip,
)
from tripbook.services.access import get_owned_trip
from tripbook.storage.repository import InMemoryRepository

logger = logging.getLogger(__name__)

TRANSPORT = "transport"
ACCOMMODATION = "accommodation"
ACTIVITIES = "activities"
MEALS = "meals"
OTHER = "other"
CATEGORIES = (TRANSPORT, ACCOMMODATION, ACTIVITIES, MEALS, OTHER)

EXPENSE_CATEGORY_MAP: Dict[ExpenseCategory, str] = {
    ExpenseCategory.TRANSPORT: TRANSPORT,
    ExpenseCategory.ACCOMMODATION: ACCOMMODATION,
    ExpenseCategory.ACTIVITY: ACTIVITIES,
    ExpenseCategory.MEAL: MEALS,
    ExpenseCategory.OTHER: OTHER,
}

# (category, amount, date the cost lands on)
CostItem = Tuple[str, float, date]


def trip_days(trip: Trip) -> int:
    """Inclusive day count, never below one."""
    return max((trip.end_date - trip.start_date).days + 1, 1)


class BudgetAggregator:
    """
    Rebuilds a trip's financial summary from its current records.

    The summary is never stored; two calls with no mutation in between give
    equal results.
    """

    def __init__(self, repository: InMemoryRepository):
        self.repository = repository

    def _cost_items(self, trip: Trip) -> Iterator[CostItem]:
        for booking in self.repository.list_bookings_for_trip(trip.trip_id):
            if booking.is_cancelled:
                continue
            when = getattr(booking, "departure_date", None) or booking.pickup_date
            yield TRANSPORT, booking.total_price, when

        for stop in self.repository.list_stops_for_trip(trip.trip_id):
            for activity in self.repository.list_activities_for_stop(stop.stop_id):
                yield ACTIVITIES, activity.cost, stop.arrival_date

        for expense in self.repository.list_expenses_for_trip(trip.trip_id):
            yield EXPENSE_CATEGORY_MAP[expense.category], expense.amount, expense.date

    def summarize(self, trip: Trip, daily_limit: Optional[float] = None) -> BudgetSummary:
        days = trip_days(trip)
        with self.repository.transaction():
            items = list(self._cost_items(trip))

        breakdown: Dict[str, float] = {category: 0.0 for category in CATEGORIES}
        per_day: Dict[date, float] = defaultdict(float)
        for category, amount, when in items:
            breakdown[category] += amount
            # costs dated outside the trip land on its first or last day
            clamped = min(max(when, trip.start_date), trip.start_date + timedelta(days=days - 1))
            per_day[clamped] += amount

        total = sum(breakdown.values())
        percentages = {
            category: (value / total * 100.0 if total else 0.0)
            for category, value in breakdown.items()
        }
        limit = daily_limit if daily_limit is not None else trip.budget / days

        daily: List[DailySpend] = []
        for offset in range(days):
            day = trip.start_date + timedelta(days=offset)
            amount = per_day.get(day, 0.0)
            daily.append(
                DailySpend(
                    date=day,
                    label=f"D{offset + 1}",
                    amount=amount,
                    over_budget=amount > limit,
                )
            )

        summary = BudgetSummary(
            total_budget=trip.budget,
            total_estimated=total,
            breakdown=breakdown,
            percentages=percentages,
            days=days,
            cost_per_day=total / days,
            remaining=trip.budget - total,
            over_budget=total > trip.budget,
            daily_limit=limit,
            daily=daily,
        )
        if summary.over_budget:
            logger.info(
                "Trip %s is over budget: %.2f estimated vs %.2f",
                trip.trip_id,
                total,
                trip.budget,
            )
        return summary

    def compute_budget(
        self, user_id: str, trip_id: str, daily_limit: Optional[float] = None
    ) -> BudgetSummary:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        return self.summarize(trip, daily_limit=daily_limit)
