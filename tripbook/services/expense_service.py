import logging
from datetime import date
from typing import List, Optional
from uuid import uuid4

from tripbook.core.errors import ExpenseNotFound, ValidationError
from tripbook.models.domain import Expense, ExpenseCategory
from tripbook.services.access import get_owned_trip
from tripbook.storage.repository import InMemoryRepository

logger = logging.getLogger(__name__)


class ExpenseService:
    """Standalone line items (hotel nights, meals, taxis) logged against a trip."""

    def __init__(self, repository: InMemoryRepository):
        self.repository = repository

    def add_expense(
        self,
        user_id: str,
        trip_id: str,
        description: str,
        amount: float,
        category: ExpenseCategory,
        spent_on: date,
        location: Optional[str] = None,
    ) -> Expense:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        if not description or not description.strip():
            raise ValidationError("Expense description is required")
        if amount <= 0:
            raise ValidationError("Expense amount must be positive")
        expense = Expense(
            expense_id=str(uuid4()),
            trip_id=trip.trip_id,
            description=description.strip(),
            amount=float(amount),
            category=category,
            date=spent_on,
            location=location,
        )
        self.repository.save_expense(expense)
        logger.info("Logged %s expense of %.2f on trip %s", category.value, amount, trip.trip_id)
        return expense

    def list_expenses(self, user_id: str, trip_id: str) -> List[Expense]:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        expenses = self.repository.list_expenses_for_trip(trip.trip_id)
        return sorted(expenses, key=lambda e: e.date, reverse=True)

    def remove_expense(self, user_id: str, trip_id: str, expense_id: str) -> None:
        trip = get_owned_trip(self.repository, trip_id, user_id)
        expense = self.repository.get_expense(expense_id)
        if expense is None or expense.trip_id != trip.trip_id:
            raise ExpenseNotFound(f"Expense {expense_id} not found")
        self.repository.delete_expense(expense_id)
