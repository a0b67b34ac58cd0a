from typing import Optional

from fastapi import Depends, Header, HTTPException
from starlette.requests import Request

from tripbook.core.errors import Unauthorized
from tripbook.services.availability import AvailabilityLedger
from tripbook.services.booking_service import BookingService
from tripbook.services.budget_service import BudgetAggregator
from tripbook.services.expense_service import ExpenseService
from tripbook.services.itinerary_service import ItinerarySequencer
from tripbook.services.rate_catalog import RateCatalog
from tripbook.services.references import ReferenceGenerator
from tripbook.storage.repository import InMemoryRepository


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise HTTPException(status_code=500, detail=f"{name} not initialized")
    return value


def get_repository(request: Request) -> InMemoryRepository:
    return _state(request, "repository")


def get_catalog(request: Request) -> RateCatalog:
    return _state(request, "catalog")


def get_ledger(request: Request) -> AvailabilityLedger:
    return _state(request, "ledger")


def get_references(request: Request) -> ReferenceGenerator:
    return _state(request, "references")


def get_current_user(x_user_id: Optional[str] = Header(None)) -> str:
    if not x_user_id or not x_user_id.strip():
        raise Unauthorized("Missing X-User-Id header")
    return x_user_id.strip()


def get_itinerary(
    repository: InMemoryRepository = Depends(get_repository),
    catalog: RateCatalog = Depends(get_catalog),
) -> ItinerarySequencer:
    return ItinerarySequencer(repository=repository, catalog=catalog)


def get_booking_service(
    repository: InMemoryRepository = Depends(get_repository),
    catalog: RateCatalog = Depends(get_catalog),
    ledger: AvailabilityLedger = Depends(get_ledger),
    references: ReferenceGenerator = Depends(get_references),
) -> BookingService:
    return BookingService(
        repository=repository, catalog=catalog, ledger=ledger, references=references
    )


def get_budget_aggregator(
    repository: InMemoryRepository = Depends(get_repository),
) -> BudgetAggregator:
    return BudgetAggregator(repository=repository)


def get_expense_service(
    repository: InMemoryRepository = Depends(get_repository),
) -> ExpenseService:
    return ExpenseService(repository=repository)
