import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tripbook.api import routes_booking, routes_health, routes_trips
from tripbook.core.config import Settings, settings as default_settings
from tripbook.core.errors import EngineError, InvalidDateRange, ValidationError
from tripbook.core.logging import configure_logging
from tripbook.services.availability import AvailabilityLedger
from tripbook.services.rate_catalog import RateCatalog, StaticRateCatalog
from tripbook.services.references import RandomReferenceGenerator
from tripbook.storage.repository import InMemoryRepository

logger = logging.getLogger(__name__)


async def engine_error_handler(request: Request, exc: EngineError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Unhandled engine error on %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.code, "detail": exc.detail},
    )


def _describe(error: dict) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    return f"{location}: {error.get('msg', 'invalid value')}" if location else error.get("msg", "")


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    # unparseable dates count as a bad range, everything else as bad input
    if any(str(e.get("type", "")).startswith(("date", "datetime")) for e in errors):
        error = InvalidDateRange("; ".join(_describe(e) for e in errors))
    else:
        error = ValidationError("; ".join(_describe(e) for e in errors))
    logger.warning("Rejected request to %s: %s", request.url.path, error.detail)
    return await engine_error_handler(request, error)


def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[InMemoryRepository] = None,
    catalog: Optional[RateCatalog] = None,
) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name, version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(EngineError, engine_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    repository = repository or InMemoryRepository()

    app.include_router(routes_health.router, tags=["health"])
    app.include_router(routes_trips.router, prefix="/trips", tags=["trips"])
    app.include_router(routes_booking.router, tags=["booking"])

    # Shared engine state for request dependencies
    app.state.settings = settings
    app.state.repository = repository
    app.state.catalog = catalog or StaticRateCatalog()
    app.state.ledger = AvailabilityLedger(
        prevent_car_double_booking=settings.prevent_car_double_booking
    )
    app.state.references = RandomReferenceGenerator(
        exists=repository.has_booking_reference,
        max_attempts=settings.reference_max_attempts,
    )
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tripbook.main:app", host="0.0.0.0", port=8000, reload=True)
