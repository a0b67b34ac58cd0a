"""Error taxonomy shared by the services and the HTTP layer.

Every business-rule failure is raised before any record is touched, so a
caller that catches one of these can assume nothing was written.
"""


class EngineError(Exception):
    code = "engine_error"
    status_code = 500

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.code)
        self.detail = detail or self.code


class InvalidDateRange(EngineError):
    code = "invalid_date_range"
    status_code = 400


class ValidationError(EngineError):
    code = "validation_error"
    status_code = 400


class Unauthorized(EngineError):
    code = "unauthorized"
    status_code = 401


class InsufficientCapacity(EngineError):
    code = "insufficient_capacity"
    status_code = 409


class CarUnavailable(EngineError):
    code = "car_unavailable"
    status_code = 409


class NotFound(EngineError):
    code = "not_found"
    status_code = 404


class TripNotFound(NotFound):
    code = "trip_not_found"


class StopNotFound(NotFound):
    code = "stop_not_found"


class ActivityNotFound(NotFound):
    code = "activity_not_found"


class BookingNotFound(NotFound):
    code = "booking_not_found"


class ExpenseNotFound(NotFound):
    code = "expense_not_found"


class FlightNotFound(NotFound):
    code = "flight_not_found"


class CarNotFound(NotFound):
    code = "car_not_found"
