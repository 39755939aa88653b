from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse


class ApiError(Exception):
    def __init__(self, status_code: int, code: str, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message


class InvalidPeriod(ApiError):
    """Bad year, month, quarter or period type supplied by the caller."""

    def __init__(self, message: str):
        super().__init__(400, "INVALID_PERIOD", message)


class EmployeeNotFound(ApiError):
    def __init__(self, name: str):
        super().__init__(404, "EMPLOYEE_NOT_FOUND", f"Employee '{name}' not found")
        self.name = name


class ExcessiveRangeError(ApiError):
    """A calendar walk was asked for more days than any supported period spans.

    Raised for inverted or corrupted ranges; this is a defect in the caller,
    not a user error.
    """

    def __init__(self, start: object, end: object, max_days: int):
        super().__init__(
            500,
            "EXCESSIVE_RANGE",
            f"Date range {start}..{end} exceeds {max_days} days",
        )
        self.start = start
        self.end = end
        self.max_days = max_days


class StorageError(ApiError):
    def __init__(self, operation: str, message: str = "Storage operation failed"):
        super().__init__(503, "STORAGE_ERROR", f"{message} ({operation})")
        self.operation = operation


def get_request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", None)
    if request_id:
        return str(request_id)
    return "unknown"


def error_response(request: Request, *, status_code: int, code: str, message: str) -> JSONResponse:
    payload = {
        "error": {
            "code": code,
            "message": message,
            "request_id": get_request_id(request),
        }
    }
    return JSONResponse(status_code=status_code, content=payload)
