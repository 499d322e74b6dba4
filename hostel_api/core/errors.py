# hostel_api/core/errors.py

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hostel_api.core.config import CORS_HEADERS, settings


# ============================================================================
# API ERROR
# ============================================================================
class ApiError(Exception):
    """
    An error that is already a well-formed client response.
    Rendered as ``{"error": <error>, **extra}`` with ``status_code``.
    """

    def __init__(self, status_code: int, error: str, **extra: Any):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.extra = extra

    def to_dict(self) -> dict:
        return {"error": self.error, **self.extra}


# ============================================================================
# DUPLICATE KEY CLASSIFICATION
# ============================================================================
GENERIC_DUPLICATE_MESSAGE = "Duplicate entry found"

DUPLICATE_MESSAGES = {
    "roll_no": "Roll number already exists",
    "email": "Email already exists",
    "mobile_no": "Mobile number already exists",
}

# Named constraints declared on the students table
CONSTRAINT_FIELDS = {
    "students_pkey": "roll_no",
    "uq_students_email": "email",
    "uq_students_mobile_no": "mobile_no",
}

UNIQUE_VIOLATION_SQLSTATE = "23505"


class DuplicateEntryError(ValueError):
    def __init__(self, field: str | None):
        self.field = field
        super().__init__(DUPLICATE_MESSAGES.get(field, GENERIC_DUPLICATE_MESSAGE))


def _driver_errors(exc: IntegrityError):
    """The DBAPI error and, for asyncpg, the native error underneath it."""
    orig = exc.orig
    yield orig
    cause = getattr(orig, "__cause__", None)
    if cause is not None:
        yield cause


def is_unique_violation(exc: IntegrityError) -> bool:
    for err in _driver_errors(exc):
        if getattr(err, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
            return True
    msg = str(exc.orig).lower()
    return "unique" in msg or "duplicate" in msg


def duplicate_field(exc: IntegrityError) -> str | None:
    """
    Which column a unique violation was raised for.

    Prefers the structured constraint name reported by the driver and
    falls back to looking for a column name in the error text. Returns
    None when neither identifies the column.
    """
    for err in _driver_errors(exc):
        constraint = getattr(err, "constraint_name", None)
        if constraint in CONSTRAINT_FIELDS:
            return CONSTRAINT_FIELDS[constraint]

    msg = str(exc.orig).lower()
    for field in ("roll_no", "email", "mobile_no"):
        if field in msg:
            return field
    return None


def classify_integrity_error(exc: IntegrityError) -> DuplicateEntryError | None:
    if not is_unique_violation(exc):
        return None
    return DuplicateEntryError(duplicate_field(exc))


# ============================================================================
# FAILURE BOUNDARY HELPERS
# ============================================================================
INTERNAL_ERROR_MESSAGE = "Internal server error"


def internal_error(exc: Exception, operation: str) -> ApiError:
    """Log an unexpected failure and turn it into the generic 500."""
    logger.exception(f"{operation} failed: {exc}")
    message = str(exc) if settings.EXPOSE_DB_ERRORS and str(exc) else INTERNAL_ERROR_MESSAGE
    return ApiError(500, message)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and unsupported methods on known paths look the same
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"loc": [str(part) for part in err.get("loc", ())], "msg": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": details},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    # Runs outside the CORS middleware, so the headers are added here
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": INTERNAL_ERROR_MESSAGE},
        headers=CORS_HEADERS,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
