"""
Single place where failures become HTTP error responses.

Every error is mapped to the envelope
``{error, message, statusCode, errors?, stack?}``. Database driver text
never reaches the client; it is only logged.
"""
import traceback
from typing import Any, Dict, List, NamedTuple, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import DataError, IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.errors import AppError
from src.logging_config import get_logger

logger = get_logger(__name__)

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class ErrorDescription(NamedTuple):
    error: str
    status_code: int
    message: str
    is_operational: bool = True
    errors: Optional[List[Dict[str, Any]]] = None


def classify_integrity_error(exc: IntegrityError) -> str:
    """Return "unique", "foreign_key" or "constraint" for a store constraint failure"""
    pgcode = getattr(exc.orig, "pgcode", None)
    if pgcode == UNIQUE_VIOLATION:
        return "unique"
    if pgcode == FOREIGN_KEY_VIOLATION:
        return "foreign_key"

    text = str(exc.orig).lower()
    if "unique" in text or "duplicate" in text:
        return "unique"
    if "foreign key" in text:
        return "foreign_key"
    return "constraint"


def validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """One {field, message} pair per violated constraint, field as a dotted path"""
    errors = []
    for err in exc.errors():
        location = err.get("loc", ())
        errors.append({
            "field": ".".join(str(part) for part in location),
            "message": err.get("msg", "Invalid value"),
        })
    return errors


def describe_exception(exc: Exception) -> ErrorDescription:
    if isinstance(exc, AppError):
        return ErrorDescription(type(exc).__name__, exc.status_code, exc.message,
                                exc.is_operational, exc.errors)

    if isinstance(exc, RequestValidationError):
        if any(err.get("type") == "json_invalid" for err in exc.errors()):
            return ErrorDescription("ValidationError", 400, "Invalid request body")
        return ErrorDescription("ValidationError", 400, "Validation failed", errors=validation_errors(exc))

    if isinstance(exc, IntegrityError):
        kind = classify_integrity_error(exc)
        if kind == "unique":
            return ErrorDescription("ConflictError", 409, "Duplicate record")
        if kind == "foreign_key":
            return ErrorDescription("ConstraintViolationError", 400, "Related record constraint violated")
        return ErrorDescription("ConstraintViolationError", 400, "Database constraint violated")

    if isinstance(exc, DataError):
        # e.g. a running balance pushed past the column precision
        return ErrorDescription("ConstraintViolationError", 400, "Value out of range for the database")

    if isinstance(exc, NoResultFound):
        return ErrorDescription("NotFoundError", 404, "Record not found")

    if isinstance(exc, RateLimitExceeded):
        return ErrorDescription("RateLimitError", 429, "Too many requests, please try again later")

    if isinstance(exc, StarletteHTTPException):
        return ErrorDescription("HTTPError", exc.status_code, str(exc.detail))

    return ErrorDescription("InternalServerError", 500, "Internal server error", is_operational=False)


def error_response(request: Request, exc: Exception) -> JSONResponse:
    description = describe_exception(exc)
    context = {
        "method": request.method,
        "path": request.url.path,
        "ip": request.client.host if request.client else None,
    }

    if not description.is_operational or description.status_code >= 500:
        logger.error(f"Error {description.status_code}: {exc!r} {context}", exc_info=exc)
    else:
        # No request body here: it may carry passwords
        logger.warning(f"Operational error {description.status_code}: {description.message} {context}")

    body: Dict[str, Any] = {
        "error": description.error,
        "message": description.message,
        "statusCode": description.status_code,
    }
    if description.errors:
        body["errors"] = description.errors
    if not description.is_operational and not request.app.state.settings.is_production:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    headers = None
    if description.status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    elif isinstance(exc, StarletteHTTPException) and exc.headers:
        headers = dict(exc.headers)

    return JSONResponse(status_code=description.status_code, content=body, headers=headers)


async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
    return error_response(request, exc)


def handle_rate_limit(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    # slowapi calls this handler synchronously from its middleware
    return error_response(request, exc)


def register_error_handlers(app: FastAPI) -> None:
    for exc_class in (AppError, RequestValidationError, IntegrityError, DataError, NoResultFound,
                      StarletteHTTPException, Exception):
        app.add_exception_handler(exc_class, handle_exception)
    app.add_exception_handler(RateLimitExceeded, handle_rate_limit)
