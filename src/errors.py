from typing import Any, Dict, List, Optional


class AppError(Exception):
    """
    Domain error carrying an HTTP status code.

    Operational errors are expected failures (bad input, missing record,
    insufficient role). Non-operational errors indicate a bug and are
    logged at error severity.
    """

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        is_operational: bool = True,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.is_operational = is_operational
        self.errors = errors
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    default_message = "Bad request"


class EmptyPatchError(BadRequestError):
    default_message = "No fields to update"


class ConstraintViolationError(BadRequestError):
    default_message = "Related record constraint violated"


class UnauthenticatedError(AppError):
    status_code = 401
    default_message = "Invalid or missing authentication token"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Record not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Duplicate record"
