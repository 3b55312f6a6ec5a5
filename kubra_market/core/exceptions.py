# kubra_market/core/exceptions.py
from typing import Optional


class AppError(Exception):
    """Base error carrying the HTTP status it is rendered with."""

    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(AppError):
    # Malformed input or failed precondition (insufficient stock, already paid)
    status_code = 400
    default_detail = "Validation failed"


class AuthenticationError(AppError):
    status_code = 401
    default_detail = "Unauthorized"


class AuthorizationError(AppError):
    # Authenticated, but the row belongs to another merchant
    status_code = 403
    default_detail = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Not found"


class UnexpectedError(AppError):
    status_code = 500
    default_detail = "Internal server error"
