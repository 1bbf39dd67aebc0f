from __future__ import annotations


class BookshopError(Exception):
    """Base for failures that are reported to API callers.

    Each subclass carries the HTTP status it maps to. `message` is shown to
    the end user, `error` holds optional technical detail.
    """
    status_code: int = 500
    default_message: str = "Server Error"

    def __init__(self, message: str | None = None, error: str | None = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class ValidationError(BookshopError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(BookshopError):
    status_code = 400
    default_message = "Resource already exists"


class AuthError(BookshopError):
    status_code = 401
    default_message = "Not authorized"


class NotFoundError(BookshopError):
    status_code = 404
    default_message = "Not found"


class ExpiredError(BookshopError):
    status_code = 400
    default_message = "Voucher has expired"


class InternalError(BookshopError):
    status_code = 500
    default_message = "Server Error"
