from app.utils.base.enums import BaseEnum, TokenType, OrderBy, PrintType
from app.utils.base.errors import (
    BookshopError,
    ValidationError,
    ConflictError,
    AuthError,
    NotFoundError,
    ExpiredError,
    InternalError,
)
from app.utils.base.response import envelope, error_envelope
