"""
errors.py — Domain error taxonomy
Services raise these; routes translate them into HTTP status codes.
ExternalServiceError never leaves the narrative layer.
"""


class FinanceError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FinanceError):
    """A required field or association is missing or malformed."""


class NotFoundError(FinanceError):
    """An id lookup found nothing (or nothing the caller owns)."""


class ConflictError(FinanceError):
    """The operation collides with existing records."""


class ExternalServiceError(FinanceError):
    """The completion endpoint was unreachable, non-2xx, or returned garbage."""


_HTTP_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    ExternalServiceError: 502,
}


def http_status_for(error: FinanceError) -> int:
    for cls in type(error).__mro__:
        if cls in _HTTP_STATUS:
            return _HTTP_STATUS[cls]
    return 500
