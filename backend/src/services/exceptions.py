"""
Domain exception hierarchy for the service layer.

Controllers, stores and providers raise these instead of ``HTTPException`` so
they stay usable outside a request. The error handling middleware turns them
into JSON error responses.
"""
from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base domain exception that carries an HTTP-equivalent status code."""

    default_status_code: int = 500
    label: str = "Internal Server Error"

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        self.status_code = (
            status_code if status_code is not None else self.default_status_code
        )


class ValidationError(ServiceError):
    """Raised when procedure input is malformed or missing (HTTP 400).

    Always raised before any side effect.
    """

    default_status_code = 400
    label = "Validation Error"


class StorageError(ServiceError):
    """Raised when a read or write against the backing store fails (HTTP 500)."""

    default_status_code = 500
    label = "Storage Error"


class ProviderError(ServiceError):
    """Raised inside a generation provider when the upstream call fails.

    Never reaches the caller of an exchange: providers convert it into
    inline message content.
    """

    default_status_code = 502
    label = "Provider Error"
