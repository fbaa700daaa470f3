"""
Domain error taxonomy shared by the orchestrators and the storage adapters.
The HTTP layer maps each kind to a status code in main.py.
"""
from typing import Optional


class ContentError(Exception):
    """Base class for every error an orchestrator operation can raise."""

    kind = "content_error"

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        # Position of the offending item in multi-item operations
        self.index = index

    def __str__(self) -> str:
        if self.index is not None:
            return f"item {self.index}: {self.message}"
        return self.message


class ValidationError(ContentError):
    """Bad or missing input. Raised before any side effect."""

    kind = "validation_error"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"{field} is required")
        self.field = field


class NotFound(ContentError):
    kind = "not_found"


class PayloadTooLarge(ContentError):
    kind = "payload_too_large"


class DecodeError(ContentError):
    """Malformed binary encoding (e.g. invalid base64)."""

    kind = "decode_error"


class BackendError(ContentError):
    """
    Store or Blobs failure.
    The underlying exception is kept as __cause__ for logging.
    """

    kind = "backend_error"


def as_content_error(exc: Exception, message: str) -> ContentError:
    """Return exc unchanged if it is already classified, else wrap it in a BackendError."""
    if isinstance(exc, ContentError):
        return exc
    wrapped = BackendError(f"{message}: {exc}")
    wrapped.__cause__ = exc
    return wrapped
