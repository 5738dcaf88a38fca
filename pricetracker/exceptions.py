"""Error kinds raised by the price tracker services."""
from typing import Optional


class PriceTrackerError(Exception):
    """Base class for all price tracker errors."""
    pass


class ValidationError(PriceTrackerError):
    """Raised when input is malformed or outside an allowed enum."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ProductNotFoundError(PriceTrackerError):
    """Raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        super().__init__(f"Product with ID {product_id} not found")
        self.product_id = product_id


class OracleUnavailableError(PriceTrackerError):
    """Raised when the pricing oracle cannot be reached or rejects the request."""
    pass


class InvalidSuggestionError(PriceTrackerError):
    """Raised when the pricing oracle replies with something that is not a price."""

    def __init__(self, raw_reply: str):
        super().__init__(f"Pricing oracle returned an invalid format: {raw_reply}")
        self.raw_reply = raw_reply


class StorageError(PriceTrackerError):
    """Raised when the underlying database fails."""
    pass


class MigrationError(PriceTrackerError):
    """Raised when the startup schema upgrade fails. The app must not start."""
    pass
