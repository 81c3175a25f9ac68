"""Error types raised by the expense tracker core."""

class ValidationError(ValueError):
    """Raised when request or command input cannot become an expense."""


class RecordNotFoundError(LookupError):
    """Raised when no live expense carries the requested id."""


class PersistenceError(IOError):
    """Raised when the expense store cannot be read or written."""
