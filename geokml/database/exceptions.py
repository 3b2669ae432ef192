class StoreError(Exception):
    """Base exception for job and record store errors."""


class RecordNotFoundError(StoreError):
    """Raised when a geo record cannot be found in the database."""
