"""
Error taxonomy shared by the ledger, the directory and the HTTP layer.
"""
from typing import Any, Optional


class LedgerError(Exception):
    """Base class for errors surfaced to callers of the ledger and directory."""

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(LedgerError):
    """Raised when a visit or edit carries malformed fields."""
    pass


class NotFound(LedgerError):
    """Raised when an operation targets a record id that does not exist."""

    def __init__(self, record_id: int):
        super().__init__("The driver with this ID does not exist in the system")
        self.record_id = record_id


class StorageFailure(LedgerError):
    """Raised when the database is unreachable or rejects a write."""
    pass


class WriteConflict(StorageFailure):
    """Raised when a concurrent write won the race for the same record."""
    pass
