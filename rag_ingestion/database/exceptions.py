class DatabaseError(Exception):
    """Base exception for persistence errors."""


class RecordPersistenceError(DatabaseError):
    """Raised when a validation record cannot be written or read."""
