class StorageError(Exception):
    """Base exception for all object store errors."""


class ObjectNotFoundError(StorageError):
    """Raised when the requested object does not exist."""


class StorageUnavailableError(StorageError):
    """Raised when the object store cannot be reached or refuses the request."""
