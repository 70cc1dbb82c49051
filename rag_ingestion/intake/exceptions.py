class IntakeError(Exception):
    """Base exception for intake errors that are not classification outcomes."""


class ObjectRetrievalError(IntakeError):
    """Raised when a stored object cannot be fetched for classification."""


class InvalidNotificationError(IntakeError):
    """Raised when a storage notification record is missing required fields."""


class IntakeBatchError(IntakeError):
    """Raised after a batch when one or more records hit transport failures."""

    def __init__(self, failures: list[tuple[str, Exception]]) -> None:
        self.failures = failures
        keys = ", ".join(key for key, _ in failures)
        super().__init__(f"{len(failures)} record(s) failed: {keys}")
