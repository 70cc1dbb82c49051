class EventPublishError(Exception):
    """Raised when a document event cannot be delivered."""
