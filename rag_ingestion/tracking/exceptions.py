class TrackingError(Exception):
    """Base exception for pipeline tracking errors."""


class StatusMappingError(TrackingError):
    """Raised when a provider response cannot be mapped to a stage status."""


class PipelineUnavailableError(TrackingError):
    """Raised when no stage provider could be reached for a summary."""
