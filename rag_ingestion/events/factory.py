from rag_ingestion.config.settings import Settings
from rag_ingestion.events.base import BaseEventPublisher
from rag_ingestion.events.eventbridge_adapter import EventBridgePublisher
from rag_ingestion.events.log_adapter import LogEventPublisher


class EventPublisherFactory:
    """Creates the event publisher selected in settings."""

    PUBLISHERS = ("eventbridge", "log")

    @classmethod
    def create(cls, settings: Settings) -> BaseEventPublisher:
        publisher = settings.event_publisher.lower()
        if publisher == "eventbridge":
            return EventBridgePublisher(
                event_bus_name=settings.event_bus_name,
                region=settings.aws_region,
            )
        if publisher == "log":
            return LogEventPublisher()
        raise ValueError(
            f"Unknown event publisher '{publisher}'. Choose from: {list(cls.PUBLISHERS)}"
        )
