from abc import ABC, abstractmethod

from rag_ingestion.events.models import DocumentEvent


class BaseEventPublisher(ABC):
    """Contract for document event publishers."""

    @abstractmethod
    def publish(self, event: DocumentEvent) -> None:
        """Deliver one event.

        Raises:
            EventPublishError: if the event was not accepted.
        """
