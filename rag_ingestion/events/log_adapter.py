import json

from rag_ingestion.events.base import BaseEventPublisher
from rag_ingestion.events.models import DocumentEvent
from rag_ingestion.logging.logger import Log


class LogEventPublisher(BaseEventPublisher):
    """Writes document events to the log instead of a bus. For local runs."""

    def publish(self, event: DocumentEvent) -> None:
        Log.info(f"{event.detail_type} [{event.source}]: {json.dumps(event.detail, sort_keys=True)}")
