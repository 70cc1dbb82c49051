from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from rag_ingestion.events.base import BaseEventPublisher
from rag_ingestion.events.exceptions import EventPublishError
from rag_ingestion.events.models import DocumentEvent


class EventBridgePublisher(BaseEventPublisher):
    """Publishes document events to an EventBridge bus via boto3."""

    def __init__(
        self,
        *,
        event_bus_name: str,
        region: str,
        client: Any | None = None,
    ) -> None:
        self._event_bus_name = event_bus_name
        self._client = client if client is not None else boto3.client("events", region_name=region)

    def publish(self, event: DocumentEvent) -> None:
        try:
            response = self._client.put_events(Entries=[event.to_entry(self._event_bus_name)])
        except (ClientError, BotoCoreError) as exc:
            raise EventPublishError(f"Failed to publish {event.detail_type}: {exc}") from exc

        if response.get("FailedEntryCount", 0):
            entries = response.get("Entries", [{}])
            message = entries[0].get("ErrorMessage", "unknown error") if entries else "unknown error"
            raise EventPublishError(f"EventBridge rejected {event.detail_type}: {message}")
