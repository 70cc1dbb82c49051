import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

DETAIL_TYPE_VALIDATED = "Document Validated"
DETAIL_TYPE_REJECTED = "Document Rejected"
DETAIL_TYPE_QUARANTINED = "Document Quarantined"


@dataclass(frozen=True)
class DocumentEvent:
    """An EventBridge-style document lifecycle event."""

    detail_type: str
    source: str
    detail: dict[str, Any]
    time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_entry(self, event_bus_name: str) -> dict[str, Any]:
        """Render as a PutEvents request entry."""
        return {
            "Time": self.time,
            "Source": self.source,
            "DetailType": self.detail_type,
            "EventBusName": event_bus_name,
            "Detail": json.dumps(self.detail),
        }
