from typing import Any

from rag_ingestion.tracking.base import BaseStageAdapter
from rag_ingestion.tracking.models import Stage, StageState


class IngestionStatusAdapter(BaseStageAdapter):
    """Upload/validation service: {documentId, status, ...At, executionTimeMs}."""

    stage = Stage.INGESTION
    id_field = "documentId"
    status_field = "status"
    STATUS_TABLE = {
        "pending": StageState.PENDING,
        "not_found": StageState.PENDING,
        "uploaded": StageState.PROCESSING,
        "processing": StageState.PROCESSING,
        "validated": StageState.COMPLETED,
        "completed": StageState.COMPLETED,
        "rejected": StageState.FAILED,
        "quarantined": StageState.FAILED,
        "failed": StageState.FAILED,
    }
    NOT_FOUND_TOKENS = frozenset({"not_found"})

    def metadata(self, payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "fileName": payload.get("fileName"),
            "fileSize": payload.get("fileSize"),
            "location": payload.get("location"),
            "errorMessage": payload.get("errorMessage"),
            "executionTime": payload.get("executionTimeMs"),
        }

    def timestamp(self, payload: dict[str, Any]) -> str | None:
        for key in ("validatedAt", "rejectedAt", "quarantinedAt", "uploadedAt"):
            if payload.get(key):
                return str(payload[key])
        return None
