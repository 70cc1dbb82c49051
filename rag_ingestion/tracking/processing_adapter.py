from typing import Any

from rag_ingestion.tracking.base import BaseStageAdapter
from rag_ingestion.tracking.models import Stage, StageState


class ProcessingStatusAdapter(BaseStageAdapter):
    """Content processing service: {documentId, state, chunkCount, processingTimeMs}."""

    stage = Stage.PROCESSING
    id_field = "documentId"
    status_field = "state"
    STATUS_TABLE = {
        "queued": StageState.PENDING,
        "received": StageState.PENDING,
        "extracting": StageState.PROCESSING,
        "chunking": StageState.PROCESSING,
        "chunked": StageState.COMPLETED,
        "completed": StageState.COMPLETED,
        "error": StageState.FAILED,
        "failed": StageState.FAILED,
    }

    def metadata(self, payload: dict[str, Any]) -> dict[str, Any]:
        error = payload.get("error")
        return {
            "chunkCount": payload.get("chunkCount"),
            "processingTime": payload.get("processingTimeMs"),
            "errorMessage": error.get("message") if isinstance(error, dict) else error,
        }

    def timestamp(self, payload: dict[str, Any]) -> str | None:
        value = payload.get("updatedAt")
        return str(value) if value else None
