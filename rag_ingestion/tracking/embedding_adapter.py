from typing import Any

from rag_ingestion.tracking.base import BaseStageAdapter
from rag_ingestion.tracking.models import Stage, StageState


class EmbeddingStatusAdapter(BaseStageAdapter):
    """Embedding service: {document_id, status: PENDING|IN_PROGRESS|SUCCEEDED|FAILED}."""

    stage = Stage.EMBEDDING
    id_field = "document_id"
    status_field = "status"
    STATUS_TABLE = {
        "pending": StageState.PENDING,
        "in_progress": StageState.PROCESSING,
        "succeeded": StageState.COMPLETED,
        "failed": StageState.FAILED,
    }

    def metadata(self, payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "embeddingCount": payload.get("embedding_count"),
            "model": payload.get("model"),
            "processingTime": payload.get("duration_ms"),
            "errorMessage": payload.get("failure_reason"),
        }

    def timestamp(self, payload: dict[str, Any]) -> str | None:
        value = payload.get("completed_at") or payload.get("started_at")
        return str(value) if value else None
