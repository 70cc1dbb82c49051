from typing import Any

from rag_ingestion.tracking.base import BaseStageAdapter
from rag_ingestion.tracking.models import Stage, StageState


class VectorStorageStatusAdapter(BaseStageAdapter):
    """Vector store service: {id, indexStatus, vectorCount, metrics.executionTimeMs}."""

    stage = Stage.VECTOR_STORAGE
    id_field = "id"
    status_field = "indexStatus"
    STATUS_TABLE = {
        "not_indexed": StageState.PENDING,
        "indexing": StageState.PROCESSING,
        "indexed": StageState.COMPLETED,
        "index_failed": StageState.FAILED,
    }

    def metadata(self, payload: dict[str, Any]) -> dict[str, Any]:
        metrics = payload.get("metrics")
        return {
            "vectorCount": payload.get("vectorCount"),
            "indexName": payload.get("indexName"),
            "executionTime": metrics.get("executionTimeMs") if isinstance(metrics, dict) else None,
            "errorMessage": payload.get("errorDetail"),
        }

    def timestamp(self, payload: dict[str, Any]) -> str | None:
        value = payload.get("lastUpdated")
        return str(value) if value else None
