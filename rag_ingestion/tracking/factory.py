from typing import Any

from rag_ingestion.tracking.base import BaseStageAdapter
from rag_ingestion.tracking.embedding_adapter import EmbeddingStatusAdapter
from rag_ingestion.tracking.ingestion_adapter import IngestionStatusAdapter
from rag_ingestion.tracking.models import Stage, StageStatus
from rag_ingestion.tracking.processing_adapter import ProcessingStatusAdapter
from rag_ingestion.tracking.vector_storage_adapter import VectorStorageStatusAdapter


class StageAdapterFactory:
    """Returns the adapter for a stage's provider."""

    ADAPTERS: dict[Stage, type[BaseStageAdapter]] = {
        Stage.INGESTION: IngestionStatusAdapter,
        Stage.PROCESSING: ProcessingStatusAdapter,
        Stage.EMBEDDING: EmbeddingStatusAdapter,
        Stage.VECTOR_STORAGE: VectorStorageStatusAdapter,
    }

    @classmethod
    def create(cls, stage: Stage) -> BaseStageAdapter:
        adapter_cls = cls.ADAPTERS.get(stage)
        if adapter_cls is None:
            raise ValueError(f"No status adapter for stage '{stage}'")
        return adapter_cls()


def map_service_response(
    stage: Stage, payload: dict[str, Any], document_id: str = ""
) -> StageStatus:
    """Normalize a provider's raw JSON into a StageStatus.

    Raises:
        StatusMappingError: if the payload does not match the provider's vocabulary.
    """
    return StageAdapterFactory.create(stage).map(payload, document_id)
