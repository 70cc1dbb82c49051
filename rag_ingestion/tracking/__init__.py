from rag_ingestion.tracking.aggregator import PipelineStatusAggregator
from rag_ingestion.tracking.client import StageStatusClient
from rag_ingestion.tracking.factory import map_service_response
from rag_ingestion.tracking.tracker import DocumentTracker, build_document_tracker

__all__ = [
    "DocumentTracker",
    "PipelineStatusAggregator",
    "StageStatusClient",
    "build_document_tracker",
    "map_service_response",
]
