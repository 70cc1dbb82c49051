from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Stage(str, Enum):
    INGESTION = "ingestion"
    PROCESSING = "processing"
    EMBEDDING = "embedding"
    VECTOR_STORAGE = "vector-storage"


STAGE_ORDER: tuple[Stage, ...] = (
    Stage.INGESTION,
    Stage.PROCESSING,
    Stage.EMBEDDING,
    Stage.VECTOR_STORAGE,
)


class StageState(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ErrorType(str, Enum):
    NETWORK = "network"
    NOT_FOUND = "not_found"
    OTHER = "other"


@dataclass(frozen=True)
class StageStatus:
    """Canonical status of one document at one stage."""

    document_id: str
    stage: Stage
    status: StageState
    timestamp: str
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def error_type(self) -> ErrorType | None:
        value = self.metadata.get("errorType")
        return ErrorType(value) if value else None

    @property
    def is_terminal_failure(self) -> bool:
        """A failure that is not explained by the stage being unreachable."""
        return self.status is StageState.FAILED and self.error_type is not ErrorType.NETWORK

    @property
    def processing_time(self) -> float:
        """Reported duration in ms, falling back to the provider's execution time."""
        for key in ("processingTime", "executionTime"):
            value = self.metadata.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
        return 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "documentId": self.document_id,
            "stage": self.stage.value,
            "status": self.status.value,
            "timestamp": self.timestamp,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class PipelineSummary:
    """Single-view aggregate of the four stage statuses for one document."""

    document_id: str
    overall_status: StageState
    current_stage: Stage
    completed_stages: tuple[Stage, ...]
    failed_stages: tuple[Stage, ...]
    total_processing_time: float
    stage_details: dict[Stage, StageStatus]

    @property
    def is_terminal(self) -> bool:
        return self.overall_status in (StageState.COMPLETED, StageState.FAILED)

    def to_dict(self) -> dict[str, Any]:
        """Client-facing camelCase shape."""
        return {
            "documentId": self.document_id,
            "overallStatus": self.overall_status.value,
            "currentStage": self.current_stage.value,
            "completedStages": [stage.value for stage in self.completed_stages],
            "failedStages": [stage.value for stage in self.failed_stages],
            "totalProcessingTime": self.total_processing_time,
            "stageDetails": {
                stage.value: detail.to_dict() for stage, detail in self.stage_details.items()
            },
        }


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted to observers once per poll cycle."""

    document_id: str
    attempt: int
    stage_status: StageStatus | None = None
    summary: PipelineSummary | None = None


ProgressObserver = Callable[[ProgressEvent], None]


class WatchState(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    PARTIAL_SUCCESS = "partial_success"
    UNAVAILABLE = "unavailable"
    ALL_SERVICES_UNAVAILABLE = "all_services_unavailable"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class WatchOutcome:
    """Terminal result of watching a document through the pipeline."""

    document_id: str
    state: WatchState
    attempts: int
    message: str
    summary: PipelineSummary | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "documentId": self.document_id,
            "state": self.state.value,
            "attempts": self.attempts,
            "message": self.message,
            "summary": self.summary.to_dict() if self.summary else None,
        }
