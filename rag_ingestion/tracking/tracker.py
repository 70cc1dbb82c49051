import asyncio
from collections.abc import Awaitable, Callable

import httpx

from rag_ingestion.config.settings import Settings
from rag_ingestion.logging.logger import Log
from rag_ingestion.tracking.aggregator import PipelineStatusAggregator
from rag_ingestion.tracking.backoff import error_retry_delay, summary_poll_delay
from rag_ingestion.tracking.client import StageStatusClient
from rag_ingestion.tracking.exceptions import TrackingError
from rag_ingestion.tracking.models import (
    STAGE_ORDER,
    PipelineSummary,
    ProgressEvent,
    ProgressObserver,
    Stage,
    StageState,
    StageStatus,
    WatchOutcome,
    WatchState,
)

Sleep = Callable[[float], Awaitable[None]]


class DocumentTracker:
    """Polls stage providers until a document settles, notifying observers."""

    def __init__(
        self,
        client: StageStatusClient,
        aggregator: PipelineStatusAggregator,
        *,
        stage_poll_interval_seconds: float = 2.0,
        stage_max_attempts: int = 60,
        watch_initial_delay_seconds: float = 3.0,
        watch_max_attempts: int = 50,
        watch_max_consecutive_errors: int = 3,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if stage_max_attempts < 1 or watch_max_attempts < 1:
            raise ValueError("Attempt bounds must be at least 1")
        self._client = client
        self._aggregator = aggregator
        self._stage_poll_interval = stage_poll_interval_seconds
        self._stage_max_attempts = stage_max_attempts
        self._watch_initial_delay = watch_initial_delay_seconds
        self._watch_max_attempts = watch_max_attempts
        self._watch_max_consecutive_errors = watch_max_consecutive_errors
        self._sleep = sleep
        self._observers: list[ProgressObserver] = []

    @property
    def aggregator(self) -> PipelineStatusAggregator:
        return self._aggregator

    def add_observer(self, observer: ProgressObserver) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: ProgressObserver) -> None:
        self._observers.remove(observer)

    async def track_document(self, document_id: str) -> StageStatus:
        """Walk the stages one at a time until all complete or one fails.

        Returns the last stage status seen: vector-storage completed on
        success, the failing stage on failure, or the stage still in flight
        when its attempt bound ran out.
        """
        Log.info(f"Tracking document {document_id} through {len(STAGE_ORDER)} stages")
        status: StageStatus | None = None
        attempt = 0
        for stage in STAGE_ORDER:
            for stage_attempt in range(1, self._stage_max_attempts + 1):
                attempt += 1
                status = await self._client.check_stage_status(stage, document_id)
                self._notify(ProgressEvent(document_id=document_id, attempt=attempt, stage_status=status))

                if status.status is StageState.COMPLETED:
                    Log.info(f"Document {document_id}: {stage.value} completed")
                    break
                if status.status is StageState.FAILED:
                    Log.error(
                        f"Document {document_id}: {stage.value} failed: "
                        f"{status.metadata.get('errorMessage', 'unknown error')}"
                    )
                    return status
                if stage_attempt < self._stage_max_attempts:
                    await self._sleep(self._stage_poll_interval)
            else:
                Log.warning(
                    f"Document {document_id}: {stage.value} still {status.status.value} "
                    f"after {self._stage_max_attempts} checks"
                )
                return status
        return status

    async def watch_pipeline(self, document_id: str) -> WatchOutcome:
        """Poll the whole-pipeline summary with backoff until a terminal outcome."""
        Log.info(f"Watching pipeline for document {document_id}")
        await self._sleep(self._watch_initial_delay)

        attempts = 0
        consecutive_errors = 0
        summary: PipelineSummary | None = None
        while attempts < self._watch_max_attempts:
            attempts += 1
            try:
                summary = await self._aggregator.get_pipeline_summary(document_id, summary)
            except TrackingError as exc:
                consecutive_errors += 1
                Log.error(
                    f"Summary fetch failed for {document_id} "
                    f"({consecutive_errors}/{self._watch_max_consecutive_errors}): {exc}"
                )
                if consecutive_errors >= self._watch_max_consecutive_errors:
                    return await self._fall_back_to_ingestion(document_id, attempts, summary)
                await self._sleep(error_retry_delay(consecutive_errors))
                continue

            consecutive_errors = 0
            self._notify(ProgressEvent(document_id=document_id, attempt=attempts, summary=summary))

            if summary.overall_status is StageState.COMPLETED:
                Log.info(f"Document {document_id} completed all stages")
                return WatchOutcome(
                    document_id, WatchState.COMPLETED, attempts, "Pipeline completed", summary
                )
            if summary.overall_status is StageState.FAILED:
                failed = ", ".join(stage.value for stage in summary.failed_stages)
                Log.error(f"Document {document_id} failed at {failed}")
                return WatchOutcome(
                    document_id, WatchState.FAILED, attempts, f"Pipeline failed at {failed}", summary
                )
            await self._sleep(summary_poll_delay(attempts))

        Log.warning(f"Stopped watching {document_id} after {attempts} polls")
        return WatchOutcome(
            document_id,
            WatchState.TIMED_OUT,
            attempts,
            f"No terminal status after {attempts} polls",
            summary,
        )

    async def _fall_back_to_ingestion(
        self,
        document_id: str,
        attempts: int,
        summary: PipelineSummary | None,
    ) -> WatchOutcome:
        Log.info(f"Falling back to ingestion-only status for {document_id}")
        try:
            status = await self._client.fetch_stage_status(Stage.INGESTION, document_id)
        except (httpx.HTTPError, TrackingError) as exc:
            Log.error(f"Ingestion fallback failed for {document_id}: {exc}")
            return WatchOutcome(
                document_id,
                WatchState.ALL_SERVICES_UNAVAILABLE,
                attempts,
                "All services unavailable",
                summary,
            )

        self._notify(ProgressEvent(document_id=document_id, attempt=attempts, stage_status=status))
        if status.status is StageState.COMPLETED:
            return WatchOutcome(
                document_id,
                WatchState.PARTIAL_SUCCESS,
                attempts,
                "Ingestion completed - downstream status unavailable",
                summary,
            )
        return WatchOutcome(
            document_id,
            WatchState.UNAVAILABLE,
            attempts,
            f"Ingestion {status.status.value} - downstream status unavailable",
            summary,
        )

    def _notify(self, event: ProgressEvent) -> None:
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception as exc:
                Log.warning(f"Progress observer failed: {exc}")


def build_document_tracker(settings: Settings, http_client: httpx.AsyncClient) -> DocumentTracker:
    """Build a DocumentTracker over the configured status endpoints."""
    client = StageStatusClient(
        {
            Stage.INGESTION: settings.ingestion_status_endpoint,
            Stage.PROCESSING: settings.processing_status_endpoint,
            Stage.EMBEDDING: settings.embedding_status_endpoint,
            Stage.VECTOR_STORAGE: settings.vector_storage_status_endpoint,
        },
        http_client=http_client,
        auth_token=settings.status_auth_token,
    )
    return DocumentTracker(
        client,
        PipelineStatusAggregator(client),
        stage_poll_interval_seconds=settings.stage_poll_interval_seconds,
        stage_max_attempts=settings.stage_max_attempts,
        watch_initial_delay_seconds=settings.watch_initial_delay_seconds,
        watch_max_attempts=settings.watch_max_attempts,
        watch_max_consecutive_errors=settings.watch_max_consecutive_errors,
    )
