import asyncio

from rag_ingestion.logging.logger import Log
from rag_ingestion.tracking.client import StageStatusClient
from rag_ingestion.tracking.exceptions import PipelineUnavailableError
from rag_ingestion.tracking.models import (
    STAGE_ORDER,
    ErrorType,
    PipelineSummary,
    Stage,
    StageState,
    StageStatus,
)


class PipelineStatusAggregator:
    """Combines the four stage statuses into one PipelineSummary."""

    def __init__(self, client: StageStatusClient) -> None:
        self._client = client

    async def get_all_stage_statuses(self, document_id: str) -> dict[Stage, StageStatus]:
        results = await asyncio.gather(
            *(self._client.check_stage_status(stage, document_id) for stage in STAGE_ORDER)
        )
        return dict(zip(STAGE_ORDER, results))

    async def get_pipeline_summary(
        self,
        document_id: str,
        previous: PipelineSummary | None = None,
    ) -> PipelineSummary:
        """Query every stage and reduce to a summary.

        When ``previous`` is given, stages it reported completed stay completed.

        Raises:
            PipelineUnavailableError: if no stage provider could be reached.
                Checked before completed stages are carried forward.
        """
        statuses = await self.get_all_stage_statuses(document_id)
        if all_unreachable(statuses):
            raise PipelineUnavailableError(
                f"No stage status provider could be reached for {document_id}"
            )
        if previous is not None:
            statuses = carry_forward_completed(previous, statuses)
        summary = summarize(document_id, statuses)
        Log.debug(
            f"Pipeline summary for {document_id}: {summary.overall_status.value} "
            f"at {summary.current_stage.value}"
        )
        return summary


def all_unreachable(statuses: dict[Stage, StageStatus]) -> bool:
    return bool(statuses) and all(
        status.error_type is ErrorType.NETWORK for status in statuses.values()
    )


def carry_forward_completed(
    previous: PipelineSummary,
    statuses: dict[Stage, StageStatus],
) -> dict[Stage, StageStatus]:
    merged = dict(statuses)
    for stage in previous.completed_stages:
        current = merged.get(stage)
        if current is None or current.status is not StageState.COMPLETED:
            Log.debug(f"Keeping {stage.value} completed from previous summary")
            merged[stage] = previous.stage_details[stage]
    return merged


def summarize(document_id: str, statuses: dict[Stage, StageStatus]) -> PipelineSummary:
    """Walk the stages in order and derive overall status and current stage.

    A stage that failed because it could not be reached is treated like a
    pending one; any other failure is terminal for the document.
    """
    completed: list[Stage] = []
    failed: list[Stage] = []
    overall = StageState.PENDING
    current = STAGE_ORDER[0]
    total_time = 0.0

    for stage in STAGE_ORDER:
        status = statuses[stage]
        if status.status is StageState.COMPLETED:
            completed.append(stage)
            total_time += status.processing_time
            continue
        current = stage
        if status.is_terminal_failure:
            failed.append(stage)
            overall = StageState.FAILED
        elif status.status is StageState.PROCESSING:
            overall = StageState.PROCESSING
        break

    if len(completed) == len(STAGE_ORDER):
        overall = StageState.COMPLETED
        current = STAGE_ORDER[-1]
    elif completed and not failed:
        overall = StageState.PROCESSING

    return PipelineSummary(
        document_id=document_id,
        overall_status=overall,
        current_stage=current,
        completed_stages=tuple(completed),
        failed_stages=tuple(failed),
        total_processing_time=total_time,
        stage_details=dict(statuses),
    )
