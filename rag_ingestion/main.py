import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path

import httpx

from rag_ingestion.config.settings import Settings
from rag_ingestion.database.connection import apply_schema, close_pool, init_pool
from rag_ingestion.database.exceptions import DatabaseError
from rag_ingestion.database.models import ValidationRecord
from rag_ingestion.intake.exceptions import IntakeBatchError
from rag_ingestion.intake.handler import build_intake_handler
from rag_ingestion.intake.status import get_document_status
from rag_ingestion.logging.logger import Log
from rag_ingestion.tracking.exceptions import TrackingError
from rag_ingestion.tracking.models import ProgressEvent, WatchState
from rag_ingestion.tracking.tracker import build_document_tracker


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="rag-ingestion")
    commands = parser.add_subparsers(dest="command", required=True)

    validate = commands.add_parser("validate", help="Run intake over a storage notification file")
    validate.add_argument("event_file", type=Path)
    validate.add_argument("--apply-schema", action="store_true", help="Create tables first")

    track = commands.add_parser("track", help="Report a document's pipeline status")
    track.add_argument("document_id")
    track.add_argument("--watch", action="store_true", help="Poll the summary with backoff")

    status = commands.add_parser("status", help="Show a document's ingestion status record")
    status.add_argument("document_id")
    return parser.parse_args(argv)


def run_validate(settings: Settings, event_file: Path, create_schema: bool) -> int:
    event = json.loads(event_file.read_text(encoding="utf-8"))
    init_pool(settings)
    try:
        if create_schema:
            apply_schema()
        handler = build_intake_handler(settings)
        try:
            outcomes = handler.handle(event)
        except IntakeBatchError as exc:
            Log.error(str(exc))
            return 1
    finally:
        close_pool()

    records = [asdict(ValidationRecord.from_outcome(outcome)) for outcome in outcomes]
    print(json.dumps(records, indent=2, default=str))
    return 0


def run_status(settings: Settings, document_id: str) -> int:
    init_pool(settings)
    try:
        payload = get_document_status(document_id)
    except DatabaseError as exc:
        Log.error(str(exc))
        return 1
    finally:
        close_pool()

    print(json.dumps(payload, indent=2))
    return 0 if payload["status"] != "not_found" else 1


def _log_progress(event: ProgressEvent) -> None:
    if event.summary is not None:
        Log.info(
            f"[{event.attempt}] {event.summary.overall_status.value} "
            f"at {event.summary.current_stage.value}"
        )
    elif event.stage_status is not None:
        Log.info(
            f"[{event.attempt}] {event.stage_status.stage.value}: "
            f"{event.stage_status.status.value}"
        )


async def run_track(settings: Settings, document_id: str, watch: bool) -> int:
    async with httpx.AsyncClient(timeout=settings.status_timeout_seconds) as http_client:
        tracker = build_document_tracker(settings, http_client)
        tracker.add_observer(_log_progress)
        if watch:
            outcome = await tracker.watch_pipeline(document_id)
            print(json.dumps(outcome.to_dict(), indent=2))
            return 0 if outcome.state in (WatchState.COMPLETED, WatchState.PARTIAL_SUCCESS) else 1

        try:
            summary = await tracker.aggregator.get_pipeline_summary(document_id)
        except TrackingError as exc:
            Log.error(str(exc))
            return 1
        print(json.dumps(summary.to_dict(), indent=2))
        return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: load settings -> configure logging -> dispatch sub-command."""
    args = _parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    if args.command == "validate":
        return run_validate(settings, args.event_file, args.apply_schema)
    if args.command == "status":
        return run_status(settings, args.document_id)
    return asyncio.run(run_track(settings, args.document_id, args.watch))


if __name__ == "__main__":
    sys.exit(main())
