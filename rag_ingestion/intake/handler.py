from typing import Any

from rag_ingestion.config.settings import Settings
from rag_ingestion.database.exceptions import DatabaseError
from rag_ingestion.database.models import ValidationRecord
from rag_ingestion.database.repositories.validation_record_repository import (
    ValidationRecordRepository,
)
from rag_ingestion.events.base import BaseEventPublisher
from rag_ingestion.events.builder import build_document_event
from rag_ingestion.events.exceptions import EventPublishError
from rag_ingestion.events.factory import EventPublisherFactory
from rag_ingestion.intake.dispositions import DispositionApplier
from rag_ingestion.intake.exceptions import IntakeBatchError, IntakeError
from rag_ingestion.intake.models import IntakeOutcome, ObjectNotification
from rag_ingestion.intake.notifications import parse_notifications
from rag_ingestion.intake.validator import IntakeValidator
from rag_ingestion.logging.logger import Log
from rag_ingestion.storage.exceptions import ObjectNotFoundError, StorageError
from rag_ingestion.storage.factory import ObjectStoreFactory


class IntakeHandler:
    """Runs each notified object through classify -> dispose -> record -> publish."""

    def __init__(
        self,
        validator: IntakeValidator,
        dispositions: DispositionApplier,
        record_repo: ValidationRecordRepository,
        publisher: BaseEventPublisher,
        settings: Settings,
    ) -> None:
        self._validator = validator
        self._dispositions = dispositions
        self._record_repo = record_repo
        self._publisher = publisher
        self._settings = settings

    def handle(self, event: dict[str, Any]) -> list[IntakeOutcome]:
        """Process every record in a storage notification event.

        Transport failures do not stop the batch; they are raised together
        once every record has been attempted.

        Raises:
            IntakeBatchError: if any record failed for a non-content reason.
        """
        notifications = parse_notifications(event)
        Log.info(f"Intake handler received {len(notifications)} record(s)")

        outcomes: list[IntakeOutcome] = []
        failures: list[tuple[str, Exception]] = []
        for notification in notifications:
            try:
                outcome = self.handle_one(notification)
            except ObjectNotFoundError as exc:
                Log.warning(f"Skipping {notification.key}: {exc}")
                continue
            except (IntakeError, StorageError, DatabaseError, EventPublishError) as exc:
                Log.error(f"Error processing document {notification.key}: {exc}")
                failures.append((notification.key, exc))
                continue
            outcomes.append(outcome)

        if failures:
            raise IntakeBatchError(failures)
        return outcomes

    def handle_one(self, notification: ObjectNotification) -> IntakeOutcome:
        Log.info(
            f"Processing file: {notification.key} ({notification.size_bytes} bytes) "
            f"from bucket: {notification.bucket}"
        )
        decision = self._validator.validate(notification)
        bucket, key = self._dispositions.apply(decision)
        outcome = IntakeOutcome(decision=decision, location_bucket=bucket, location_key=key)

        self._record_repo.save(ValidationRecord.from_outcome(outcome))
        self._publisher.publish(
            build_document_event(
                outcome,
                source=self._settings.event_source,
                flagged_by=self._settings.validated_by,
            )
        )
        Log.info(f"Document {notification.key} {decision.result.status}")
        return outcome


def build_intake_handler(settings: Settings) -> IntakeHandler:
    """Build an IntakeHandler with all required adapters."""
    store = ObjectStoreFactory.create(settings)
    validator = IntakeValidator(
        store,
        max_size_bytes=settings.max_file_size_bytes,
        large_file_threshold_bytes=settings.large_file_threshold_bytes,
    )
    dispositions = DispositionApplier(
        store,
        quarantine_bucket=settings.quarantine_bucket,
        quarantine_prefix=settings.quarantine_prefix,
        validated_by=settings.validated_by,
        rejected_retention_days=settings.rejected_retention_days,
    )
    return IntakeHandler(
        validator=validator,
        dispositions=dispositions,
        record_repo=ValidationRecordRepository(),
        publisher=EventPublisherFactory.create(settings),
        settings=settings,
    )
