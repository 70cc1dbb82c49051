from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from rag_ingestion.intake.models import (
    IntakeDecision,
    Quarantined,
    Rejected,
    Validated,
    iso_utc,
)
from rag_ingestion.logging.logger import Log
from rag_ingestion.storage.base import BaseObjectStore


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DispositionApplier:
    """Applies the storage side effect that matches a classification.

    Validated objects are tagged in place. Quarantined objects are copied to
    the quarantine bucket and removed from the source. Rejected objects stay
    where they are, tagged with a retain-until date for lifecycle cleanup.
    """

    def __init__(
        self,
        store: BaseObjectStore,
        *,
        quarantine_bucket: str,
        quarantine_prefix: str,
        validated_by: str,
        rejected_retention_days: int,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._quarantine_bucket = quarantine_bucket
        self._quarantine_prefix = quarantine_prefix.strip("/")
        self._validated_by = validated_by
        self._rejected_retention = timedelta(days=rejected_retention_days)
        self._clock = clock

    def apply(self, decision: IntakeDecision) -> tuple[str, str]:
        """Apply the side effect and return the object's final (bucket, key)."""
        result = decision.result
        if isinstance(result, Validated):
            return self._approve(decision, result)
        if isinstance(result, Quarantined):
            return self._quarantine(decision, result)
        return self._retain_rejected(decision, result)

    def _approve(self, decision: IntakeDecision, result: Validated) -> tuple[str, str]:
        doc = decision.document
        self._store.put_tags(
            doc.bucket,
            doc.key,
            {
                "validation-status": "approved",
                "download-approved": "true",
                "validated-at": iso_utc(result.validated_at),
                "validated-by": self._validated_by,
                "validation-comments": (
                    f"Validated as {result.content_type} "
                    f"(priority {result.routing.priority.value})"
                ),
            },
        )
        return doc.bucket, doc.key

    def _quarantine(self, decision: IntakeDecision, result: Quarantined) -> tuple[str, str]:
        doc = decision.document
        timestamp = iso_utc(result.quarantined_at)
        quarantine_key = f"{self._quarantine_prefix}/{timestamp}/{doc.key}"
        self._store.copy_object(
            source_bucket=doc.bucket,
            source_key=doc.key,
            dest_bucket=self._quarantine_bucket,
            dest_key=quarantine_key,
            metadata={
                "quarantine-reason": result.reason,
                "quarantine-timestamp": timestamp,
                "original-bucket": doc.bucket,
                "original-key": doc.key,
            },
        )
        self._store.put_tags(
            self._quarantine_bucket,
            quarantine_key,
            {
                "validation-status": "quarantined",
                "download-approved": "false",
                "validated-at": timestamp,
                "validated-by": self._validated_by,
                "validation-comments": f"{result.reason_code.value}: {result.reason}",
            },
        )
        self._store.delete_object(doc.bucket, doc.key)
        Log.warning(
            f"Quarantined {doc.bucket}/{doc.key} -> "
            f"{self._quarantine_bucket}/{quarantine_key}: {result.reason}"
        )
        return self._quarantine_bucket, quarantine_key

    def _retain_rejected(self, decision: IntakeDecision, result: Rejected) -> tuple[str, str]:
        doc = decision.document
        retain_until = self._clock() + self._rejected_retention
        self._store.put_tags(
            doc.bucket,
            doc.key,
            {
                "validation-status": "rejected",
                "download-approved": "false",
                "validated-at": iso_utc(result.rejected_at),
                "validated-by": self._validated_by,
                "validation-comments": f"{result.reason_code.value}: {result.reason}",
                "retain-until": retain_until.date().isoformat(),
            },
        )
        Log.info(f"Rejected {doc.bucket}/{doc.key} retained until {retain_until.date()}")
        return doc.bucket, doc.key
