import time
from typing import Any

from rag_ingestion.database.models import ValidationRecord
from rag_ingestion.database.repositories.validation_record_repository import (
    ValidationRecordRepository,
)
from rag_ingestion.intake.models import iso_utc
from rag_ingestion.logging.logger import Log

_LOCATIONS = {
    "validated": "documents",
    "rejected": "documents",
    "quarantined": "quarantine",
}

_DECIDED_AT_FIELDS = {
    "validated": "validatedAt",
    "rejected": "rejectedAt",
    "quarantined": "quarantinedAt",
}


def _file_name(object_key: str) -> str:
    return object_key.rsplit("/", 1)[-1] or object_key


def status_payload(document_id: str, record: ValidationRecord | None) -> dict[str, Any]:
    """Render a validation record in the ingestion provider's JSON shape."""
    if record is None:
        return {"documentId": document_id, "status": "not_found", "location": "unknown"}

    payload: dict[str, Any] = {
        "documentId": record.document_id,
        "status": record.classification,
        "location": _LOCATIONS.get(record.classification, "unknown"),
        "bucket": record.bucket,
        "objectKey": record.object_key,
        "fileName": _file_name(record.object_key),
        "fileSize": record.size_bytes,
        "contentType": record.content_type,
        "userIdentityId": record.owner_identity,
    }
    decided_field = _DECIDED_AT_FIELDS.get(record.classification)
    if decided_field is not None:
        payload[decided_field] = iso_utc(record.decided_at)
    if record.reason is not None:
        payload["errorMessage"] = record.reason
    if record.risk_score is not None:
        payload["riskScore"] = record.risk_score
    return payload


class IngestionStatusService:
    """Answers ingestion status lookups from stored validation records."""

    def __init__(self, record_repo: ValidationRecordRepository) -> None:
        self._record_repo = record_repo

    def get_document_status(self, document_id: str) -> dict[str, Any]:
        """Return the ingestion status JSON for one document.

        Raises:
            RecordPersistenceError: if the record store cannot be read.
        """
        started = time.monotonic()
        record = self._record_repo.find_by_document_id(document_id)
        payload = status_payload(document_id, record)
        payload["executionTimeMs"] = int((time.monotonic() - started) * 1000)
        Log.debug(f"Status lookup for {document_id}: {payload['status']}")
        return payload


def get_document_status(
    document_id: str, record_repo: ValidationRecordRepository | None = None
) -> dict[str, Any]:
    """Look up a document's ingestion status using the default repository."""
    service = IngestionStatusService(record_repo or ValidationRecordRepository())
    return service.get_document_status(document_id)
