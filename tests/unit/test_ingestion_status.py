from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from rag_ingestion.database.exceptions import RecordPersistenceError
from rag_ingestion.database.models import ValidationRecord
from rag_ingestion.intake.status import (
    IngestionStatusService,
    get_document_status,
    status_payload,
)
from rag_ingestion.tracking.factory import map_service_response
from rag_ingestion.tracking.models import ErrorType, Stage, StageState

DECIDED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _make_record(classification: str, **overrides: object) -> ValidationRecord:
    fields: dict = {
        "document_id": "doc-1",
        "bucket": "uploads-bucket",
        "object_key": "uploads/user-1/report.pdf",
        "owner_identity": "user-1",
        "classification": classification,
        "size_bytes": 2048,
        "decided_at": DECIDED_AT,
        "content_type": "application/pdf",
    }
    fields.update(overrides)
    return ValidationRecord(**fields)


def _make_service(record: ValidationRecord | None) -> tuple[IngestionStatusService, MagicMock]:
    repo = MagicMock()
    repo.find_by_document_id.return_value = record
    return IngestionStatusService(repo), repo


class TestStatusPayload:
    def test_validated_document(self) -> None:
        payload = status_payload("doc-1", _make_record("validated"))

        assert payload == {
            "documentId": "doc-1",
            "status": "validated",
            "location": "documents",
            "bucket": "uploads-bucket",
            "objectKey": "uploads/user-1/report.pdf",
            "fileName": "report.pdf",
            "fileSize": 2048,
            "contentType": "application/pdf",
            "userIdentityId": "user-1",
            "validatedAt": "2024-05-01T12:00:00Z",
        }

    def test_rejected_document_stays_in_documents(self) -> None:
        record = _make_record(
            "rejected", reason_code="UNSUPPORTED_TYPE", reason="MIME type not allowed"
        )

        payload = status_payload("doc-1", record)

        assert payload["location"] == "documents"
        assert payload["rejectedAt"] == "2024-05-01T12:00:00Z"
        assert payload["errorMessage"] == "MIME type not allowed"

    def test_quarantined_document_is_in_quarantine(self) -> None:
        record = _make_record(
            "quarantined",
            bucket="quarantine-bucket",
            object_key="quarantine/2024-05-01T12:00:00Z/uploads/user-1/report.pdf",
            reason="Potentially malicious content detected",
            risk_score=80,
        )

        payload = status_payload("doc-1", record)

        assert payload["location"] == "quarantine"
        assert payload["fileName"] == "report.pdf"
        assert payload["quarantinedAt"] == "2024-05-01T12:00:00Z"
        assert payload["riskScore"] == 80

    def test_unknown_document(self) -> None:
        assert status_payload("missing", None) == {
            "documentId": "missing",
            "status": "not_found",
            "location": "unknown",
        }


class TestIngestionStatusService:
    def test_looks_up_record_and_times_lookup(self) -> None:
        service, repo = _make_service(_make_record("validated"))

        payload = service.get_document_status("doc-1")

        repo.find_by_document_id.assert_called_once_with("doc-1")
        assert payload["status"] == "validated"
        assert isinstance(payload["executionTimeMs"], int)
        assert payload["executionTimeMs"] >= 0

    def test_repository_error_propagates(self) -> None:
        service, repo = _make_service(None)
        repo.find_by_document_id.side_effect = RecordPersistenceError("db down")

        with pytest.raises(RecordPersistenceError):
            service.get_document_status("doc-1")

    def test_module_function_uses_default_repository(self) -> None:
        with patch("rag_ingestion.intake.status.ValidationRecordRepository") as mock_repo:
            mock_repo.return_value.find_by_document_id.return_value = None
            payload = get_document_status("doc-1")

        mock_repo.assert_called_once_with()
        assert payload["status"] == "not_found"


class TestStatusFeedsIngestionStage:
    @pytest.mark.parametrize(
        ("classification", "expected"),
        [
            ("validated", StageState.COMPLETED),
            ("rejected", StageState.FAILED),
            ("quarantined", StageState.FAILED),
        ],
    )
    def test_payload_maps_through_ingestion_adapter(
        self, classification: str, expected: StageState
    ) -> None:
        service, _repo = _make_service(_make_record(classification, reason="why"))

        status = map_service_response(Stage.INGESTION, service.get_document_status("doc-1"))

        assert status.status is expected
        assert status.timestamp == "2024-05-01T12:00:00Z"
        assert status.metadata["fileName"] == "report.pdf"

    def test_unknown_document_maps_to_pending_not_found(self) -> None:
        service, _repo = _make_service(None)

        status = map_service_response(Stage.INGESTION, service.get_document_status("missing"))

        assert status.status is StageState.PENDING
        assert status.metadata["errorType"] == ErrorType.NOT_FOUND.value
