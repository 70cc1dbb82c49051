import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from rag_ingestion.intake.dispositions import DispositionApplier
from rag_ingestion.intake.models import (
    DocumentRecord,
    EscalationLevel,
    IntakeDecision,
    Priority,
    QuarantineCode,
    Quarantined,
    Rejected,
    RejectionCode,
    RoutingInfo,
    Validated,
)
from rag_ingestion.storage.exceptions import ObjectNotFoundError
from rag_ingestion.storage.local_adapter import LocalObjectStore

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
BUCKET = "uploads-bucket"
KEY = "uploads/user-1/doc-1"


def _make_store(tmp_path: Path) -> LocalObjectStore:
    store = LocalObjectStore(tmp_path)
    store.put_object(BUCKET, KEY, b"hello", content_type="text/plain")
    return store


def _make_applier(store: LocalObjectStore) -> DispositionApplier:
    return DispositionApplier(
        store,
        quarantine_bucket="quarantine-bucket",
        quarantine_prefix="quarantine",
        validated_by="validation-handler",
        rejected_retention_days=30,
        clock=lambda: FIXED_NOW,
    )


def _decision(result) -> IntakeDecision:  # type: ignore[no-untyped-def]
    return IntakeDecision(
        document=DocumentRecord.from_object(BUCKET, KEY, 5, "text/plain"),
        result=result,
    )


def _read_tags(root: Path, bucket: str, key: str) -> dict[str, str]:
    return json.loads((root / ".meta" / bucket / f"{key}.json").read_text())["tags"]


class TestApprove:
    def test_tags_object_in_place(self, tmp_path: Path) -> None:
        store = _make_store(tmp_path)
        result = Validated(
            content_type="text/plain",
            size_bytes=5,
            validated_at=FIXED_NOW,
            routing=RoutingInfo(Priority.NORMAL, False, False, "text"),
        )

        location = _make_applier(store).apply(_decision(result))

        assert location == (BUCKET, KEY)
        tags = _read_tags(tmp_path, BUCKET, KEY)
        assert tags["validation-status"] == "approved"
        assert tags["download-approved"] == "true"
        assert tags["validated-at"] == "2024-05-01T12:00:00Z"
        assert tags["validated-by"] == "validation-handler"


class TestQuarantine:
    def _result(self) -> Quarantined:
        return Quarantined(
            reason_code=QuarantineCode.SUSPICIOUS_CONTENT,
            reason="Potentially malicious content detected",
            risk_score=80,
            quarantined_at=FIXED_NOW,
            escalation_level=EscalationLevel.HIGH,
        )

    def test_moves_object_to_quarantine_bucket(self, tmp_path: Path) -> None:
        store = _make_store(tmp_path)

        bucket, key = _make_applier(store).apply(_decision(self._result()))

        assert bucket == "quarantine-bucket"
        assert key == f"quarantine/2024-05-01T12:00:00Z/{KEY}"
        moved = store.get_object(bucket, key)
        assert moved.body == b"hello"
        assert moved.metadata == {
            "quarantine-reason": "Potentially malicious content detected",
            "quarantine-timestamp": "2024-05-01T12:00:00Z",
            "original-bucket": BUCKET,
            "original-key": KEY,
        }

    def test_tags_quarantined_copy(self, tmp_path: Path) -> None:
        store = _make_store(tmp_path)

        bucket, key = _make_applier(store).apply(_decision(self._result()))

        assert _read_tags(tmp_path, bucket, key) == {
            "validation-status": "quarantined",
            "download-approved": "false",
            "validated-at": "2024-05-01T12:00:00Z",
            "validated-by": "validation-handler",
            "validation-comments": (
                "SUSPICIOUS_CONTENT: Potentially malicious content detected"
            ),
        }

    def test_deletes_source(self, tmp_path: Path) -> None:
        store = _make_store(tmp_path)

        _make_applier(store).apply(_decision(self._result()))

        with pytest.raises(ObjectNotFoundError):
            store.get_object(BUCKET, KEY)


class TestRejectRetention:
    def test_tags_with_retain_until(self, tmp_path: Path) -> None:
        store = _make_store(tmp_path)
        result = Rejected(
            reason_code=RejectionCode.UNSUPPORTED_TYPE,
            reason="MIME type application/x-msdownload is not allowed.",
            rejected_at=FIXED_NOW,
        )

        location = _make_applier(store).apply(_decision(result))

        assert location == (BUCKET, KEY)
        tags = _read_tags(tmp_path, BUCKET, KEY)
        assert tags["validation-status"] == "rejected"
        assert tags["download-approved"] == "false"
        assert tags["retain-until"] == "2024-05-31"
        assert tags["validation-comments"].startswith("UNSUPPORTED_TYPE: ")
