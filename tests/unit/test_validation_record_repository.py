from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import psycopg
import pytest

from rag_ingestion.database.exceptions import RecordPersistenceError
from rag_ingestion.database.models import ValidationRecord
from rag_ingestion.database.repositories.validation_record_repository import (
    ValidationRecordRepository,
)

REPO_MODULE = "rag_ingestion.database.repositories.validation_record_repository"
DECIDED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _make_record() -> ValidationRecord:
    return ValidationRecord(
        document_id="doc-1",
        bucket="uploads-bucket",
        object_key="uploads/user-1/doc-1",
        owner_identity="user-1",
        classification="validated",
        size_bytes=2048,
        decided_at=DECIDED_AT,
        content_type="application/pdf",
    )


def _mock_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up a mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__enter__ = MagicMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__exit__ = MagicMock(return_value=False)
    mock_get_conn.return_value.__enter__ = MagicMock(return_value=mock_conn)
    mock_get_conn.return_value.__exit__ = MagicMock(return_value=False)
    return mock_conn, mock_cursor


class TestSave:
    @patch(f"{REPO_MODULE}.get_connection")
    def test_upserts_and_commits(self, mock_get_conn: MagicMock) -> None:
        mock_conn, mock_cursor = _mock_connection(mock_get_conn)

        ValidationRecordRepository().save(_make_record())

        sql, params = mock_cursor.execute.call_args.args
        assert "ON CONFLICT (document_id) DO UPDATE" in sql
        assert params[0] == "doc-1"
        mock_conn.commit.assert_called_once()

    @patch(f"{REPO_MODULE}.get_connection")
    def test_database_error_is_wrapped(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.OperationalError("connection refused")

        with pytest.raises(RecordPersistenceError, match="doc-1") as exc_info:
            ValidationRecordRepository().save(_make_record())

        assert isinstance(exc_info.value.__cause__, psycopg.OperationalError)

    @patch(f"{REPO_MODULE}.get_connection")
    def test_pool_error_is_wrapped(self, mock_get_conn: MagicMock) -> None:
        mock_get_conn.side_effect = psycopg.OperationalError("pool timeout")

        with pytest.raises(RecordPersistenceError):
            ValidationRecordRepository().save(_make_record())


class TestFindByDocumentId:
    @patch(f"{REPO_MODULE}.get_connection")
    def test_returns_record_when_found(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = {
            "document_id": "doc-1",
            "bucket": "uploads-bucket",
            "object_key": "uploads/user-1/doc-1",
            "owner_identity": "user-1",
            "classification": "validated",
            "reason_code": None,
            "reason": None,
            "content_type": "application/pdf",
            "size_bytes": 2048,
            "risk_score": None,
            "decided_at": DECIDED_AT,
        }

        result = ValidationRecordRepository().find_by_document_id("doc-1")

        assert result == _make_record()

    @patch(f"{REPO_MODULE}.get_connection")
    def test_returns_none_when_missing(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.fetchone.return_value = None

        assert ValidationRecordRepository().find_by_document_id("missing") is None

    @patch(f"{REPO_MODULE}.get_connection")
    def test_database_error_is_wrapped(self, mock_get_conn: MagicMock) -> None:
        _conn, mock_cursor = _mock_connection(mock_get_conn)
        mock_cursor.execute.side_effect = psycopg.OperationalError("server closed")

        with pytest.raises(RecordPersistenceError, match="missing"):
            ValidationRecordRepository().find_by_document_id("missing")
