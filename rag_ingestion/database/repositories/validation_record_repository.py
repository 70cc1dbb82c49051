import psycopg
from psycopg.rows import dict_row

from rag_ingestion.database.connection import get_connection
from rag_ingestion.database.exceptions import RecordPersistenceError
from rag_ingestion.database.models import ValidationRecord

_COLUMNS = (
    "document_id, bucket, object_key, owner_identity, classification, "
    "reason_code, reason, content_type, size_bytes, risk_score, decided_at"
)


class ValidationRecordRepository:
    """Database operations for the document_validations table."""

    def save(self, record: ValidationRecord) -> None:
        """Insert or replace the classification of a document.

        A document holds at most one classification; redelivered
        notifications overwrite the previous row.

        Raises:
            RecordPersistenceError: if the database rejects the write or is unreachable.
        """
        try:
            with get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO document_validations ({_COLUMNS})
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        ON CONFLICT (document_id) DO UPDATE
                        SET bucket = EXCLUDED.bucket,
                            object_key = EXCLUDED.object_key,
                            owner_identity = EXCLUDED.owner_identity,
                            classification = EXCLUDED.classification,
                            reason_code = EXCLUDED.reason_code,
                            reason = EXCLUDED.reason,
                            content_type = EXCLUDED.content_type,
                            size_bytes = EXCLUDED.size_bytes,
                            risk_score = EXCLUDED.risk_score,
                            decided_at = EXCLUDED.decided_at,
                            updated_at = NOW()
                        """,
                        (
                            record.document_id,
                            record.bucket,
                            record.object_key,
                            record.owner_identity,
                            record.classification,
                            record.reason_code,
                            record.reason,
                            record.content_type,
                            record.size_bytes,
                            record.risk_score,
                            record.decided_at,
                        ),
                    )
                conn.commit()
        except psycopg.Error as exc:
            raise RecordPersistenceError(
                f"Failed to save validation record {record.document_id}: {exc}"
            ) from exc

    def find_by_document_id(self, document_id: str) -> ValidationRecord | None:
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"SELECT {_COLUMNS} FROM document_validations WHERE document_id = %s",
                        (document_id,),
                    )
                    row = cur.fetchone()
        except psycopg.Error as exc:
            raise RecordPersistenceError(
                f"Failed to load validation record {document_id}: {exc}"
            ) from exc

        if row is None:
            return None
        return ValidationRecord(**row)
