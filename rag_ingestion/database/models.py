from dataclasses import dataclass
from datetime import datetime

from rag_ingestion.intake.models import IntakeOutcome, Rejected, Validated


@dataclass
class ValidationRecord:
    """Represents a row from the document_validations table."""

    document_id: str
    bucket: str
    object_key: str
    owner_identity: str
    classification: str
    size_bytes: int
    decided_at: datetime
    reason_code: str | None = None
    reason: str | None = None
    content_type: str | None = None
    risk_score: int | None = None

    @classmethod
    def from_outcome(cls, outcome: IntakeOutcome) -> "ValidationRecord":
        """Flatten an intake outcome; bucket/key are the object's final location."""
        doc = outcome.decision.document
        result = outcome.decision.result
        common = {
            "document_id": doc.document_id,
            "bucket": outcome.location_bucket,
            "object_key": outcome.location_key,
            "owner_identity": doc.owner_identity,
            "classification": result.status,
            "size_bytes": doc.size_bytes,
        }
        if isinstance(result, Validated):
            return cls(
                **common,
                decided_at=result.validated_at,
                content_type=result.content_type,
            )
        if isinstance(result, Rejected):
            return cls(
                **common,
                decided_at=result.rejected_at,
                reason_code=result.reason_code.value,
                reason=result.reason,
                content_type=doc.declared_content_type,
            )
        return cls(
            **common,
            decided_at=result.quarantined_at,
            reason_code=result.reason_code.value,
            reason=result.reason,
            content_type=doc.declared_content_type,
            risk_score=result.risk_score,
        )
