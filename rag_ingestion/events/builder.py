from rag_ingestion.events.models import (
    DETAIL_TYPE_QUARANTINED,
    DETAIL_TYPE_REJECTED,
    DETAIL_TYPE_VALIDATED,
    DocumentEvent,
)
from rag_ingestion.intake.content_types import OCTET_STREAM
from rag_ingestion.intake.models import (
    IntakeOutcome,
    Rejected,
    Validated,
    iso_utc,
)


def build_document_event(outcome: IntakeOutcome, *, source: str, flagged_by: str) -> DocumentEvent:
    """Build the lifecycle event announcing an intake outcome."""
    doc = outcome.decision.document
    result = outcome.decision.result
    base = {
        "documentId": doc.document_id,
        "bucketName": outcome.location_bucket,
        "objectKey": outcome.location_key,
    }

    if isinstance(result, Validated):
        detail = {
            **base,
            "contentType": result.content_type,
            "fileSize": result.size_bytes,
            "validatedAt": iso_utc(result.validated_at),
            "metadata": {
                "originalFileName": doc.file_name,
                "uploadedBy": doc.owner_identity,
                "priority": result.routing.priority.value,
                "documentType": result.routing.document_type,
                "hasImages": result.routing.has_images,
                "requiresOcr": result.routing.requires_ocr,
            },
        }
        return DocumentEvent(DETAIL_TYPE_VALIDATED, source, detail)

    if isinstance(result, Rejected):
        detail = {
            **base,
            "rejectionReason": result.reason,
            "rejectionCode": result.reason_code.value,
            "rejectedAt": iso_utc(result.rejected_at),
            "metadata": {
                "originalFileName": doc.file_name,
                "attemptedContentType": doc.declared_content_type or OCTET_STREAM,
                "fileSize": doc.size_bytes,
            },
        }
        return DocumentEvent(DETAIL_TYPE_REJECTED, source, detail)

    detail = {
        **base,
        "quarantineReason": result.reason,
        "quarantineCode": result.reason_code.value,
        "quarantinedAt": iso_utc(result.quarantined_at),
        "reviewRequired": result.review_required,
        "metadata": {
            "originalFileName": doc.file_name,
            "riskScore": result.risk_score,
            "escalationLevel": result.escalation_level.value,
            "securityFlags": list(result.security_flags),
            "flaggedBy": flagged_by,
        },
    }
    return DocumentEvent(DETAIL_TYPE_QUARANTINED, source, detail)
