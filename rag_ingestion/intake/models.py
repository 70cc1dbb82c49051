import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar

UPLOADS_PREFIX = "uploads"
UNKNOWN_OWNER = "unknown"


class RejectionCode(str, Enum):
    INVALID_FORMAT = "INVALID_FORMAT"
    TOO_LARGE = "TOO_LARGE"
    MALWARE_DETECTED = "MALWARE_DETECTED"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"


class QuarantineCode(str, Enum):
    SUSPICIOUS_CONTENT = "SUSPICIOUS_CONTENT"
    MANUAL_REVIEW_REQUIRED = "MANUAL_REVIEW_REQUIRED"
    POLICY_VIOLATION = "POLICY_VIOLATION"


class EscalationLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Priority(str, Enum):
    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"


@dataclass(frozen=True)
class ObjectNotification:
    """A single "object created" record from the object store."""

    bucket: str
    key: str
    size_bytes: int


@dataclass(frozen=True)
class DocumentRecord:
    """Identity and upload attributes of a stored document."""

    document_id: str
    bucket: str
    key: str
    declared_content_type: str | None
    size_bytes: int
    owner_identity: str

    @classmethod
    def from_object(
        cls,
        bucket: str,
        key: str,
        size_bytes: int,
        declared_content_type: str | None,
    ) -> "DocumentRecord":
        """Derive identity from an uploads/{owner}/{documentId} key.

        Keys outside that layout get a stable UUIDv5 of the object URL.
        """
        parts = key.split("/")
        if len(parts) == 3 and parts[0] == UPLOADS_PREFIX and all(parts):
            owner, document_id = parts[1], parts[2]
        else:
            owner = UNKNOWN_OWNER
            document_id = str(uuid.uuid5(uuid.NAMESPACE_URL, f"s3://{bucket}/{key}"))
        return cls(
            document_id=document_id,
            bucket=bucket,
            key=key,
            declared_content_type=declared_content_type,
            size_bytes=size_bytes,
            owner_identity=owner,
        )

    @property
    def file_name(self) -> str:
        return self.key.rsplit("/", 1)[-1] or self.key


@dataclass(frozen=True)
class RoutingInfo:
    """Downstream routing hints for a validated document."""

    priority: Priority
    has_images: bool
    requires_ocr: bool
    document_type: str


@dataclass(frozen=True)
class Validated:
    status: ClassVar[str] = "validated"

    content_type: str
    size_bytes: int
    validated_at: datetime
    routing: RoutingInfo
    applied_filters: tuple[str, ...] = ()


@dataclass(frozen=True)
class Rejected:
    status: ClassVar[str] = "rejected"

    reason_code: RejectionCode
    reason: str
    rejected_at: datetime
    applied_filters: tuple[str, ...] = ()


@dataclass(frozen=True)
class Quarantined:
    status: ClassVar[str] = "quarantined"

    reason_code: QuarantineCode
    reason: str
    risk_score: int
    quarantined_at: datetime
    escalation_level: EscalationLevel
    security_flags: tuple[str, ...] = ()
    applied_filters: tuple[str, ...] = ()
    review_required: bool = True


ClassificationResult = Validated | Rejected | Quarantined


@dataclass(frozen=True)
class IntakeDecision:
    """Classification of one stored object together with its identity."""

    document: DocumentRecord
    result: ClassificationResult


@dataclass(frozen=True)
class IntakeOutcome:
    """Final state of one processed notification: decision plus object location."""

    decision: IntakeDecision
    location_bucket: str
    location_key: str


def iso_utc(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with a trailing Z."""
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
