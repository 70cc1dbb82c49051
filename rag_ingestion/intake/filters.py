import json

from rag_ingestion.intake import heuristics
from rag_ingestion.intake.content_types import (
    ALLOWED_CONTENT_TYPES,
    JSON,
    is_allowed,
    resolve_content_type,
)
from rag_ingestion.intake.models import EscalationLevel, QuarantineCode, RejectionCode
from rag_ingestion.intake.pipeline import (
    IntakeContext,
    IntakeFilter,
    Quarantine,
    Rejection,
    Verdict,
)


class SizeFilter(IntakeFilter):
    name = "file-size-check"

    def __init__(self, max_size_bytes: int) -> None:
        self._max_size_bytes = max_size_bytes

    def run(self, context: IntakeContext) -> Verdict | None:
        if context.size_bytes > self._max_size_bytes:
            return Rejection(
                RejectionCode.TOO_LARGE,
                f"File size {context.size_bytes} bytes exceeds maximum allowed size "
                f"of {self._max_size_bytes} bytes",
            )
        return None


class ContentTypeFilter(IntakeFilter):
    name = "mime-type-check"

    def run(self, context: IntakeContext) -> Verdict | None:
        context.effective_content_type = resolve_content_type(
            context.declared_content_type, context.key
        )
        if not is_allowed(context.effective_content_type):
            return Rejection(
                RejectionCode.UNSUPPORTED_TYPE,
                f"MIME type {context.effective_content_type} is not allowed. "
                f"Allowed types: {', '.join(sorted(ALLOWED_CONTENT_TYPES))}",
            )
        return None


class PresenceFilter(IntakeFilter):
    name = "content-presence-check"

    def run(self, context: IntakeContext) -> Verdict | None:
        if not context.body:
            return Rejection(RejectionCode.INVALID_FORMAT, "Document has no content")
        return None


class MalwareSignatureFilter(IntakeFilter):
    name = "malware-signature-check"

    def run(self, context: IntakeContext) -> Verdict | None:
        if context.body and heuristics.contains_malware_signature(context.body):
            return Rejection(
                RejectionCode.MALWARE_DETECTED, "Known malware signature detected"
            )
        return None


class ActiveScriptFilter(IntakeFilter):
    name = "active-script-check"

    def run(self, context: IntakeContext) -> Verdict | None:
        text = context.text()
        if text is None:
            return None
        markers = heuristics.find_script_markers(text)
        if not markers:
            return None
        return Quarantine(
            code=QuarantineCode.SUSPICIOUS_CONTENT,
            reason="Potentially malicious content detected",
            escalation=EscalationLevel.HIGH,
            security_flags=("malicious-script-detected",),
            markers=markers,
        )


class SuspiciousKeywordFilter(IntakeFilter):
    name = "suspicious-keyword-check"

    def run(self, context: IntakeContext) -> Verdict | None:
        text = context.text()
        if text is None:
            return None
        malware = heuristics.find_malware_keywords(text)
        if malware:
            return Quarantine(
                code=QuarantineCode.MANUAL_REVIEW_REQUIRED,
                reason="Suspicious content requires review",
                escalation=EscalationLevel.MEDIUM,
                security_flags=("suspicious-keywords",),
                markers=malware,
            )
        policy = heuristics.find_policy_keywords(text)
        if policy:
            return Quarantine(
                code=QuarantineCode.POLICY_VIOLATION,
                reason="Content may violate document policy",
                escalation=EscalationLevel.MEDIUM,
                security_flags=("policy-keywords",),
                markers=policy,
            )
        return None


class StructureFilter(IntakeFilter):
    name = "structure-validation"

    def run(self, context: IntakeContext) -> Verdict | None:
        if context.effective_content_type != JSON:
            return None
        try:
            json.loads((context.body or b"").decode("utf-8"))
        except UnicodeDecodeError:
            return Rejection(
                RejectionCode.INVALID_FORMAT,
                "Invalid document structure: body is not valid UTF-8",
            )
        except json.JSONDecodeError as exc:
            return Rejection(
                RejectionCode.INVALID_FORMAT, f"Invalid document structure: {exc.msg}"
            )
        return None


def default_filters(max_size_bytes: int) -> list[IntakeFilter]:
    """The intake chain in evaluation order."""
    return [
        SizeFilter(max_size_bytes),
        ContentTypeFilter(),
        PresenceFilter(),
        MalwareSignatureFilter(),
        ActiveScriptFilter(),
        SuspiciousKeywordFilter(),
        StructureFilter(),
    ]
