from collections.abc import Callable
from datetime import datetime, timezone

from rag_ingestion.intake.exceptions import ObjectRetrievalError
from rag_ingestion.intake.filters import default_filters
from rag_ingestion.intake.models import (
    ClassificationResult,
    DocumentRecord,
    IntakeDecision,
    ObjectNotification,
    Quarantined,
    Rejected,
    Validated,
)
from rag_ingestion.intake.pipeline import IntakeContext, IntakeFilter, Rejection
from rag_ingestion.intake.routing import derive_routing
from rag_ingestion.intake.scoring import BaseRiskScorer, DefaultRiskScorer
from rag_ingestion.logging.logger import Log
from rag_ingestion.storage.base import BaseObjectStore
from rag_ingestion.storage.exceptions import StorageUnavailableError


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IntakeValidator:
    """Classifies stored objects as validated, rejected or quarantined.

    Filters run in order and the first verdict wins. Classification depends
    only on (key, size, declared content type, body); the clock is used for
    the timestamp fields alone.
    """

    def __init__(
        self,
        store: BaseObjectStore,
        *,
        max_size_bytes: int,
        large_file_threshold_bytes: int,
        scorer: BaseRiskScorer | None = None,
        filters: list[IntakeFilter] | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._max_size_bytes = max_size_bytes
        self._large_file_threshold_bytes = large_file_threshold_bytes
        self._scorer = scorer or DefaultRiskScorer()
        self._filters = filters if filters is not None else default_filters(max_size_bytes)
        self._clock = clock

    def validate(self, notification: ObjectNotification) -> IntakeDecision:
        """Fetch the notified object and classify it.

        Oversized objects are classified without being downloaded.

        Raises:
            ObjectNotFoundError: if the object no longer exists.
            ObjectRetrievalError: if the store cannot serve the object.
        """
        declared_content_type: str | None = None
        body: bytes | None = None
        if notification.size_bytes <= self._max_size_bytes:
            try:
                stored = self._store.get_object(notification.bucket, notification.key)
            except StorageUnavailableError as exc:
                raise ObjectRetrievalError(
                    f"Failed to retrieve document {notification.key}: {exc}"
                ) from exc
            declared_content_type = stored.content_type
            body = stored.body

        result = self.classify(
            key=notification.key,
            size_bytes=notification.size_bytes,
            declared_content_type=declared_content_type,
            body=body,
        )
        document = DocumentRecord.from_object(
            notification.bucket,
            notification.key,
            notification.size_bytes,
            declared_content_type,
        )
        Log.info(
            f"Classified {notification.bucket}/{notification.key} as {result.status} "
            f"(filters: {', '.join(result.applied_filters)})"
        )
        return IntakeDecision(document=document, result=result)

    def classify(
        self,
        *,
        key: str,
        size_bytes: int,
        declared_content_type: str | None,
        body: bytes | None,
    ) -> ClassificationResult:
        context = IntakeContext(
            key=key,
            size_bytes=size_bytes,
            declared_content_type=declared_content_type,
            body=body,
        )
        for intake_filter in self._filters:
            context.applied_filters.append(intake_filter.name)
            verdict = intake_filter.run(context)
            if verdict is None:
                continue
            applied = tuple(context.applied_filters)
            if isinstance(verdict, Rejection):
                return Rejected(
                    reason_code=verdict.code,
                    reason=verdict.reason,
                    rejected_at=self._clock(),
                    applied_filters=applied,
                )
            return Quarantined(
                reason_code=verdict.code,
                reason=verdict.reason,
                risk_score=self._scorer.score(verdict.escalation, verdict.markers),
                quarantined_at=self._clock(),
                escalation_level=verdict.escalation,
                security_flags=verdict.security_flags,
                applied_filters=applied,
            )

        return Validated(
            content_type=context.effective_content_type,
            size_bytes=size_bytes,
            validated_at=self._clock(),
            routing=derive_routing(
                context.effective_content_type,
                size_bytes,
                body or b"",
                self._large_file_threshold_bytes,
            ),
            applied_filters=tuple(context.applied_filters),
        )
