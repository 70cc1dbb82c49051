from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, ClassVar

from rag_ingestion.tracking.exceptions import StatusMappingError
from rag_ingestion.tracking.models import ErrorType, Stage, StageState, StageStatus


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class BaseStageAdapter(ABC):
    """Maps one provider's status response onto a canonical StageStatus.

    Each provider declares where its id and status token live and a fixed
    table from its (lower-cased) vocabulary to StageState.
    """

    stage: ClassVar[Stage]
    id_field: ClassVar[str]
    status_field: ClassVar[str]
    STATUS_TABLE: ClassVar[dict[str, StageState]]
    NOT_FOUND_TOKENS: ClassVar[frozenset[str]] = frozenset()

    def map(self, payload: dict[str, Any], document_id: str = "") -> StageStatus:
        """Translate a raw provider payload.

        Raises:
            StatusMappingError: if the id or status token is missing, or the
                token is not in the provider's table.
        """
        resolved_id = str(payload.get(self.id_field) or document_id)
        if not resolved_id:
            raise StatusMappingError(f"{self.stage.value} response has no '{self.id_field}'")
        token = payload.get(self.status_field)
        if not isinstance(token, str) or not token.strip():
            raise StatusMappingError(
                f"{self.stage.value} response has no '{self.status_field}' token"
            )
        normalized = token.strip().lower()
        state = self.STATUS_TABLE.get(normalized)
        if state is None:
            raise StatusMappingError(
                f"{self.stage.value} status '{token}' is not one of {sorted(self.STATUS_TABLE)}"
            )

        metadata = {key: value for key, value in self.metadata(payload).items() if value is not None}
        metadata["providerStatus"] = token
        if normalized in self.NOT_FOUND_TOKENS:
            metadata["errorType"] = ErrorType.NOT_FOUND.value

        return StageStatus(
            document_id=resolved_id,
            stage=self.stage,
            status=state,
            timestamp=self.timestamp(payload) or utc_timestamp(),
            metadata=metadata,
        )

    @abstractmethod
    def metadata(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Provider fields renamed to canonical metadata keys."""

    @abstractmethod
    def timestamp(self, payload: dict[str, Any]) -> str | None:
        """The most relevant timestamp the provider reports, if any."""
