from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from rag_ingestion.intake.content_types import is_textual
from rag_ingestion.intake.models import EscalationLevel, QuarantineCode, RejectionCode


@dataclass(frozen=True)
class Rejection:
    code: RejectionCode
    reason: str


@dataclass(frozen=True)
class Quarantine:
    code: QuarantineCode
    reason: str
    escalation: EscalationLevel
    security_flags: tuple[str, ...]
    markers: tuple[str, ...]


Verdict = Rejection | Quarantine


@dataclass(slots=True)
class IntakeContext:
    key: str
    size_bytes: int
    declared_content_type: str | None
    body: bytes | None
    effective_content_type: str = ""
    applied_filters: list[str] = field(default_factory=list)
    _text: str | None = None

    def text(self) -> str | None:
        """Decoded body for textual content types, None for binary ones."""
        if self.body is None or not is_textual(self.effective_content_type):
            return None
        if self._text is None:
            self._text = self.body.decode("utf-8", errors="replace")
        return self._text


class IntakeFilter(ABC):
    name: ClassVar[str]

    @abstractmethod
    def run(self, context: IntakeContext) -> Verdict | None:
        """Return a verdict to stop the chain, or None to pass."""
        raise NotImplementedError
