from abc import ABC, abstractmethod

from rag_ingestion.intake.models import EscalationLevel


class BaseRiskScorer(ABC):
    """Contract for risk scoring of quarantined documents."""

    @abstractmethod
    def score(self, escalation: EscalationLevel, markers: tuple[str, ...]) -> int:
        """Return a risk score in [0, 100]. Must be deterministic."""


class DefaultRiskScorer(BaseRiskScorer):
    """Escalation base score plus a fixed increment per extra distinct marker."""

    BASE_SCORES: dict[EscalationLevel, int] = {
        EscalationLevel.HIGH: 80,
        EscalationLevel.MEDIUM: 50,
        EscalationLevel.LOW: 20,
    }
    PER_EXTRA_MARKER = 5

    def score(self, escalation: EscalationLevel, markers: tuple[str, ...]) -> int:
        extra = max(0, len(set(markers)) - 1)
        raw = self.BASE_SCORES[escalation] + extra * self.PER_EXTRA_MARKER
        return max(0, min(100, raw))
