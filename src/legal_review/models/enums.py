"""Enumerations for the Legal Review pipeline."""

from enum import Enum
from typing import Union


class ClauseType(Enum):
    """Categories of clauses detected in legal documents."""
    INDEMNIFICATION = "indemnification"
    TERMINATION = "termination"
    LIABILITY = "liability"
    INTELLECTUAL_PROPERTY = "intellectual_property"
    PAYMENT_TERMS = "payment_terms"
    GOVERNING_LAW = "governing_law"
    PERFORMANCE = "performance"
    DISPUTE_RESOLUTION = "dispute_resolution"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Human-readable name, e.g. ``Intellectual Property``."""
        return self.value.replace("_", " ").title()

    @classmethod
    def parse(cls, value: Union[str, "ClauseType"]) -> "ClauseType":
        """Resolve an enum value, name or display label to a ClauseType."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace(" ", "_").replace("-", "_")
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown clause type: {value!r}")


class RiskLevel(Enum):
    """
    Canonical three-level risk ordinal: Safe < Medium < High.

    ``low`` is accepted as an alias of ``safe`` so that every surface
    normalizes to the same scale.
    """
    SAFE = "safe"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RISK_RANKS[self]

    @property
    def label(self) -> str:
        return self.value.title()

    @classmethod
    def normalize(cls, value: Union[str, "RiskLevel"]) -> "RiskLevel":
        """Map any risk vocabulary used by upstream tools onto the ordinal."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        if key == "low":
            return cls.SAFE
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown risk level: {value!r}") from None

    @classmethod
    def from_score(cls, score: int, medium_at: int = 40, high_at: int = 70) -> "RiskLevel":
        if score >= high_at:
            return cls.HIGH
        if score >= medium_at:
            return cls.MEDIUM
        return cls.SAFE

    def __lt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_RANKS = {RiskLevel.SAFE: 0, RiskLevel.MEDIUM: 1, RiskLevel.HIGH: 2}


class SuggestionStatus(Enum):
    """Review lifecycle states of a rewrite suggestion."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    EDITED = "edited"

    @property
    def is_terminal(self) -> bool:
        return self is not SuggestionStatus.PENDING

    @property
    def is_applied(self) -> bool:
        """Whether a suggestion in this state flows into composition."""
        return self in (SuggestionStatus.ACCEPTED, SuggestionStatus.EDITED)


class RunStatus(Enum):
    """Outcome of a single analysis run."""
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    FAILED = "failed"


class OutcomeStatus(Enum):
    """Per-clause processing outcome within a run."""
    OK = "ok"
    DEGRADED = "degraded"  # a capability call timed out
    FAILED = "failed"  # a capability call raised


class Complexity(Enum):
    """Complexity band of a clause's original wording."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
