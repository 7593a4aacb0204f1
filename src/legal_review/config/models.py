"""Data models for configuration management."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PlainLanguageMapping:
    """
    Mapping from a legal phrase to its plain-English equivalent.

    ``variations`` lists other spellings of the same legal phrase that
    should be rewritten to ``plain_term`` as well.
    """
    id: str
    legal_term: str
    plain_term: str
    variations: List[str] = field(default_factory=list)
    description: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def matches(self, text: str) -> bool:
        """Check if text contains this legal phrase or a variation."""
        text_lower = text.lower()
        return any(term.lower() in text_lower for term in self.get_all_terms())

    def get_all_terms(self) -> List[str]:
        """Get all legal terms including variations."""
        return [self.legal_term] + self.variations


@dataclass
class RiskRule:
    """
    Weighted risk rule.

    A rule whose pattern matches a clause adds ``weight`` (which may be
    negative for protective language) to the clause's base risk score.
    """
    id: str
    name: str
    pattern: str  # Regex, matched case-insensitively
    weight: int
    clause_types: List[str] = field(default_factory=list)  # ClauseType values; empty = any
    priority: int = 100  # Lower number = higher priority
    enabled: bool = True
    explanation: Optional[str] = None
    recommendation: Optional[str] = None
    impact: Optional[str] = None
    description: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def applies_to(self, clause_type: str) -> bool:
        return not self.clause_types or clause_type in self.clause_types

    def matches(self, text: str) -> bool:
        return re.search(self.pattern, text, re.IGNORECASE) is not None


@dataclass
class RewritingTemplate:
    """
    Template for clause rewriting.

    ``source_pattern`` is a regex matched case-insensitively against the
    clause text. ``replacement_template`` supports ``{placeholders}``
    filled from the pattern's named groups. When ``replace_whole_clause``
    is set the whole clause is replaced, otherwise only the matched span.
    """
    id: str
    name: str
    source_pattern: str
    replacement_template: str
    clause_type: str  # ClauseType value
    reasoning: str
    benefits: List[str] = field(default_factory=list)
    replace_whole_clause: bool = False
    enabled: bool = True
    description: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            is_valid=self.is_valid and other.is_valid,
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings
        )


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""

    def __init__(self, message: str, validation_result: Optional[ValidationResult] = None):
        super().__init__(message)
        self.message = message
        self.validation_result = validation_result


@dataclass
class SystemConfiguration:
    """
    Complete system configuration.

    Aggregates all configuration types into a single structure.
    """
    plain_language_mappings: List[PlainLanguageMapping] = field(default_factory=list)
    risk_rules: List[RiskRule] = field(default_factory=list)
    rewriting_templates: List[RewritingTemplate] = field(default_factory=list)
    version: int = 1
    metadata: Dict[str, Any] = field(default_factory=dict)

    def get_rules_by_priority(self) -> List[RiskRule]:
        """Get enabled risk rules sorted by priority (ascending)."""
        return sorted(
            [r for r in self.risk_rules if r.enabled],
            key=lambda r: (r.priority, r.id)
        )

    def get_rules_for_type(self, clause_type: str) -> List[RiskRule]:
        return [r for r in self.get_rules_by_priority() if r.applies_to(clause_type)]

    def get_templates_by_type(self, clause_type: str) -> List[RewritingTemplate]:
        """Get enabled rewriting templates for a clause type."""
        return [
            t for t in self.rewriting_templates
            if t.clause_type == clause_type and t.enabled
        ]
