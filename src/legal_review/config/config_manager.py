"""Configuration Manager implementation for the Legal Review pipeline.

This module provides functionality to load, validate, and manage configuration
for plain-language mappings, risk rules, and rewriting templates.
"""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from ..models.enums import ClauseType
from .defaults import DEFAULT_PLAIN_LANGUAGE, DEFAULT_RISK_RULES, DEFAULT_TEMPLATES
from .models import (
    ConfigurationError,
    PlainLanguageMapping,
    RewritingTemplate,
    RiskRule,
    SystemConfiguration,
    ValidationResult,
)


Source = Union[str, Path, Dict[str, Any], List[Dict[str, Any]]]

_CLAUSE_TYPE_VALUES = {t.value for t in ClauseType}


class ConfigurationManager:
    """
    Manager for system configuration.

    Handles loading, validation, and access to plain-language mappings,
    risk rules, and rewriting templates.
    """

    PLAIN_LANGUAGE_FILE = "plain_language.json"
    RISK_RULES_FILE = "risk_rules.json"
    TEMPLATES_FILE = "templates.json"

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager.

        Args:
            config_dir: Optional directory path for configuration files.
        """
        self._config_dir = Path(config_dir) if config_dir else None
        self._configuration = SystemConfiguration()
        self._is_loaded = False

    @classmethod
    def with_defaults(cls) -> "ConfigurationManager":
        """Create a manager pre-loaded with the built-in configuration."""
        manager = cls()
        manager.load_plain_language_mappings(DEFAULT_PLAIN_LANGUAGE)
        manager.load_risk_rules(DEFAULT_RISK_RULES)
        manager.load_rewriting_templates(DEFAULT_TEMPLATES)
        return manager

    @property
    def configuration(self) -> SystemConfiguration:
        """Get the current system configuration."""
        return self._configuration

    @property
    def is_loaded(self) -> bool:
        """Check if configuration has been loaded."""
        return self._is_loaded

    # =========================================================================
    # Plain-language mappings
    # =========================================================================

    def load_plain_language_mappings(self, source: Source) -> ValidationResult:
        """
        Load and validate legal-phrase to plain-English mappings.

        Supports loading from a JSON file path, a dictionary with a
        ``mappings`` key, or a list of mapping dictionaries.

        Raises:
            ConfigurationError: If validation fails.
        """
        items = self._extract_items(self._parse_source(source), "mappings")

        result = ValidationResult(is_valid=True)
        mappings: List[PlainLanguageMapping] = []
        for i, data in enumerate(items):
            item_result, mapping = self._validate_plain_language_mapping(data, index=i)
            result = result.merge(item_result)
            if mapping:
                mappings.append(mapping)

        self._check_duplicate_ids([m.id for m in mappings], "plain-language mapping", result)

        if not result.is_valid:
            raise ConfigurationError(
                "Plain-language mapping validation failed",
                validation_result=result
            )

        self._configuration.plain_language_mappings = mappings
        self._is_loaded = True
        return result

    def _validate_plain_language_mapping(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[PlainLanguageMapping]]:
        """Validate a single plain-language mapping dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Plain-language mapping [{index}]"

        for name in ("id", "legal_term", "plain_term"):
            if name not in data:
                result.add_error(f"{prefix}: Missing required field '{name}'")
        if not result.is_valid:
            return result, None

        if not isinstance(data["id"], str) or not data["id"].strip():
            result.add_error(f"{prefix}: 'id' must be a non-empty string")
        if not isinstance(data["legal_term"], str) or not data["legal_term"].strip():
            result.add_error(f"{prefix}: 'legal_term' must be a non-empty string")
        if not isinstance(data["plain_term"], str):
            result.add_error(f"{prefix}: 'plain_term' must be a string")

        variations = data.get("variations", [])
        if not isinstance(variations, list) or not all(isinstance(v, str) for v in variations):
            result.add_error(f"{prefix}: 'variations' must be a list of strings")

        if not result.is_valid:
            return result, None

        mapping = PlainLanguageMapping(
            id=data["id"].strip(),
            legal_term=data["legal_term"].strip(),
            plain_term=data["plain_term"].strip(),
            variations=[v.strip() for v in variations if v.strip()],
            description=data.get("description"),
            metadata=data.get("metadata", {}),
        )
        return result, mapping

    def find_plain_language_matches(self, text: str) -> List[PlainLanguageMapping]:
        """Find all plain-language mappings that match the given text."""
        return [m for m in self._configuration.plain_language_mappings if m.matches(text)]

    # =========================================================================
    # Risk rules
    # =========================================================================

    def load_risk_rules(self, source: Source) -> ValidationResult:
        """
        Load and validate weighted risk rules.

        Rules are sorted by priority after loading.

        Raises:
            ConfigurationError: If validation fails.
        """
        items = self._extract_items(self._parse_source(source), "rules")

        result = ValidationResult(is_valid=True)
        rules: List[RiskRule] = []
        for i, data in enumerate(items):
            item_result, rule = self._validate_risk_rule(data, index=i)
            result = result.merge(item_result)
            if rule:
                rules.append(rule)

        self._check_duplicate_ids([r.id for r in rules], "risk rule", result)

        if not result.is_valid:
            raise ConfigurationError(
                "Risk rule validation failed",
                validation_result=result
            )

        self._configuration.risk_rules = sorted(rules, key=lambda r: (r.priority, r.id))
        self._is_loaded = True
        return result

    def _validate_risk_rule(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[RiskRule]]:
        """Validate a single risk rule dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Risk rule [{index}]"

        for name in ("id", "name", "pattern", "weight"):
            if name not in data:
                result.add_error(f"{prefix}: Missing required field '{name}'")
        if not result.is_valid:
            return result, None

        if not isinstance(data["id"], str) or not data["id"].strip():
            result.add_error(f"{prefix}: 'id' must be a non-empty string")
        if not isinstance(data["name"], str) or not data["name"].strip():
            result.add_error(f"{prefix}: 'name' must be a non-empty string")

        self._validate_pattern(data["pattern"], prefix, "pattern", result)

        weight = data["weight"]
        if isinstance(weight, bool) or not isinstance(weight, int) or not -100 <= weight <= 100:
            result.add_error(f"{prefix}: 'weight' must be an integer between -100 and 100")

        priority = data.get("priority", 100)
        if isinstance(priority, bool) or not isinstance(priority, int) or priority < 0:
            result.add_error(f"{prefix}: 'priority' must be a non-negative integer")

        clause_types = data.get("clause_types", [])
        if not isinstance(clause_types, list):
            result.add_error(f"{prefix}: 'clause_types' must be a list")
        else:
            unknown = [t for t in clause_types if t not in _CLAUSE_TYPE_VALUES]
            if unknown:
                result.add_error(f"{prefix}: Unknown clause types {unknown}")

        if not result.is_valid:
            return result, None

        rule = RiskRule(
            id=data["id"].strip(),
            name=data["name"].strip(),
            pattern=data["pattern"],
            weight=weight,
            clause_types=list(clause_types),
            priority=priority,
            enabled=bool(data.get("enabled", True)),
            explanation=data.get("explanation"),
            recommendation=data.get("recommendation"),
            impact=data.get("impact"),
            description=data.get("description"),
            metadata=data.get("metadata", {}),
        )
        return result, rule

    def get_risk_rule(self, rule_id: str) -> Optional[RiskRule]:
        """Get a risk rule by ID."""
        for rule in self._configuration.risk_rules:
            if rule.id == rule_id:
                return rule
        return None

    def get_rules_by_priority(self) -> List[RiskRule]:
        """Get enabled risk rules sorted by priority."""
        return self._configuration.get_rules_by_priority()

    # =========================================================================
    # Rewriting templates
    # =========================================================================

    def load_rewriting_templates(self, source: Source) -> ValidationResult:
        """
        Load and validate clause rewriting templates.

        Raises:
            ConfigurationError: If validation fails.
        """
        items = self._extract_items(self._parse_source(source), "templates")

        result = ValidationResult(is_valid=True)
        templates: List[RewritingTemplate] = []
        for i, data in enumerate(items):
            item_result, template = self._validate_rewriting_template(data, index=i)
            result = result.merge(item_result)
            if template:
                templates.append(template)

        self._check_duplicate_ids([t.id for t in templates], "rewriting template", result)

        if not result.is_valid:
            raise ConfigurationError(
                "Rewriting template validation failed",
                validation_result=result
            )

        self._configuration.rewriting_templates = templates
        self._is_loaded = True
        return result

    def _validate_rewriting_template(
        self,
        data: Dict[str, Any],
        index: int = 0
    ) -> Tuple[ValidationResult, Optional[RewritingTemplate]]:
        """Validate a single rewriting template dictionary."""
        result = ValidationResult(is_valid=True)
        prefix = f"Rewriting template [{index}]"

        required = ["id", "name", "source_pattern", "replacement_template", "clause_type", "reasoning"]
        for name in required:
            if name not in data:
                result.add_error(f"{prefix}: Missing required field '{name}'")
        if not result.is_valid:
            return result, None

        for name in ("id", "name", "replacement_template", "reasoning"):
            if not isinstance(data[name], str) or not data[name].strip():
                result.add_error(f"{prefix}: '{name}' must be a non-empty string")

        compiled = self._validate_pattern(data["source_pattern"], prefix, "source_pattern", result)

        if data["clause_type"] not in _CLAUSE_TYPE_VALUES:
            result.add_error(
                f"{prefix}: 'clause_type' must be one of {sorted(_CLAUSE_TYPE_VALUES)}"
            )

        benefits = data.get("benefits", [])
        if not isinstance(benefits, list) or not all(isinstance(b, str) for b in benefits):
            result.add_error(f"{prefix}: 'benefits' must be a list of strings")

        if compiled is not None and isinstance(data["replacement_template"], str):
            placeholders = set(re.findall(r"\{(\w+)\}", data["replacement_template"]))
            missing = placeholders - set(compiled.groupindex)
            if missing:
                result.add_error(
                    f"{prefix}: Placeholders {sorted(missing)} have no matching named group"
                )

        if not result.is_valid:
            return result, None

        template = RewritingTemplate(
            id=data["id"].strip(),
            name=data["name"].strip(),
            source_pattern=data["source_pattern"],
            replacement_template=data["replacement_template"],
            clause_type=data["clause_type"],
            reasoning=data["reasoning"].strip(),
            benefits=list(benefits),
            replace_whole_clause=bool(data.get("replace_whole_clause", False)),
            enabled=bool(data.get("enabled", True)),
            description=data.get("description"),
            metadata=data.get("metadata", {}),
        )
        return result, template

    def get_rewriting_template(self, template_id: str) -> Optional[RewritingTemplate]:
        """Get a rewriting template by ID."""
        for template in self._configuration.rewriting_templates:
            if template.id == template_id:
                return template
        return None

    def get_templates_by_type(self, clause_type: str) -> List[RewritingTemplate]:
        """Get enabled rewriting templates for a clause type."""
        return self._configuration.get_templates_by_type(clause_type)

    def apply_rewriting_template(self, template: RewritingTemplate, text: str) -> Optional[str]:
        """
        Apply a rewriting template to clause text.

        Args:
            template: The template to apply.
            text: Clause text.

        Returns:
            The rewritten text, or None if the template does not match.
        """
        pattern = re.compile(template.source_pattern, re.IGNORECASE | re.DOTALL)
        match = pattern.search(text)
        if match is None:
            return None

        def fill(m: "re.Match[str]") -> str:
            values = {k: (v or "") for k, v in m.groupdict().items()}
            return template.replacement_template.format(**values)

        if template.replace_whole_clause:
            return fill(match)
        return pattern.sub(fill, text, count=1)

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_configuration(
        self,
        config: Optional[SystemConfiguration] = None
    ) -> ValidationResult:
        """
        Validate a complete configuration for internal consistency.

        Args:
            config: Configuration to validate; defaults to the current one.

        Returns:
            ValidationResult with warnings for overlapping entries.
        """
        config = config or self._configuration
        result = ValidationResult(is_valid=True)

        seen_terms: Dict[str, str] = {}
        for mapping in config.plain_language_mappings:
            for term in mapping.get_all_terms():
                key = term.lower()
                if key in seen_terms:
                    result.add_warning(
                        f"Term '{term}' appears in multiple mappings: "
                        f"'{mapping.id}' and '{seen_terms[key]}'"
                    )
                else:
                    seen_terms[key] = mapping.id

        pattern_map: Dict[str, List[str]] = {}
        for rule in config.risk_rules:
            pattern_map.setdefault(rule.pattern, []).append(rule.id)
        for pattern, rule_ids in pattern_map.items():
            if len(rule_ids) > 1:
                result.add_warning(
                    f"Multiple risk rules share pattern '{pattern}': {rule_ids}. "
                    f"Their weights will be added together."
                )

        template_map: Dict[Tuple[str, str], List[str]] = {}
        for template in config.rewriting_templates:
            template_map.setdefault((template.source_pattern, template.clause_type), []).append(template.id)
        for (pattern, clause_type), template_ids in template_map.items():
            if len(template_ids) > 1:
                result.add_warning(
                    f"Multiple templates share pattern '{pattern}' for clause type "
                    f"'{clause_type}': {template_ids}. Only the first will be applied."
                )

        return result

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _parse_source(self, source: Source) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """Parse configuration source to raw data."""
        if isinstance(source, (str, Path)):
            path = Path(source)
            if not path.exists():
                raise ConfigurationError(f"Configuration file not found: {path}")

            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {path}: {e}") from e

        return source

    @staticmethod
    def _extract_items(raw_data: Any, key: str) -> List[Dict[str, Any]]:
        if isinstance(raw_data, dict):
            if key in raw_data:
                return list(raw_data[key])
            return [raw_data]
        return list(raw_data)

    @staticmethod
    def _check_duplicate_ids(ids: List[str], kind: str, result: ValidationResult) -> None:
        duplicates = {i for i in ids if ids.count(i) > 1}
        if duplicates:
            result.add_error(f"Duplicate {kind} IDs found: {sorted(duplicates)}")

    @staticmethod
    def _validate_pattern(
        pattern: Any,
        prefix: str,
        name: str,
        result: ValidationResult,
    ) -> Optional["re.Pattern[str]"]:
        if not isinstance(pattern, str) or not pattern:
            result.add_error(f"{prefix}: '{name}' must be a non-empty string")
            return None
        try:
            return re.compile(pattern)
        except re.error as e:
            result.add_error(f"{prefix}: Invalid regex in '{name}': {e}")
            return None

    def load_from_directory(self, config_dir: Union[str, Path]) -> ValidationResult:
        """
        Load all configuration files from a directory.

        Expects files named:
        - plain_language.json
        - risk_rules.json
        - templates.json

        Missing files are skipped.

        Args:
            config_dir: Directory containing configuration files.

        Returns:
            Combined ValidationResult for all loaded configurations.
        """
        config_dir = Path(config_dir)
        result = ValidationResult(is_valid=True)

        loaders = [
            (self.PLAIN_LANGUAGE_FILE, self.load_plain_language_mappings, "Plain-language"),
            (self.RISK_RULES_FILE, self.load_risk_rules, "Risk rules"),
            (self.TEMPLATES_FILE, self.load_rewriting_templates, "Templates"),
        ]
        for filename, loader, label in loaders:
            path = config_dir / filename
            if not path.exists():
                continue
            try:
                result = result.merge(loader(path))
            except ConfigurationError as e:
                result.add_error(f"{label} loading failed: {e.message}")
                if e.validation_result:
                    result = result.merge(e.validation_result)

        self._config_dir = config_dir
        return result

    def save_to_directory(self, config_dir: Optional[Union[str, Path]] = None) -> None:
        """
        Save current configuration to a directory.

        Args:
            config_dir: Directory to save to. Uses current config_dir if None.
        """
        config_dir = Path(config_dir) if config_dir else self._config_dir
        if not config_dir:
            raise ConfigurationError("No configuration directory specified")

        config_dir.mkdir(parents=True, exist_ok=True)
        data = self.to_dict()

        files = [
            (self.PLAIN_LANGUAGE_FILE, "mappings", data["plain_language_mappings"]),
            (self.RISK_RULES_FILE, "rules", data["risk_rules"]),
            (self.TEMPLATES_FILE, "templates", data["rewriting_templates"]),
        ]
        for filename, key, items in files:
            if not items:
                continue
            with open(config_dir / filename, "w", encoding="utf-8") as f:
                json.dump({key: items}, f, indent=2, ensure_ascii=False)

    def reset(self) -> None:
        """Reset configuration to empty state."""
        self._configuration = SystemConfiguration()
        self._is_loaded = False

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as a dictionary."""
        return {
            "version": self._configuration.version,
            "plain_language_mappings": [
                {
                    "id": m.id,
                    "legal_term": m.legal_term,
                    "plain_term": m.plain_term,
                    "variations": m.variations,
                    "description": m.description,
                    "metadata": m.metadata,
                }
                for m in self._configuration.plain_language_mappings
            ],
            "risk_rules": [
                {
                    "id": r.id,
                    "name": r.name,
                    "pattern": r.pattern,
                    "weight": r.weight,
                    "clause_types": r.clause_types,
                    "priority": r.priority,
                    "enabled": r.enabled,
                    "explanation": r.explanation,
                    "recommendation": r.recommendation,
                    "impact": r.impact,
                    "description": r.description,
                    "metadata": r.metadata,
                }
                for r in self._configuration.risk_rules
            ],
            "rewriting_templates": [
                {
                    "id": t.id,
                    "name": t.name,
                    "source_pattern": t.source_pattern,
                    "replacement_template": t.replacement_template,
                    "clause_type": t.clause_type,
                    "reasoning": t.reasoning,
                    "benefits": t.benefits,
                    "replace_whole_clause": t.replace_whole_clause,
                    "enabled": t.enabled,
                    "description": t.description,
                    "metadata": t.metadata,
                }
                for t in self._configuration.rewriting_templates
            ],
            "metadata": self._configuration.metadata,
        }
