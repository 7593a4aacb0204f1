"""Configuration management for the Legal Review pipeline."""

from .config_manager import ConfigurationManager
from .models import (
    PlainLanguageMapping,
    RiskRule,
    RewritingTemplate,
    SystemConfiguration,
    ConfigurationError,
    ValidationResult,
)

__all__ = [
    "ConfigurationManager",
    "PlainLanguageMapping",
    "RiskRule",
    "RewritingTemplate",
    "SystemConfiguration",
    "ConfigurationError",
    "ValidationResult",
]
