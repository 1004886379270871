"""
BitBadges Toolkit Validator Module

This module provides rule-based validation of BitBadges transaction JSON,
reporting errors and warnings with the path of the offending value before
a transaction is simulated or broadcast.
"""

from .core import (
    ValidationEngine,
    ValidationContext,
    ValidationRule,
    ValidationResult,
    ValidationIssue,
    ValidationReport,
    IssueSeverity,
    ValidationError,
    ParseError,
    ConfigurationError,
    parse_document,
    create_default_validator,
    validate_transaction,
    validate_transaction_quick
)

from .json_tree import JsonKind, JsonNode, walk

__all__ = [
    "ValidationEngine",
    "ValidationContext",
    "ValidationRule",
    "ValidationResult",
    "ValidationIssue",
    "ValidationReport",
    "IssueSeverity",
    "ValidationError",
    "ParseError",
    "ConfigurationError",
    "parse_document",
    "create_default_validator",
    "validate_transaction",
    "validate_transaction_quick",
    "JsonKind",
    "JsonNode",
    "walk"
]
