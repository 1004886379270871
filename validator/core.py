"""
BitBadges Toolkit Validator Core Engine

This module provides the main ValidationEngine class that checks assembled
BitBadges transaction documents against the toolkit's rule set before they
are handed to the ledger API.

The ValidationEngine acts as the central coordinator for:
- JSON parsing and document preconditions
- A single depth-first walk over the document
- Dispatching every node to each registered rule
- Collecting issues into a ValidationReport

Rule problems are never raised. Each one becomes a ValidationIssue with a
severity, and a document is valid when no issue has error severity.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .json_tree import JsonKind, JsonNode, parse_json, walk


class IssueSeverity(Enum):
    """Validation issue severity levels."""
    ERROR = "error"
    WARNING = "warning"


class ValidationResult(Enum):
    """Validation result codes."""
    APPROVED = "approved"
    REJECTED = "rejected"


class ValidationError(Exception):
    """Base exception for validation errors."""
    pass


class ParseError(ValidationError):
    """Raised when a transaction document is not valid JSON."""
    pass


class ConfigurationError(ValidationError):
    """Raised when validator configuration is invalid."""
    pass


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found in a transaction document."""
    severity: IssueSeverity
    message: str
    path: Optional[str] = None
    rule: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == IssueSeverity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        data = {"severity": self.severity.value, "message": self.message}
        if self.path is not None:
            data["path"] = self.path
        return data


@dataclass
class ValidationReport:
    """Outcome of validating one document."""
    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not any(issue.is_error for issue in self.issues)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == IssueSeverity.WARNING]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class ValidationContext:
    """
    Context object passed between validation rules.

    Holds the parsed document and the issues recorded so far.
    """
    document: Any

    issues: List[ValidationIssue] = field(default_factory=list)
    rule_results: Dict[str, bool] = field(default_factory=dict)

    # Metadata
    timestamp: Optional[int] = None
    validator_id: Optional[str] = None

    def add_error(self, rule_name: str, message: str, path: Optional[str] = None):
        """Add a validation error."""
        self.issues.append(ValidationIssue(IssueSeverity.ERROR, message, path, rule_name))
        self.rule_results[rule_name] = False

    def add_warning(self, rule_name: str, message: str, path: Optional[str] = None):
        """Add a validation warning."""
        self.issues.append(ValidationIssue(IssueSeverity.WARNING, message, path, rule_name))

    def mark_rule_passed(self, rule_name: str):
        """Mark a validation rule as passed unless it already failed."""
        self.rule_results.setdefault(rule_name, True)

    def has_errors(self) -> bool:
        """Check if validation has errors."""
        return any(issue.is_error for issue in self.issues)

    def to_report(self) -> ValidationReport:
        return ValidationReport(issues=list(self.issues))

    def get_summary(self) -> Dict[str, Any]:
        """Get validation summary."""
        report = self.to_report()
        return {
            **report.to_dict(),
            "errors": len(report.errors),
            "warnings": len(report.warnings),
            "rules_passed": sum(1 for passed in self.rule_results.values() if passed),
            "rules_total": len(self.rule_results),
            "validation_result": ValidationResult.APPROVED.value if report.valid else ValidationResult.REJECTED.value,
            "timestamp": self.timestamp,
            "validator_id": self.validator_id,
        }


class ValidationRule(ABC):
    """
    Abstract base class for validation rules.

    A rule is offered every node of the document. It decides through
    ``is_applicable`` whether the node is one it cares about, and records
    issues on the context from ``validate``.
    """

    def __init__(self, name: str, description: str, enabled: bool = True):
        self.name = name
        self.description = description
        self.enabled = enabled
        self.logger = logging.getLogger(f"validator.rules.{name}")

    @abstractmethod
    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        """
        Validate one node of the document.

        Args:
            node: Node being visited
            context: Validation context collecting issues

        Returns:
            True if the node passes this rule, False otherwise
        """
        pass

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        """
        Check if this rule applies to the given node.

        Override this method to implement rule-specific applicability logic.
        """
        return self.enabled


def parse_document(text: str) -> Any:
    """
    Parse transaction JSON text.

    Raises:
        ParseError: If the text is not valid JSON, is not valid UTF-8 or
            nests too deeply to decode
    """
    try:
        return parse_json(text)
    except RecursionError as e:
        raise ParseError(f"Invalid JSON: nesting too deep ({e})") from e
    except (ValueError, TypeError) as e:
        raise ParseError(f"Invalid JSON: {e}") from e


class ValidationEngine:
    """
    Main validation engine that orchestrates all validation operations.

    The ValidationEngine owns the rule list, checks document preconditions,
    walks the document once and hands every node to every enabled rule.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the validation engine.

        Args:
            config: Configuration dictionary for the validator
        """
        self.config = dict(config or {})
        self.logger = logging.getLogger("validator.engine")

        # Validation rules
        self.rules: List[ValidationRule] = []
        self.rule_registry: Dict[str, ValidationRule] = {}

        # Statistics
        self.validation_stats = {
            "total_validations": 0,
            "approved_validations": 0,
            "rejected_validations": 0,
            "parse_failures": 0,
        }

        self._load_configuration()
        self._register_default_rules()

    def _load_configuration(self):
        """Load validator configuration."""
        self.logger.debug("Loading validator configuration")

        defaults = {
            "validator_id": "bbtk_validator_v1",
            "disabled_rules": [],
        }

        for key, value in defaults.items():
            if key not in self.config:
                self.config[key] = value

        if not isinstance(self.config["disabled_rules"], (list, tuple, set)):
            raise ConfigurationError("disabled_rules must be a list of rule names")

    def _register_default_rules(self):
        """Register default validation rules."""
        self.logger.debug("Registering default validation rules")

        # Import here to avoid circular imports
        from .rules.numeric_strings import NumericStringRule
        from .rules.range_shape import RangeShapeRule
        from .rules.approvals import ApprovalListIdRule, ApprovalCriteriaRule
        from .rules.token_metadata import TokenMetadataRule
        from .rules.permissions import CollectionPermissionsRule
        from .rules.subscription import SubscriptionRule
        from .rules.message_fields import MessageFieldsRule

        self.register_rule(NumericStringRule())
        self.register_rule(RangeShapeRule())
        self.register_rule(ApprovalListIdRule())
        self.register_rule(ApprovalCriteriaRule())
        self.register_rule(TokenMetadataRule())
        self.register_rule(CollectionPermissionsRule())
        self.register_rule(SubscriptionRule())
        self.register_rule(MessageFieldsRule())

        for rule_name in self.config["disabled_rules"]:
            rule = self.rule_registry.get(rule_name)
            if rule is None:
                raise ConfigurationError(f"Unknown rule in disabled_rules: {rule_name}")
            rule.enabled = False

    def register_rule(self, rule: ValidationRule):
        """
        Register a validation rule.

        Args:
            rule: Validation rule to register
        """
        if rule.name in self.rule_registry:
            self.logger.warning(f"Rule {rule.name} already registered, replacing")
            self.rules.remove(self.rule_registry[rule.name])

        self.rules.append(rule)
        self.rule_registry[rule.name] = rule
        self.logger.debug(f"Registered validation rule: {rule.name}")

    def unregister_rule(self, rule_name: str) -> bool:
        """
        Unregister a validation rule.

        Args:
            rule_name: Name of the rule to unregister

        Returns:
            True if rule was found and removed
        """
        if rule_name in self.rule_registry:
            rule = self.rule_registry.pop(rule_name)
            self.rules.remove(rule)
            self.logger.debug(f"Unregistered validation rule: {rule_name}")
            return True

        return False

    def validate_json(self, transaction_json: str) -> ValidationReport:
        """
        Parse and validate transaction JSON text.

        A parse failure yields a report holding exactly one error.
        """
        try:
            document = parse_document(transaction_json)
        except ParseError as e:
            self.validation_stats["total_validations"] += 1
            self.validation_stats["parse_failures"] += 1
            self.validation_stats["rejected_validations"] += 1
            self.logger.info(f"Transaction rejected: {e}")
            return ValidationReport(issues=[ValidationIssue(IssueSeverity.ERROR, str(e), rule="parse")])

        return self.validate_document(document)

    def validate_document(self, document: Any) -> ValidationReport:
        """
        Validate a parsed transaction document.

        Args:
            document: Parsed JSON value

        Returns:
            ValidationReport with every issue found
        """
        self.validation_stats["total_validations"] += 1

        context = ValidationContext(
            document=document,
            timestamp=int(time.time()),
            validator_id=self.config["validator_id"],
        )

        if self._check_preconditions(context):
            self._apply_validation_rules(context)

        summary = context.get_summary()
        self.logger.debug(
            f"Validator {summary['validator_id']} at {summary['timestamp']}: "
            f"{summary['rules_passed']}/{summary['rules_total']} rules passed"
        )

        report = context.to_report()
        if report.valid:
            self.validation_stats["approved_validations"] += 1
            self.logger.info(f"Transaction validation approved ({len(report.warnings)} warnings)")
        else:
            self.validation_stats["rejected_validations"] += 1
            self.logger.info(f"Transaction validation rejected: {len(report.errors)} errors")

        return report

    def process_validation_request(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a validation request from external systems.

        Args:
            request: Request holding ``transactionJson`` text or a parsed ``transaction``

        Returns:
            Validation response with results
        """
        self.logger.debug("Processing validation request")

        if "transactionJson" in request:
            report = self.validate_json(request["transactionJson"])
        elif "transaction" in request:
            report = self.validate_document(request["transaction"])
        else:
            return {
                "status": "error",
                "error": "No transaction provided in request",
                "validator_id": self.config["validator_id"],
            }

        return {
            "status": "success",
            "validation_result": report.to_dict(),
            "validator_id": self.config["validator_id"],
        }

    def _check_preconditions(self, context: ValidationContext) -> bool:
        """Document-level checks; False stops validation."""
        document = context.document

        if not isinstance(document, dict):
            context.add_error("document", "Transaction must be a JSON object")
            return False

        if not isinstance(document.get("messages"), list):
            context.add_error("document", 'Transaction must have a "messages" array', "messages")
            return False

        return True

    def _apply_validation_rules(self, context: ValidationContext):
        """Walk the document and offer every node to each enabled rule."""
        active_rules = [rule for rule in self.rules if rule.enabled]
        self.logger.debug(f"Applying {len(active_rules)} validation rules")

        for node in walk(context.document):
            for rule in active_rules:
                if not rule.is_applicable(node, context):
                    continue

                try:
                    if rule.validate(node, context):
                        context.mark_rule_passed(rule.name)
                except Exception as e:
                    context.add_error(rule.name, f"Rule execution error: {e}", node.path or None)
                    self.logger.error(f"Rule {rule.name} execution error at {node.path!r}: {e}")

    def get_statistics(self) -> Dict[str, Any]:
        """Get validation statistics."""
        return {
            **self.validation_stats,
            "registered_rules": len(self.rules),
            "enabled_rules": sum(1 for rule in self.rules if rule.enabled),
        }

    def get_config(self) -> Dict[str, Any]:
        """Get current configuration."""
        return dict(self.config)


# Utility functions for validation

def create_default_validator(config: Optional[Dict[str, Any]] = None) -> ValidationEngine:
    """
    Create a ValidationEngine with default configuration.

    Args:
        config: Optional configuration overrides

    Returns:
        Configured ValidationEngine instance
    """
    default_config = {
        "validator_id": "bbtk_default_validator",
    }

    if config:
        default_config.update(config)

    return ValidationEngine(default_config)


def validate_transaction(transaction_json: str, config: Optional[Dict[str, Any]] = None) -> ValidationReport:
    """Validate transaction JSON text with a default engine."""
    return create_default_validator(config).validate_json(transaction_json)


def validate_transaction_quick(transaction_json: str, config: Optional[Dict[str, Any]] = None) -> bool:
    """
    Quick validation for simple use cases.

    Returns:
        True if the transaction has no error-severity issues
    """
    return validate_transaction(transaction_json, config).valid
