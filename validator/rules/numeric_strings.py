"""
Numeric String Encoding Rule

This module implements the NumericStringRule class that rejects raw JSON
numbers anywhere in a transaction document. Every quantity must be a
decimal string so that values up to 2^64 - 1 survive JSON round trips.
"""

from validator.core import ValidationRule, ValidationContext
from validator.json_tree import JsonKind, JsonNode


class NumericStringRule(ValidationRule):
    """Validation rule that flags every numeric literal as an error."""

    def __init__(self):
        super().__init__(
            name="numeric_strings",
            description="Requires all numbers to be encoded as strings"
        )

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        return self.enabled and node.kind == JsonKind.NUMBER

    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        literal = _format_literal(node.value)
        context.add_error(
            self.name,
            f'Number value found where string expected. Use "{literal}" instead of {literal}',
            node.path
        )
        return False


def _format_literal(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
