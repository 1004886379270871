"""
Range Object Shape Rule

This module implements the RangeShapeRule class. Any object carrying a
``start`` or ``end`` key is treated as an inclusive range and must carry
both keys as strings. Ordering of the bounds is left to the ledger.
"""

from validator.core import ValidationRule, ValidationContext
from validator.json_tree import JsonKind, JsonNode, child_path, kind_of_safe

RANGE_KEYS = ("start", "end")


class RangeShapeRule(ValidationRule):
    """
    Validation rule for ``{start, end}`` range objects.

    Reports one error per missing key (at the range path) and one per
    non-string bound (at the bound path).
    """

    def __init__(self):
        super().__init__(
            name="range_shape",
            description="Requires range objects to carry string start and end"
        )

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        if not self.enabled or node.kind != JsonKind.OBJECT:
            return False
        return any(key in node.value for key in RANGE_KEYS)

    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        passed = True

        for key in RANGE_KEYS:
            if key not in node.value:
                context.add_error(self.name, f'UintRange missing "{key}" field', node.path)
                passed = False
            elif not isinstance(node.value[key], str):
                kind = kind_of_safe(node.value[key])
                got = kind.value if kind else type(node.value[key]).__name__
                context.add_error(
                    self.name,
                    f'UintRange "{key}" must be a string, got {got}',
                    child_path(node.path, key)
                )
                passed = False

        return passed
