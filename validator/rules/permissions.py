"""
Collection Permissions Rule

This module implements the CollectionPermissionsRule class, applied to the
``collectionPermissions`` object of a collection update:

- Token-scoped permissions (``canUpdateValidTokenIds``,
  ``canUpdateTokenMetadata``) that freeze anything must say which token ids
  they cover.
- A permission holding a single entry whose permitted and forbidden time
  arrays are both empty is redundant and should be an empty array.
"""

from typing import Any

from validator.core import ValidationRule, ValidationContext
from validator.json_tree import JsonKind, JsonNode, child_path
from validator.messages import collection_field

TOKEN_SCOPED_PERMISSIONS = ("canUpdateValidTokenIds", "canUpdateTokenMetadata")
PERMITTED_TIMES = "permanentlyPermittedTimes"
FORBIDDEN_TIMES = "permanentlyForbiddenTimes"


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def _empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) == 0


def has_frozen_times(entry: dict) -> bool:
    """True when either time array of a permission entry is non-empty."""
    return _non_empty_list(entry.get(PERMITTED_TIMES)) or _non_empty_list(entry.get(FORBIDDEN_TIMES))


def is_redundant_entry(entry: Any) -> bool:
    """True when both time arrays of a permission entry are present and empty."""
    return (
        isinstance(entry, dict)
        and _empty_list(entry.get(PERMITTED_TIMES))
        and _empty_list(entry.get(FORBIDDEN_TIMES))
    )


class CollectionPermissionsRule(ValidationRule):
    """Validation rule for collection permission entries."""

    def __init__(self):
        super().__init__(
            name="collection_permissions",
            description="Checks token-scoped permissions and redundant permission entries"
        )

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        return (
            self.enabled
            and node.kind == JsonKind.OBJECT
            and collection_field(node, "collectionPermissions")
        )

    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        passed = True

        for field_name in TOKEN_SCOPED_PERMISSIONS:
            entries = node.get(field_name)
            if not isinstance(entries, list):
                continue

            for index, entry in enumerate(entries):
                if not isinstance(entry, dict):
                    continue
                if has_frozen_times(entry) and "tokenIds" not in entry:
                    context.add_error(
                        self.name,
                        f"{field_name} permission MUST include tokenIds field",
                        f"{child_path(node.path, field_name)}[{index}]"
                    )
                    passed = False

        for field_name, entries in node.value.items():
            if isinstance(entries, list) and len(entries) == 1 and is_redundant_entry(entries[0]):
                context.add_warning(
                    self.name,
                    f'Permission "{field_name}" has both time arrays empty - should be [] '
                    f'instead of full object',
                    child_path(node.path, field_name)
                )

        return passed
