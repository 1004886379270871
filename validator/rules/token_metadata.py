"""
Token Metadata Rule

Every entry of a collection's ``tokenMetadata`` array must say which
token ids it describes through a non-empty ``tokenIds`` range array.
"""

from validator.core import ValidationRule, ValidationContext
from validator.json_tree import JsonNode
from validator.messages import collection_array_entry


class TokenMetadataRule(ValidationRule):
    """Validation rule requiring ``tokenIds`` on token metadata entries."""

    def __init__(self):
        super().__init__(
            name="token_metadata",
            description="Requires tokenMetadata entries to include tokenIds"
        )

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        return self.enabled and collection_array_entry(node, "tokenMetadata")

    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        token_ids = node.get("tokenIds")
        if isinstance(token_ids, list) and token_ids:
            return True

        context.add_error(
            self.name,
            "tokenMetadata entry MUST include tokenIds field with UintRange array",
            node.path
        )
        return False
