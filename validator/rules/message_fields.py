"""
Message Field Rule

Every entry of the ``messages`` array needs a ``typeUrl`` and a ``value``
object. The two supported message types additionally need their creator
and their collection id or transfer list. Entries of ``messages`` that are
not objects are reported as errors rather than skipped.
"""

from validator.core import ValidationRule, ValidationContext
from validator.json_tree import JsonNode, child_path
from validator.messages import (
    BITBADGES_ADDRESS_START,
    TRANSFER_TOKENS,
    UNIVERSAL_UPDATE_COLLECTION,
    is_message,
)


class MessageFieldsRule(ValidationRule):
    """Validation rule for the required fields of each message."""

    def __init__(self):
        super().__init__(
            name="message_fields",
            description="Requires typeUrl, value and the per-type message fields"
        )

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        return self.enabled and is_message(node)

    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        if not isinstance(node.value, dict):
            context.add_error(self.name, "Message must be an object", node.path)
            return False

        passed = True
        message_type = node.get("typeUrl")
        value = node.get("value")

        if not isinstance(message_type, str) or not message_type:
            context.add_error(self.name, 'Message missing "typeUrl" field', child_path(node.path, "typeUrl"))
            passed = False

        if not isinstance(value, dict):
            context.add_error(self.name, 'Message missing "value" field', child_path(node.path, "value"))
            return False

        value_path = child_path(node.path, "value")

        if message_type == UNIVERSAL_UPDATE_COLLECTION:
            passed = self._check_creator(value, value_path, context) and passed
            if "collectionId" not in value:
                context.add_error(
                    self.name,
                    'MsgUniversalUpdateCollection missing "collectionId" field',
                    child_path(value_path, "collectionId")
                )
                passed = False

        elif message_type == TRANSFER_TOKENS:
            passed = self._check_creator(value, value_path, context) and passed
            transfers = value.get("transfers")
            transfers_path = child_path(value_path, "transfers")
            if not isinstance(transfers, list):
                context.add_error(self.name, 'MsgTransferTokens missing "transfers" array', transfers_path)
                passed = False
            else:
                for index, transfer in enumerate(transfers):
                    if isinstance(transfer, dict) and "prioritizedApprovals" not in transfer:
                        context.add_warning(
                            self.name,
                            'Transfer should list "prioritizedApprovals" (use [] when none apply)',
                            f"{transfers_path}[{index}]"
                        )

        return passed

    def _check_creator(self, value: dict, value_path: str, context: ValidationContext) -> bool:
        creator = value.get("creator")
        path = child_path(value_path, "creator")

        if not isinstance(creator, str) or not creator:
            context.add_error(self.name, 'Message missing "creator" field', path)
            return False

        if not creator.startswith(BITBADGES_ADDRESS_START):
            context.add_warning(
                self.name,
                f'Creator should be a bb1... address, got "{creator}"',
                path
            )
        return True
