"""
Collection Approval Rules

This module implements the rules applied to each entry of a collection's
``collectionApprovals`` array:

- ApprovalListIdRule checks ``fromListId``, ``toListId`` and
  ``initiatedByListId`` against the list identifier grammar.
- ApprovalCriteriaRule checks the Mint override requirement, the backing
  address override combination and the presence of ``approvalId``.

List identifier grammar:

    All | Mint | Total                    reserved keywords
    !All | !Mint | !Total                 negated keywords
    bb1...                                single address
    !bb1...                               negated address
    bb1...:bb1...[:...]                   address set
    !bb1...:bb1...[:...]                  negated address set
    !Mint:bb1...                          unbacking path for Smart Tokens
"""

from typing import Optional

from validator.core import ValidationRule, ValidationContext
from validator.json_tree import JsonNode, child_path
from validator.messages import (
    BITBADGES_ADDRESS_START,
    MINT_LIST_ID,
    collection_array_entry,
)

RESERVED_LIST_IDS = frozenset({"All", MINT_LIST_ID, "Total"})
LIST_ID_FIELDS = ("fromListId", "toListId", "initiatedByListId")
OVERRIDE_FLAG = "overridesFromOutgoingApprovals"
BACKED_MINTING_FLAG = "allowBackedMinting"


def _is_address(part: str) -> bool:
    return part.startswith(BITBADGES_ADDRESS_START) and len(part) > len(BITBADGES_ADDRESS_START)


def is_valid_list_id(list_id: str) -> bool:
    """
    Check a list identifier against the grammar.

    Args:
        list_id: Identifier string

    Returns:
        True if the identifier is well formed
    """
    if not list_id:
        return False

    negated = list_id.startswith("!")
    body = list_id[1:] if negated else list_id

    if body in RESERVED_LIST_IDS:
        return True

    if negated and body.startswith(MINT_LIST_ID + ":"):
        return _is_address(body[len(MINT_LIST_ID) + 1:])

    return all(_is_address(part) for part in body.split(":"))


def is_approval(node: JsonNode) -> bool:
    return collection_array_entry(node, "collectionApprovals")


class ApprovalListIdRule(ValidationRule):
    """Validation rule for the list identifiers of collection approvals."""

    def __init__(self):
        super().__init__(
            name="approval_list_ids",
            description="Requires approval list ids to use reserved ids or bb1 addresses"
        )

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        return self.enabled and is_approval(node)

    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        passed = True

        for field_name in LIST_ID_FIELDS:
            value = node.get(field_name)
            if isinstance(value, str) and not is_valid_list_id(value):
                context.add_error(
                    self.name,
                    f'Invalid list ID: "{value}". Use only reserved IDs (All, Mint, !Mint, Total) '
                    f'or bb1... addresses',
                    child_path(node.path, field_name)
                )
                passed = False

        return passed


class ApprovalCriteriaRule(ValidationRule):
    """
    Validation rule for approval criteria and identifiers.

    Mint approvals must override the sender's outgoing approvals. A Mint
    approval with no ``approvalCriteria`` at all is reported too, since the
    override flag is then missing; the check is not limited to approvals
    that carry criteria. Approvals sending from a backing address should not
    combine that override with backed minting. Every approval needs an
    ``approvalId``.
    """

    def __init__(self):
        super().__init__(
            name="approval_criteria",
            description="Checks Mint overrides, backing overrides and approval ids"
        )

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        return self.enabled and is_approval(node)

    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        passed = True
        from_list_id = node.get("fromListId")
        criteria = node.get("approvalCriteria")
        criteria = criteria if isinstance(criteria, dict) else None
        override_path = child_path(child_path(node.path, "approvalCriteria"), OVERRIDE_FLAG)

        if from_list_id == MINT_LIST_ID and not self._flag(criteria, OVERRIDE_FLAG):
            context.add_error(
                self.name,
                f"Mint approvals MUST have {OVERRIDE_FLAG}: true",
                override_path
            )
            passed = False

        if (isinstance(from_list_id, str)
                and from_list_id.startswith(BITBADGES_ADDRESS_START)
                and MINT_LIST_ID not in from_list_id
                and self._flag(criteria, OVERRIDE_FLAG)
                and self._flag(criteria, BACKED_MINTING_FLAG)):
            context.add_warning(
                self.name,
                f"Backing address approvals should NOT have {OVERRIDE_FLAG}: true",
                override_path
            )

        approval_id = node.get("approvalId")
        if not isinstance(approval_id, str) or not approval_id:
            context.add_error(self.name, 'Approval missing required "approvalId" field', node.path)
            passed = False

        return passed

    @staticmethod
    def _flag(criteria: Optional[dict], name: str) -> bool:
        return criteria is not None and criteria.get(name) is True
