"""
Subscription Collection Rule

Collections declaring the ``Subscriptions`` standard mint time-limited
tokens through predetermined balances. This module implements the
SubscriptionRule class, which checks the approvals and token ids of such
collections:

- exactly one order calculation method is selected
- payments are not redirected by the coin transfer override flags
- incremented balances carry a non-zero duration that may be overridden
- the collection holds the single token id 1
"""

from typing import Any, Dict, List

from validator.core import ValidationRule, ValidationContext
from validator.json_tree import JsonNode, child_path
from validator.messages import SUBSCRIPTION_STANDARD, has_standard, is_collection_value, nested

ORDER_CALCULATION_FLAGS = (
    "useOverallNumTransfers",
    "usePerToAddressNumTransfers",
    "usePerFromAddressNumTransfers",
    "usePerInitiatedByAddressNumTransfers",
    "useMerkleChallengeLeafIndex",
)
COIN_TRANSFER_OVERRIDES = ("overrideFromWithApproverAddress", "overrideToWithInitiator")
SUBSCRIPTION_TOKEN_IDS = [{"start": "1", "end": "1"}]


def selected_order_methods(method: Dict[str, Any]) -> List[str]:
    """Names of the order calculation flags set to true."""
    return [flag for flag in ORDER_CALCULATION_FLAGS if method.get(flag) is True]


def is_zero_duration(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in ("", "0")
    return value == 0


class SubscriptionRule(ValidationRule):
    """Validation rule for collections using the Subscriptions standard."""

    def __init__(self):
        super().__init__(
            name="subscription",
            description="Checks approvals and token ids of subscription collections"
        )

    def is_applicable(self, node: JsonNode, context: ValidationContext) -> bool:
        return (
            self.enabled
            and is_collection_value(node)
            and has_standard(node, SUBSCRIPTION_STANDARD)
        )

    def validate(self, node: JsonNode, context: ValidationContext) -> bool:
        passed = True
        approvals = node.get("collectionApprovals")
        approvals_path = child_path(node.path, "collectionApprovals")

        if isinstance(approvals, list):
            for index, approval in enumerate(approvals):
                criteria = nested(approval, "approvalCriteria")
                if not isinstance(criteria, dict):
                    continue
                criteria_path = child_path(f"{approvals_path}[{index}]", "approvalCriteria")
                passed = self._check_order_method(criteria, criteria_path, context) and passed
                self._check_coin_transfers(criteria, criteria_path, context)
                self._check_incremented_balances(criteria, criteria_path, context)

        if node.get("validTokenIds") != SUBSCRIPTION_TOKEN_IDS:
            context.add_warning(
                self.name,
                'Subscription collections should use validTokenIds [{"start": "1", "end": "1"}]',
                child_path(node.path, "validTokenIds")
            )

        return passed

    def _check_order_method(self, criteria: dict, criteria_path: str,
                            context: ValidationContext) -> bool:
        method = nested(criteria, "predeterminedBalances", "orderCalculationMethod")
        if not isinstance(method, dict):
            return True

        path = child_path(child_path(criteria_path, "predeterminedBalances"), "orderCalculationMethod")
        selected = selected_order_methods(method)

        if len(selected) > 1:
            context.add_error(
                self.name,
                f"orderCalculationMethod must have exactly one method set to true, "
                f"found {len(selected)}: {', '.join(selected)}",
                path
            )
            return False

        if not selected:
            context.add_warning(
                self.name,
                "orderCalculationMethod has no method set to true; "
                "useOverallNumTransfers is the usual choice",
                path
            )
        return True

    def _check_coin_transfers(self, criteria: dict, criteria_path: str,
                              context: ValidationContext) -> None:
        transfers = criteria.get("coinTransfers")
        if not isinstance(transfers, list):
            return

        for index, transfer in enumerate(transfers):
            if not isinstance(transfer, dict):
                continue
            for flag in COIN_TRANSFER_OVERRIDES:
                if transfer.get(flag) is True:
                    context.add_warning(
                        self.name,
                        f"Subscription coinTransfers should have {flag}: false",
                        child_path(f"{child_path(criteria_path, 'coinTransfers')}[{index}]", flag)
                    )

    def _check_incremented_balances(self, criteria: dict, criteria_path: str,
                                    context: ValidationContext) -> None:
        incremented = nested(criteria, "predeterminedBalances", "incrementedBalances")
        if not isinstance(incremented, dict):
            return

        path = child_path(child_path(criteria_path, "predeterminedBalances"), "incrementedBalances")

        if is_zero_duration(incremented.get("durationFromTimestamp")):
            context.add_warning(
                self.name,
                "Subscription durationFromTimestamp must be non-zero (duration in milliseconds)",
                child_path(path, "durationFromTimestamp")
            )

        if incremented.get("allowOverrideTimestamp") is not True:
            context.add_warning(
                self.name,
                "Subscription incrementedBalances should have allowOverrideTimestamp: true",
                child_path(path, "allowOverrideTimestamp")
            )
