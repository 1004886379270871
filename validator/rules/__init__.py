"""
BitBadges Toolkit Validator Rules Module

This module contains concrete implementations of validation rules for
BitBadges transaction documents, including numeric string encoding,
UintRange shape, approval list ids and criteria, token metadata,
collection permissions, subscription collections and message fields.
"""

from .numeric_strings import NumericStringRule
from .range_shape import RangeShapeRule
from .approvals import ApprovalListIdRule, ApprovalCriteriaRule, is_valid_list_id
from .token_metadata import TokenMetadataRule
from .permissions import CollectionPermissionsRule
from .subscription import SubscriptionRule
from .message_fields import MessageFieldsRule

__all__ = [
    "NumericStringRule",
    "RangeShapeRule",
    "ApprovalListIdRule",
    "ApprovalCriteriaRule",
    "is_valid_list_id",
    "TokenMetadataRule",
    "CollectionPermissionsRule",
    "SubscriptionRule",
    "MessageFieldsRule"
]
