"""
Transaction Message Locators

Constants and helpers that place a JsonNode inside the structure of a
transaction document: which message it belongs to and which collection
field holds it.
"""

from typing import Any, Optional

from .json_tree import JsonKind, JsonNode

UNIVERSAL_UPDATE_COLLECTION = "/tokenization.MsgUniversalUpdateCollection"
TRANSFER_TOKENS = "/tokenization.MsgTransferTokens"

SUPPORTED_MESSAGE_TYPES = (UNIVERSAL_UPDATE_COLLECTION, TRANSFER_TOKENS)

BITBADGES_ADDRESS_START = "bb1"
MINT_LIST_ID = "Mint"
SUBSCRIPTION_STANDARD = "Subscriptions"


def is_message(node: JsonNode) -> bool:
    """True for an element of the top-level ``messages`` array."""
    parent = node.parent
    return (
        isinstance(node.key, int)
        and parent is not None
        and parent.key == "messages"
        and parent.parent is not None
        and parent.parent.is_root
    )


def type_url(message: JsonNode) -> Optional[str]:
    value = message.get("typeUrl")
    return value if isinstance(value, str) else None


def is_message_value(node: JsonNode, message_type: Optional[str] = None) -> bool:
    """True for the ``value`` object of a message, optionally of one type."""
    if node.key != "value" or node.kind != JsonKind.OBJECT or node.parent is None:
        return False
    if not is_message(node.parent):
        return False
    return message_type is None or type_url(node.parent) == message_type


def is_collection_value(node: JsonNode) -> bool:
    """True for the value of a MsgUniversalUpdateCollection message."""
    return is_message_value(node, UNIVERSAL_UPDATE_COLLECTION)


def collection_array_entry(node: JsonNode, field_name: str) -> bool:
    """True for an object inside ``<collection value>.<field_name>[i]``."""
    if node.kind != JsonKind.OBJECT or not isinstance(node.key, int):
        return False
    array = node.parent
    if array is None or array.key != field_name or array.parent is None:
        return False
    return is_collection_value(array.parent)


def collection_field(node: JsonNode, field_name: str) -> bool:
    """True for the node stored at ``<collection value>.<field_name>``."""
    return node.key == field_name and node.parent is not None and is_collection_value(node.parent)


def has_standard(collection: JsonNode, standard: str) -> bool:
    standards = collection.get("standards")
    return isinstance(standards, list) and standard in standards


def nested(value: Any, *keys: str) -> Any:
    """Follow object keys, returning None as soon as one is missing."""
    for key in keys:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value
