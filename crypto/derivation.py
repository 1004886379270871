"""
BitBadges Toolkit - Module Address Derivation

Deterministic derivation of module (alias) account addresses from a module
name and an ordered list of derivation keys, following the Cosmos SDK
``address.Module`` / ``address.Derive`` hashing scheme:

    H(tag, payload) = SHA-256(SHA-256(tag) || payload)
    digest0         = H("module", module_name || 0x00 || keys[0])
    digest_i        = H(digest_{i-1}, keys[i])

The final digest is the 32-byte address, rendered as Bech32 with the
``bb`` prefix. Any change to the module name, key order or key bytes
yields an unrelated address.
"""

import hashlib
import logging
from typing import List, Sequence, Union

from .bech32_codec import BITBADGES_PREFIX, encode
from .exceptions import DerivationError

logger = logging.getLogger(__name__)

# Derivation key tags
BACKED_PATH_PREFIX = 0x12
DENOM_PREFIX = 0x0c

TOKENIZATION_MODULE = "tokenization"
MODULE_TYPE = b"module"


def hash_typed(typ: Union[str, bytes], key: bytes) -> bytes:
    """
    Hash a payload under a type tag.

    Args:
        typ: Type tag; strings are UTF-8 encoded
        key: Payload bytes

    Returns:
        32-byte digest of SHA-256(SHA-256(typ) || key)
    """
    if isinstance(typ, str):
        typ = typ.encode('utf-8')

    type_hash = hashlib.sha256(typ).digest()
    hasher = hashlib.sha256()
    hasher.update(type_hash)
    hasher.update(key)
    return hasher.digest()


def module_address(module_name: str, *derivation_keys: bytes) -> bytes:
    """Derive the raw module address bytes for a module and its keys."""
    if not derivation_keys:
        raise DerivationError("derivation keys must not be empty")

    module_key = module_name.encode('utf-8') + b"\x00"
    address = hash_typed(MODULE_TYPE, module_key + bytes(derivation_keys[0]))

    for key in derivation_keys[1:]:
        address = hash_typed(address, bytes(key))

    return address


def derive_address(module_name: str, keys: Sequence[bytes]) -> bytes:
    """
    Derive a 32-byte module address.

    Args:
        module_name: Namespace of the module account
        keys: Ordered derivation keys

    Returns:
        32-byte address digest

    Raises:
        DerivationError: If no derivation keys are given
    """
    return module_address(module_name, *keys)


def generate_alias(module_name: str, derivation_keys: Sequence[bytes]) -> str:
    """Derive a module address and encode it as a ``bb1`` Bech32 string."""
    address = derive_address(module_name, derivation_keys)
    alias = encode(BITBADGES_PREFIX, address)
    logger.debug(f"Derived alias {alias} for module {module_name}")
    return alias


def backed_denom_keys(ibc_denom: str) -> List[bytes]:
    """Derivation keys for the backing address of an IBC denom."""
    return [bytes([BACKED_PATH_PREFIX]), ibc_denom.encode('utf-8')]


def wrapped_denom_keys(denom: str) -> List[bytes]:
    """Derivation keys for the wrapper address of a native coin denom."""
    return [bytes([DENOM_PREFIX]), denom.encode('utf-8')]


def generate_alias_address_for_ibc_backed_denom(ibc_denom: str) -> str:
    """
    Generate the deterministic backing address for an IBC denom.

    Args:
        ibc_denom: Full IBC denom (``ibc/<hash>``)

    Returns:
        ``bb1`` Bech32 address of the backing module account
    """
    return generate_alias(TOKENIZATION_MODULE, backed_denom_keys(ibc_denom))


def generate_alias_address_for_denom(denom: str) -> str:
    """Generate the wrapper address for a coin denom."""
    return generate_alias(TOKENIZATION_MODULE, wrapped_denom_keys(denom))
