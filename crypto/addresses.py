"""
BitBadges Toolkit - Address Format Detection and Conversion

Converts between the two supported address text encodings:

- ETH: ``0x`` followed by 40 hex characters (20-byte payload)
- BITBADGES: Bech32 with the ``bb`` prefix (20-byte or 32-byte payload)

Detection is purely syntactic. Conversion to the hex form only succeeds for
20-byte payloads; 32-byte module-derived addresses have no hex equivalent.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .bech32_codec import (
    BITBADGES_PREFIX,
    HEX_PREFIX,
    MODULE_ADDRESS_LENGTH,
    SIMPLE_ADDRESS_LENGTH,
    decode,
    decode_hex_address,
    encode,
    encode_hex_address,
    is_bech32_charset,
)
from .exceptions import DecodeError, FormatError

logger = logging.getLogger(__name__)

BITBADGES_ADDRESS_START = BITBADGES_PREFIX + "1"

_ETH_ADDRESS_RE = re.compile(r'^0x[0-9a-fA-F]{40}$')


class AddressFormat(Enum):
    """Address text encodings understood by the converter."""
    ETH = "eth"                # 0x... (primary, simple 20-byte form)
    BITBADGES = "bitbadges"    # bb1... (secondary, Bech32 form)
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class AddressValidation:
    """Result of validating an address string."""
    valid: bool
    chain: str
    normalized: Optional[str] = None
    is_module_derived: bool = False
    prefix: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self):
        return {
            "valid": self.valid,
            "chain": self.chain,
            "normalized": self.normalized,
            "is_module_derived": self.is_module_derived,
            "prefix": self.prefix,
            "error": self.error,
        }


def detect_format(address: str) -> AddressFormat:
    """
    Detect the text encoding of an address.

    Args:
        address: Address text

    Returns:
        AddressFormat.ETH, AddressFormat.BITBADGES or AddressFormat.UNKNOWN
    """
    if not address:
        return AddressFormat.UNKNOWN

    if _ETH_ADDRESS_RE.match(address):
        return AddressFormat.ETH

    lowered = address.lower()
    if lowered.startswith(BITBADGES_ADDRESS_START):
        if is_bech32_charset(lowered[len(BITBADGES_ADDRESS_START):]):
            return AddressFormat.BITBADGES

    return AddressFormat.UNKNOWN


def eth_to_bitbadges(eth_address: str) -> str:
    """Convert a ``0x`` address to its ``bb1`` form."""
    try:
        payload = decode_hex_address(eth_address)
    except DecodeError as e:
        raise FormatError(f"Invalid ETH address: {e}") from e
    return encode(BITBADGES_PREFIX, payload)


def bitbadges_to_eth(bitbadges_address: str) -> str:
    """
    Convert a ``bb1`` address to its ``0x`` form.

    Raises:
        FormatError: If the address is malformed or its payload is not 20 bytes
    """
    if not bitbadges_address.lower().startswith(BITBADGES_ADDRESS_START):
        raise FormatError(f"Invalid BitBadges address: must start with {BITBADGES_ADDRESS_START}")

    try:
        _, payload = decode(bitbadges_address)
    except DecodeError as e:
        raise FormatError(f"Invalid BitBadges address: {e}") from e

    if len(payload) != SIMPLE_ADDRESS_LENGTH:
        raise FormatError(
            f"Address is not a standard {SIMPLE_ADDRESS_LENGTH}-byte address "
            f"({len(payload)} bytes, may be a module-derived address)"
        )

    return encode_hex_address(payload)


def to_other_format(address: str) -> str:
    """
    Convert an address to the other supported encoding.

    Raises:
        FormatError: If the source format is unknown or not convertible
    """
    source = detect_format(address)

    if source == AddressFormat.ETH:
        return eth_to_bitbadges(address)
    if source == AddressFormat.BITBADGES:
        return bitbadges_to_eth(address)

    raise FormatError(
        f"Unknown address format: {address!r}. Expected 0x... (ETH) or bb1... (BitBadges)"
    )


def to_bitbadges_address(address: str) -> str:
    """Return the ``bb1`` form of an address, converting from ``0x`` if needed."""
    source = detect_format(address)
    if source == AddressFormat.BITBADGES:
        return address
    if source == AddressFormat.ETH:
        return eth_to_bitbadges(address)
    raise FormatError(f"Unknown address format: {address!r}")


def to_eth_address(address: str) -> str:
    """Return the ``0x`` form of an address, converting from ``bb1`` if needed."""
    source = detect_format(address)
    if source == AddressFormat.ETH:
        return address
    if source == AddressFormat.BITBADGES:
        return bitbadges_to_eth(address)
    raise FormatError(f"Unknown address format: {address!r}")


def validate_address(address: str) -> AddressValidation:
    """
    Validate an address and describe it.

    ETH addresses are checked syntactically. Bech32 addresses are fully
    decoded, so any prefix is accepted and module-derived (32-byte) payloads
    are flagged.
    """
    if not address or not address.strip():
        return AddressValidation(valid=False, chain="unknown", error="Address is empty")

    if address.startswith(HEX_PREFIX):
        if _ETH_ADDRESS_RE.match(address):
            return AddressValidation(
                valid=True,
                chain="eth",
                normalized=address.lower(),
                prefix=HEX_PREFIX,
            )
        return AddressValidation(
            valid=False,
            chain="eth",
            prefix=HEX_PREFIX,
            error="Invalid ETH address: must be 40 hex characters after 0x",
        )

    try:
        prefix, payload = decode(address)
    except DecodeError as e:
        chain = "cosmos" if address.lower().startswith(BITBADGES_ADDRESS_START) else "unknown"
        logger.debug(f"Address {address!r} failed Bech32 decoding: {e}")
        return AddressValidation(
            valid=False,
            chain=chain,
            error="Address format not recognized. Expected 0x... (ETH) or bb1... (BitBadges)"
            if chain == "unknown" else f"Invalid BitBadges address: {e}",
        )

    return AddressValidation(
        valid=True,
        chain="cosmos",
        normalized=address.lower(),
        is_module_derived=len(payload) == MODULE_ADDRESS_LENGTH,
        prefix=prefix,
    )
