"""
BitBadges Toolkit - Bech32 Codec

Generic encode/decode between a byte payload and a human-readable prefixed
Bech32 address, plus the simpler ``0x`` hex form used by EVM-style accounts.

The checksum and 5-bit regrouping come from the ``bech32`` reference
implementation; this module only adapts it to byte payloads and maps its
failure signals onto DecodeError.
"""

import logging
import re
from typing import Tuple

from bech32 import bech32_decode, bech32_encode, convertbits

from .exceptions import DecodeError

logger = logging.getLogger(__name__)

BITBADGES_PREFIX = "bb"
HEX_PREFIX = "0x"
SIMPLE_ADDRESS_LENGTH = 20
MODULE_ADDRESS_LENGTH = 32

# Characters permitted in the data part of a Bech32 string
BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
MAX_BECH32_LENGTH = 90

_HEX_ADDRESS_RE = re.compile(r'^[0-9a-fA-F]{40}$')


def _validate_prefix(prefix: str) -> None:
    if not prefix:
        raise DecodeError("Bech32 prefix must not be empty")
    if any(ord(ch) < 33 or ord(ch) > 126 for ch in prefix):
        raise DecodeError(f"Bech32 prefix contains invalid characters: {prefix!r}")


def encode(prefix: str, data: bytes) -> str:
    """
    Encode a byte payload as a Bech32 string.

    Args:
        prefix: Human-readable prefix (e.g. ``"bb"``)
        data: Raw payload bytes

    Returns:
        Bech32 text address

    Raises:
        DecodeError: If the prefix is invalid or the payload cannot be grouped
    """
    _validate_prefix(prefix)

    words = convertbits(list(bytes(data)), 8, 5)
    if words is None:
        raise DecodeError("Payload could not be regrouped into 5-bit words")

    text = bech32_encode(prefix.lower(), words)
    if text is None:
        raise DecodeError(f"Failed to encode Bech32 payload with prefix {prefix!r}")

    return text


def decode(text: str) -> Tuple[str, bytes]:
    """
    Decode a Bech32 string into its prefix and payload bytes.

    Only the checksum, charset and separator are validated; the payload
    length is left for callers to interpret.

    Args:
        text: Bech32 address text

    Returns:
        Tuple of (prefix, payload bytes)

    Raises:
        DecodeError: If the checksum, charset or separator is invalid
    """
    if not isinstance(text, str) or not text:
        raise DecodeError("Bech32 text must be a non-empty string")

    if len(text) > MAX_BECH32_LENGTH:
        raise DecodeError(f"Bech32 text exceeds {MAX_BECH32_LENGTH} characters")

    decoded = bech32_decode(text)
    prefix, words = decoded[0], decoded[1]
    if prefix is None or words is None:
        raise DecodeError(f"Invalid Bech32 string: {text!r}")

    payload = convertbits(words, 5, 8, False)
    if payload is None:
        raise DecodeError(f"Invalid Bech32 padding in {text!r}")

    return prefix, bytes(payload)


def encode_hex_address(data: bytes) -> str:
    """Encode a 20-byte payload as a lowercase ``0x`` hex address."""
    if len(data) != SIMPLE_ADDRESS_LENGTH:
        raise DecodeError(
            f"Hex addresses carry exactly {SIMPLE_ADDRESS_LENGTH} bytes, got {len(data)}"
        )
    return HEX_PREFIX + bytes(data).hex()


def decode_hex_address(text: str) -> bytes:
    """
    Decode a ``0x`` hex address into its 20 payload bytes.

    Raises:
        DecodeError: If the text is not ``0x`` followed by 40 hex characters
    """
    if not text.startswith(HEX_PREFIX):
        raise DecodeError(f"Hex address must start with {HEX_PREFIX}")

    body = text[len(HEX_PREFIX):]
    if not _HEX_ADDRESS_RE.match(body):
        raise DecodeError("Hex address must have 40 hex characters after 0x")

    return bytes.fromhex(body)


def is_bech32_charset(text: str) -> bool:
    """Check that every character of a Bech32 data part is in the charset."""
    return bool(text) and all(ch in BECH32_CHARSET for ch in text.lower())
