"""
BitBadges Toolkit - Address Operations Module

This module provides address utilities for BitBadges including:
- Bech32 encoding and decoding of byte payloads
- Deterministic module (alias) address derivation
- Detection and conversion between 0x and bb1 address formats

Dependencies:
- bech32: Reference Bech32 checksum implementation
- hashlib: SHA-256 for the derivation hash chain
"""

from .exceptions import (
    CryptoError,
    DecodeError,
    FormatError,
    DerivationError,
)

from .bech32_codec import (
    BITBADGES_PREFIX,
    encode,
    decode,
    encode_hex_address,
    decode_hex_address,
)

from .derivation import (
    BACKED_PATH_PREFIX,
    DENOM_PREFIX,
    TOKENIZATION_MODULE,
    derive_address,
    generate_alias,
    backed_denom_keys,
    wrapped_denom_keys,
    generate_alias_address_for_ibc_backed_denom,
    generate_alias_address_for_denom,
)

from .addresses import (
    AddressFormat,
    AddressValidation,
    detect_format,
    to_other_format,
    to_bitbadges_address,
    to_eth_address,
    validate_address,
)

__all__ = [
    "CryptoError",
    "DecodeError",
    "FormatError",
    "DerivationError",
    "BITBADGES_PREFIX",
    "encode",
    "decode",
    "encode_hex_address",
    "decode_hex_address",
    "BACKED_PATH_PREFIX",
    "DENOM_PREFIX",
    "TOKENIZATION_MODULE",
    "derive_address",
    "generate_alias",
    "backed_denom_keys",
    "wrapped_denom_keys",
    "generate_alias_address_for_ibc_backed_denom",
    "generate_alias_address_for_denom",
    "AddressFormat",
    "AddressValidation",
    "detect_format",
    "to_other_format",
    "to_bitbadges_address",
    "to_eth_address",
    "validate_address",
]
