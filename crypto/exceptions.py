"""
Address Exceptions for BitBadges Toolkit

This module defines custom exceptions for address encoding, derivation
and format conversion.
"""


class CryptoError(Exception):
    """Base exception for all address and hashing errors."""
    pass


class DecodeError(CryptoError):
    """Raised when Bech32 or hex address text cannot be encoded or decoded."""
    pass


class FormatError(CryptoError):
    """Raised when an address matches no known format or cannot be converted."""
    pass


class DerivationError(CryptoError):
    """Raised when module address derivation is called with invalid arguments."""
    pass
