"""
BitBadges Toolkit Token Registry

Known coin denominations, their decimals and their deterministic backing
addresses.
"""

from .schema import (
    CoinKind,
    CoinDetails,
    TokenDescriptor,
    BackingAddressInfo,
)

from .tokens import (
    TokenRegistry,
    RegistryError,
    TokenNotFoundError,
    MAINNET_COINS,
    default_registry,
)

__all__ = [
    "CoinKind",
    "CoinDetails",
    "TokenDescriptor",
    "BackingAddressInfo",
    "TokenRegistry",
    "RegistryError",
    "TokenNotFoundError",
    "MAINNET_COINS",
    "default_registry",
]
