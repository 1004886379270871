"""
BitBadges Toolkit - Token Registry

Static table of known coin denominations with lazily derived backing
addresses. The registry is an explicit object: construct it once and pass
it to whatever needs lookups. The symbol map is built on first use under a
build-once lock and is read-only afterwards.
"""

import logging
from threading import Lock
from typing import Dict, List, Mapping, Optional

from crypto.derivation import generate_alias_address_for_ibc_backed_denom
from crypto.exceptions import CryptoError
from .schema import (
    IBC_DENOM_PREFIX,
    BackingAddressInfo,
    CoinDetails,
    CoinKind,
    TokenDescriptor,
)


class RegistryError(Exception):
    """Base exception for registry errors."""
    pass


class TokenNotFoundError(RegistryError):
    """Raised when a symbol or denom cannot be resolved."""
    pass


DEFAULT_IBC_DECIMALS = 6
DEFAULT_NATIVE_DECIMALS = 9
UNKNOWN_SYMBOL = "UNKNOWN"
UNKNOWN_DISPLAY_NAME = "Unknown IBC Token"

MAINNET_COINS: Dict[str, CoinDetails] = {
    coin.base_denom: coin for coin in (
        CoinDetails(
            symbol="BADGE",
            label="BADGE",
            decimals=9,
            base_denom="ubadge",
            image="https://github.com/cosmos/chain-registry/blob/master/bitbadges/images/badge_logo.png?raw=true",
        ),
        CoinDetails(
            symbol="CHAOS",
            label="CHAOS",
            decimals=9,
            base_denom="badges:49:chaosnet",
        ),
        CoinDetails(
            symbol="USDC",
            label="USDC",
            decimals=6,
            base_denom="ibc/F082B65C88E4B6D5EF1DB243CDA1D331D002759E938A0F5CD3FFDC5D53B3E349",
            image="https://github.com/cosmos/chain-registry/blob/master/noble/images/USDCoin.png?raw=true",
        ),
        CoinDetails(
            symbol="ATOM",
            label="ATOM",
            decimals=6,
            base_denom="ibc/A4DB47A9D3CF9A068D454513891B526702455D3EF08FB9EB558C561F9DC2B701",
            image="https://github.com/cosmos/chain-registry/blob/master/cosmoshub/images/atom.png?raw=true",
        ),
        CoinDetails(
            symbol="OSMO",
            label="OSMO",
            decimals=6,
            base_denom="ibc/ED07A3391A112B175915CD8FAF43A2DA8E4790EDE12566649D0C2F97716B8518",
            image="https://github.com/cosmos/chain-registry/blob/master/osmosis/images/osmo.png?raw=true",
        ),
    )
}


class TokenRegistry:
    """
    Lookup table of IBC tokens and their backing addresses.

    Only IBC-bridged coins get a backing address. Backing addresses for the
    pre-seeded coins are derived once, on the first lookup, and memoized for
    the lifetime of the registry.
    """

    def __init__(self, coins: Optional[Mapping[str, CoinDetails]] = None):
        """
        Initialize the token registry.

        Args:
            coins: Coin table keyed by base denom (default: mainnet coins)
        """
        self.coins: Dict[str, CoinDetails] = dict(coins if coins is not None else MAINNET_COINS)
        self.logger = logging.getLogger("registry.tokens")
        self._symbol_map: Optional[Dict[str, TokenDescriptor]] = None
        self._build_lock = Lock()
        self.stats = {
            "builds": 0,
            "lookups": 0,
            "synthetic_lookups": 0,
        }

    def _token_map(self) -> Dict[str, TokenDescriptor]:
        """Return the symbol map, building it on first use."""
        if self._symbol_map is not None:
            return self._symbol_map

        with self._build_lock:
            if self._symbol_map is None:
                self._symbol_map = self._build_symbol_map()
        return self._symbol_map

    def _build_symbol_map(self) -> Dict[str, TokenDescriptor]:
        self.logger.info("Building token symbol map")
        self.stats["builds"] += 1
        symbol_map: Dict[str, TokenDescriptor] = {}

        for base_denom, coin in self.coins.items():
            if coin.kind != CoinKind.IBC:
                continue

            symbol = coin.symbol.upper()
            if symbol in symbol_map:
                self.logger.warning(f"Duplicate symbol {symbol} for {base_denom}, keeping first")
                continue

            try:
                backing_address = generate_alias_address_for_ibc_backed_denom(base_denom)
            except CryptoError as e:
                self.logger.warning(f"Failed to generate backing address for {base_denom}: {e}")
                continue

            symbol_map[symbol] = TokenDescriptor(
                symbol=symbol,
                ibc_denom=base_denom,
                decimals=coin.decimals,
                backing_address=backing_address,
                display_name=coin.label,
            )

        self.logger.debug(f"Token symbol map built with {len(symbol_map)} entries")
        return symbol_map

    def lookup(self, query: str) -> Optional[TokenDescriptor]:
        """
        Look up a token by symbol or IBC denom.

        Symbols match case-insensitively, then canonical denoms match
        case-insensitively. An unregistered ``ibc/`` denom gets a synthetic,
        uncached descriptor with its backing address computed on the fly.

        Args:
            query: Symbol (e.g. ``"usdc"``) or IBC denom

        Returns:
            TokenDescriptor, or None when the query cannot be resolved
        """
        self.stats["lookups"] += 1
        token_map = self._token_map()

        by_symbol = token_map.get(query.upper())
        if by_symbol is not None:
            return by_symbol

        lowered = query.lower()
        for token in token_map.values():
            if token.ibc_denom.lower() == lowered:
                return token

        if query.startswith(IBC_DENOM_PREFIX):
            self.stats["synthetic_lookups"] += 1
            try:
                backing_address = generate_alias_address_for_ibc_backed_denom(query)
            except CryptoError as e:
                self.logger.warning(f"Failed to generate backing address for {query}: {e}")
                return None

            return TokenDescriptor(
                symbol=UNKNOWN_SYMBOL,
                ibc_denom=query,
                decimals=DEFAULT_IBC_DECIMALS,
                backing_address=backing_address,
                display_name=UNKNOWN_DISPLAY_NAME,
            )

        return None

    def all_tokens(self) -> List[TokenDescriptor]:
        """All pre-seeded IBC tokens."""
        return list(self._token_map().values())

    def native_coins(self) -> List[CoinDetails]:
        """All non-IBC coins."""
        return [coin for coin in self.coins.values() if coin.kind == CoinKind.NATIVE]

    def coin_details(self, denom: str) -> Optional[CoinDetails]:
        """Coin definition by exact base denom."""
        return self.coins.get(denom)

    def resolve_ibc_denom(self, query: str) -> Optional[str]:
        """Resolve a symbol or denom to its full IBC denom."""
        if query.startswith(IBC_DENOM_PREFIX):
            return query

        token = self.lookup(query)
        if token is not None:
            return token.ibc_denom

        return None

    def decimals_for(self, identifier: str) -> int:
        """
        Decimal exponent for a denom or symbol.

        Returns the registered exponent, 6 for unknown IBC denoms, and 9 for
        anything else (native default).
        """
        coin = self.coin_details(identifier)
        if coin is not None:
            return coin.decimals

        token = self.lookup(identifier)
        if token is not None:
            return token.decimals

        if identifier.startswith(IBC_DENOM_PREFIX):
            return DEFAULT_IBC_DECIMALS

        return DEFAULT_NATIVE_DECIMALS

    def backing_address_info(self, query: str) -> BackingAddressInfo:
        """
        Backing address and Smart Token approval list ids for a symbol or denom.

        Raises:
            TokenNotFoundError: If a non-IBC query is not a known symbol
        """
        token = self.lookup(query)
        if token is None:
            raise TokenNotFoundError(
                f"Could not resolve {query!r} to an IBC denom. Use a full IBC denom (ibc/...) "
                f"or a known symbol ({', '.join(t.symbol for t in self.all_tokens())})."
            )

        return BackingAddressInfo.for_address(
            token.backing_address,
            token.ibc_denom,
            symbol=token.symbol,
            decimals=token.decimals,
        )

    def get_statistics(self) -> Dict[str, int]:
        """Get registry statistics."""
        return {
            **self.stats,
            "registered_coins": len(self.coins),
            "ibc_tokens": len(self._symbol_map) if self._symbol_map is not None else 0,
        }


def default_registry() -> TokenRegistry:
    """Create a TokenRegistry over the mainnet coin table."""
    return TokenRegistry(MAINNET_COINS)
