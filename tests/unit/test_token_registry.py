"""
Unit tests for the token registry.
"""

import threading

import pytest
from pydantic import ValidationError

from registry.schema import BackingAddressInfo, CoinDetails, CoinKind, TokenDescriptor
from registry.tokens import (
    TokenRegistry,
    TokenNotFoundError,
    RegistryError,
    MAINNET_COINS,
    default_registry,
)

USDC_DENOM = "ibc/F082B65C88E4B6D5EF1DB243CDA1D331D002759E938A0F5CD3FFDC5D53B3E349"
USDC_BACKING_ADDRESS = "bb1a7m8394e8u98w8uwle49dds8caexmcvqwgcadtp264gvt28uygmsdlgm0a"
ATOM_BACKING_ADDRESS = "bb146hj5s6rf3f8e09cvdxs8uqz3auvlmeghwf8phtmj3pjtj49ndcs3rfdup"


class TestCoinModels:
    """Test coin and descriptor models."""

    def test_symbol_is_uppercased(self):
        coin = CoinDetails(symbol="usdc", label="USDC", decimals=6, base_denom="ibc/ABC")

        assert coin.symbol == "USDC"
        assert coin.kind == CoinKind.IBC

    def test_native_kind(self):
        assert MAINNET_COINS["ubadge"].kind == CoinKind.NATIVE

    def test_invalid_symbol(self):
        with pytest.raises(ValidationError):
            CoinDetails(symbol="US-DC", label="USDC", decimals=6, base_denom="ibc/ABC")

    def test_backing_address_must_be_bb1(self):
        with pytest.raises(ValidationError):
            TokenDescriptor(
                symbol="USDC",
                ibc_denom=USDC_DENOM,
                decimals=6,
                backing_address="cosmos1xyz",
                display_name="USDC",
            )

    def test_backing_list_ids(self):
        info = BackingAddressInfo.for_address(USDC_BACKING_ADDRESS, USDC_DENOM)

        assert info.backing_from_list_id == USDC_BACKING_ADDRESS
        assert info.backing_to_list_id == f"!{USDC_BACKING_ADDRESS}"
        assert info.unbacking_from_list_id == f"!Mint:{USDC_BACKING_ADDRESS}"
        assert info.unbacking_to_list_id == USDC_BACKING_ADDRESS


class TestLookup:
    """Test token lookups."""

    def test_lookup_by_symbol_case_insensitive(self, token_registry):
        token = token_registry.lookup("usdc")

        assert token.symbol == "USDC"
        assert token.ibc_denom == USDC_DENOM
        assert token.decimals == 6
        assert token.backing_address == USDC_BACKING_ADDRESS

    def test_lookup_by_denom_case_insensitive(self, token_registry):
        token = token_registry.lookup(USDC_DENOM.lower())

        assert token.symbol == "USDC"
        assert token.ibc_denom == USDC_DENOM

    def test_lookup_atom(self, token_registry):
        assert token_registry.lookup("ATOM").backing_address == ATOM_BACKING_ADDRESS

    def test_lookup_unknown_ibc_denom(self, token_registry):
        """Test the synthetic descriptor for unregistered IBC denoms."""
        token = token_registry.lookup("ibc/0000000000000000000000000000000000000000000000000000000000000000")

        assert token.symbol == "UNKNOWN"
        assert token.decimals == 6
        assert token.display_name == "Unknown IBC Token"
        assert token.backing_address.startswith("bb1")

    def test_synthetic_descriptor_not_cached(self, token_registry):
        denom = "ibc/1111111111111111111111111111111111111111111111111111111111111111"
        token_registry.lookup(denom)

        assert all(token.ibc_denom != denom for token in token_registry.all_tokens())
        assert token_registry.stats["synthetic_lookups"] == 1

    def test_lookup_native_symbol_returns_none(self, token_registry):
        """Test that native coins have no backing address entry."""
        assert token_registry.lookup("BADGE") is None

    def test_lookup_garbage(self, token_registry):
        assert token_registry.lookup("not-a-token") is None

    def test_all_tokens(self, token_registry):
        symbols = sorted(token.symbol for token in token_registry.all_tokens())
        assert symbols == ["ATOM", "OSMO", "USDC"]

    def test_native_coins(self, token_registry):
        symbols = sorted(coin.symbol for coin in token_registry.native_coins())
        assert symbols == ["BADGE", "CHAOS"]

    def test_resolve_ibc_denom(self, token_registry):
        assert token_registry.resolve_ibc_denom("usdc") == USDC_DENOM
        assert token_registry.resolve_ibc_denom("ibc/XYZ") == "ibc/XYZ"
        assert token_registry.resolve_ibc_denom("nope") is None

    def test_default_registry_uses_mainnet(self):
        assert default_registry().coin_details("ubadge").decimals == 9


class TestDecimals:
    """Test decimal resolution."""

    @pytest.mark.parametrize("identifier,expected", [
        ("ubadge", 9),
        (USDC_DENOM, 6),
        ("USDC", 6),
        ("ibc/UNREGISTERED", 6),
        ("somethingelse", 9),
    ])
    def test_decimals_for(self, token_registry, identifier, expected):
        assert token_registry.decimals_for(identifier) == expected


class TestBackingAddressInfo:
    """Test backing address info resolution."""

    def test_backing_info_for_symbol(self, token_registry):
        info = token_registry.backing_address_info("USDC")

        assert info.address == USDC_BACKING_ADDRESS
        assert info.symbol == "USDC"
        assert info.unbacking_from_list_id == f"!Mint:{USDC_BACKING_ADDRESS}"

    def test_backing_info_unknown_symbol(self, token_registry):
        with pytest.raises(TokenNotFoundError, match="Could not resolve"):
            token_registry.backing_address_info("DOGE")

    def test_not_found_is_registry_error(self):
        assert issubclass(TokenNotFoundError, RegistryError)


class TestSymbolMapBuild:
    """Test build-once behaviour of the symbol map."""

    def test_built_lazily_once(self, token_registry):
        assert token_registry.stats["builds"] == 0

        token_registry.lookup("USDC")
        token_registry.lookup("ATOM")

        assert token_registry.stats["builds"] == 1

    def test_concurrent_first_lookups_build_once(self, token_registry):
        """Test that racing threads share a single build."""
        results = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            results.append(token_registry.lookup("OSMO").backing_address)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert token_registry.stats["builds"] == 1
        assert len(set(results)) == 1

    def test_custom_coin_table(self):
        registry = TokenRegistry({
            "ibc/ABC": CoinDetails(symbol="ABC", label="Abc", decimals=8, base_denom="ibc/ABC"),
        })

        assert registry.lookup("abc").decimals == 8
        assert registry.lookup("USDC") is None
