"""
Unit tests for address format detection and conversion.
"""

import pytest

from crypto.addresses import (
    AddressFormat,
    detect_format,
    to_other_format,
    to_bitbadges_address,
    to_eth_address,
    validate_address,
)
from crypto.bech32_codec import encode
from crypto.exceptions import FormatError

ETH_ADDRESS = "0x742d35cc6634c0532925a3b844bc454e4438f44e"
BB_ADDRESS = "bb1wskntnrxxnq9x2f95wuyf0z9fezr3azw2dc0ld"
USDC_BACKING_ADDRESS = "bb1a7m8394e8u98w8uwle49dds8caexmcvqwgcadtp264gvt28uygmsdlgm0a"


class TestDetectFormat:
    """Test syntactic format detection."""

    def test_detect_eth(self):
        assert detect_format(ETH_ADDRESS) == AddressFormat.ETH
        assert detect_format("0x742d35Cc6634C0532925a3b844Bc454e4438f44e") == AddressFormat.ETH

    def test_detect_bitbadges(self):
        assert detect_format(BB_ADDRESS) == AddressFormat.BITBADGES
        assert detect_format(USDC_BACKING_ADDRESS) == AddressFormat.BITBADGES

    @pytest.mark.parametrize("address", [
        "",
        "0x742d35cc",
        "cosmos1wskntnrxxnq9x2f95wuyf0z9fezr3azwcz6mkp",
        "bb1",
        "bb1bbbb",
        "hello",
    ])
    def test_detect_unknown(self, address):
        assert detect_format(address) == AddressFormat.UNKNOWN

    def test_detection_is_syntactic(self):
        """Test that a bad checksum still detects as BitBadges."""
        assert detect_format(BB_ADDRESS[:-1] + "q") == AddressFormat.BITBADGES


class TestConversion:
    """Test conversion between the two formats."""

    def test_eth_to_bitbadges(self):
        assert to_other_format(ETH_ADDRESS) == BB_ADDRESS

    def test_bitbadges_to_eth(self):
        assert to_other_format(BB_ADDRESS) == ETH_ADDRESS

    def test_low_address_fixed_point(self):
        """Test the conversion of address 0x...01."""
        eth = "0x0000000000000000000000000000000000000001"
        bb = "bb1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqpdguex7"

        assert to_other_format(eth) == bb
        assert to_other_format(bb) == eth

    def test_round_trip_20_bytes(self):
        """Test that a 20-byte address survives a round trip."""
        address = "0x" + bytes(range(20)).hex()
        assert to_other_format(to_other_format(address)) == address

    def test_checksummed_eth_converts(self):
        """Test that mixed-case ETH input converts to the same address."""
        assert to_other_format("0x742d35Cc6634C0532925a3b844Bc454e4438f44e") == BB_ADDRESS

    def test_module_address_has_no_eth_form(self):
        """Test that 32-byte derived addresses cannot be converted."""
        with pytest.raises(FormatError, match="20-byte"):
            to_other_format(USDC_BACKING_ADDRESS)

    def test_unknown_format_rejected(self):
        with pytest.raises(FormatError, match="Unknown address format"):
            to_other_format("not-an-address")

    def test_bad_checksum_rejected(self):
        with pytest.raises(FormatError):
            to_other_format(BB_ADDRESS[:-1] + "q")

    def test_to_bitbadges_identity(self):
        assert to_bitbadges_address(BB_ADDRESS) == BB_ADDRESS
        assert to_bitbadges_address(ETH_ADDRESS) == BB_ADDRESS

    def test_to_eth_identity(self):
        assert to_eth_address(ETH_ADDRESS) == ETH_ADDRESS
        assert to_eth_address(BB_ADDRESS) == ETH_ADDRESS


class TestValidateAddress:
    """Test address validation results."""

    def test_valid_eth(self):
        result = validate_address("0x742d35Cc6634C0532925a3b844Bc454e4438f44e")

        assert result.valid
        assert result.chain == "eth"
        assert result.normalized == ETH_ADDRESS

    def test_invalid_eth(self):
        result = validate_address("0x1234")

        assert not result.valid
        assert result.chain == "eth"
        assert "40 hex characters" in result.error

    def test_valid_bitbadges(self):
        result = validate_address(BB_ADDRESS)

        assert result.valid
        assert result.prefix == "bb"
        assert not result.is_module_derived

    def test_module_derived_flag(self):
        result = validate_address(USDC_BACKING_ADDRESS)

        assert result.valid
        assert result.is_module_derived

    def test_generic_prefix_accepted(self):
        """Test that other Bech32 prefixes validate."""
        address = encode("cosmos", bytes(20))
        result = validate_address(address)

        assert result.valid
        assert result.prefix == "cosmos"

    def test_bad_bitbadges_checksum(self):
        result = validate_address(BB_ADDRESS[:-1] + "q")

        assert not result.valid
        assert result.error.startswith("Invalid BitBadges address")

    def test_empty_address(self):
        result = validate_address("   ")

        assert not result.valid
        assert result.error == "Address is empty"

    def test_to_dict(self):
        data = validate_address(BB_ADDRESS).to_dict()

        assert data["valid"] is True
        assert set(data) == {"valid", "chain", "normalized", "is_module_derived", "prefix", "error"}
