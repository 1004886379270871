"""
BitBadges Toolkit - Token Registry Schema Models

This module defines the Pydantic models for coin definitions, token
descriptors with their backing addresses, and backing address reports.
"""

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


IBC_DENOM_PREFIX = "ibc/"
BITBADGES_ADDRESS_START = "bb1"


class CoinKind(str, Enum):
    """Origin of a coin denomination."""
    NATIVE = "native"
    IBC = "ibc"


class CoinDetails(BaseModel):
    """Static coin definition from the registry table."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., min_length=1, max_length=16, description="Ticker symbol")
    label: str = Field(..., min_length=1, description="Display label")
    decimals: int = Field(..., ge=0, le=18, description="Decimal exponent")
    base_denom: str = Field(..., min_length=1, description="Canonical on-chain denom")
    image: Optional[str] = Field(None, description="Logo URL")

    @field_validator('symbol')
    @classmethod
    def validate_symbol(cls, v):
        """Validate symbol format."""
        if not re.match(r'^[A-Za-z0-9]+$', v):
            raise ValueError('Symbol must contain only letters and numbers')
        return v.upper()

    @property
    def kind(self) -> CoinKind:
        """Whether the coin is bridged over IBC or native."""
        if self.base_denom.startswith(IBC_DENOM_PREFIX):
            return CoinKind.IBC
        return CoinKind.NATIVE


class TokenDescriptor(BaseModel):
    """Token info with its derived backing address."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(..., description="Upper-case symbol, or UNKNOWN")
    ibc_denom: str = Field(..., description="Canonical IBC denom")
    decimals: int = Field(..., ge=0, le=18)
    backing_address: str = Field(..., description="Derived bb1 backing address")
    display_name: str = Field(..., description="Human readable label")

    @field_validator('backing_address')
    @classmethod
    def validate_backing_address(cls, v):
        """Validate backing address prefix."""
        if not v.startswith(BITBADGES_ADDRESS_START):
            raise ValueError('Backing address must be a bb1 Bech32 address')
        return v


class BackingAddressInfo(BaseModel):
    """Backing address together with the list ids used by Smart Token approvals."""

    address: str
    ibc_denom: str
    symbol: str = "UNKNOWN"
    decimals: int = 6
    backing_from_list_id: str
    backing_to_list_id: str
    unbacking_from_list_id: str
    unbacking_to_list_id: str

    @classmethod
    def for_address(cls, address: str, ibc_denom: str, symbol: str = "UNKNOWN",
                    decimals: int = 6) -> 'BackingAddressInfo':
        """Build the approval list ids for a backing address."""
        return cls(
            address=address,
            ibc_denom=ibc_denom,
            symbol=symbol,
            decimals=decimals,
            backing_from_list_id=address,
            backing_to_list_id=f"!{address}",
            unbacking_from_list_id=f"!Mint:{address}",
            unbacking_to_list_id=address,
        )
