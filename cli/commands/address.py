#!/usr/bin/env python3
"""
Address Commands for BitBadges Toolkit CLI

Commands for deriving module addresses, computing backing and wrapper
addresses, and converting between 0x and bb1 address formats.
"""

import sys
from typing import Tuple

import click

from cli.context import pass_context, CLIContext, handle_cli_error
from crypto import (
    TOKENIZATION_MODULE,
    derive_address,
    encode,
    BITBADGES_PREFIX,
    generate_alias_address_for_denom,
    detect_format,
    to_other_format,
    validate_address,
)
from registry import default_registry


@click.group()
@pass_context
def address(ctx: CLIContext):
    """
    Address derivation and conversion commands.

    Derive deterministic module addresses and convert between formats.
    """
    ctx.logger.debug("Address command group invoked")


@address.command('derive')
@click.argument('keys', nargs=-1, required=True)
@click.option('--module', '-m', default=TOKENIZATION_MODULE, show_default=True,
              help='Module name the address is derived under')
@pass_context
@handle_cli_error
def derive(ctx: CLIContext, keys: Tuple[str, ...], module: str):
    """
    Derive a module address from hex-encoded derivation keys.

    Examples:
        bbtk address derive 12 6962632f...
        bbtk address derive --module tokenization 0c 7562616467
    """
    try:
        key_bytes = [bytes.fromhex(key) for key in keys]
    except ValueError:
        raise click.BadParameter("Derivation keys must be hex strings", param_hint='KEYS')

    raw = derive_address(module, key_bytes)
    ctx.output({
        "module": module,
        "keys": list(keys),
        "address": encode(BITBADGES_PREFIX, raw),
        "hex": raw.hex(),
    })


@address.command('backing')
@click.argument('denom_or_symbol')
@pass_context
@handle_cli_error
def backing(ctx: CLIContext, denom_or_symbol: str):
    """
    Show the backing address and approval list ids for an IBC token.

    Examples:
        bbtk address backing USDC
        bbtk address backing ibc/F082B65C88E4B6D5EF1DB243CDA1D331D002759E938A0F5CD3FFDC5D53B3E349
    """
    info = default_registry().backing_address_info(denom_or_symbol)
    ctx.output(info.model_dump())


@address.command('wrapped')
@click.argument('denom')
@pass_context
@handle_cli_error
def wrapped(ctx: CLIContext, denom: str):
    """Show the wrapper address of a native coin denom."""
    ctx.output({
        "denom": denom,
        "address": generate_alias_address_for_denom(denom),
    })


@address.command('convert')
@click.argument('address_text', metavar='ADDRESS')
@pass_context
@handle_cli_error
def convert(ctx: CLIContext, address_text: str):
    """
    Convert an address between 0x and bb1 formats.

    Examples:
        bbtk address convert 0x742d35cc6634c0532925a3b844bc454e4438f44e
    """
    ctx.output({
        "input": address_text,
        "format": detect_format(address_text).value,
        "converted": to_other_format(address_text),
    })


@address.command('detect')
@click.argument('address_text', metavar='ADDRESS')
@pass_context
@handle_cli_error
def detect(ctx: CLIContext, address_text: str):
    """Detect the format of an address."""
    ctx.output({
        "address": address_text,
        "format": detect_format(address_text).value,
    })


@address.command('check')
@click.argument('address_text', metavar='ADDRESS')
@pass_context
@handle_cli_error
def check(ctx: CLIContext, address_text: str):
    """Validate an address; exits with status 1 when it is invalid."""
    result = validate_address(address_text)
    ctx.output(result.to_dict())

    if not result.valid:
        sys.exit(1)
