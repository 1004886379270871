#!/usr/bin/env python3
"""
Token Registry Commands for BitBadges Toolkit CLI
"""

import click

from cli.context import pass_context, CLIContext, handle_cli_error
from registry import default_registry, TokenNotFoundError

TOKEN_COLUMNS = ['symbol', 'ibc_denom', 'decimals', 'backing_address']


@click.group()
@pass_context
def token(ctx: CLIContext):
    """
    Token registry commands.

    Look up known IBC tokens, their decimals and backing addresses.
    """
    ctx.logger.debug("Token command group invoked")


@token.command('lookup')
@click.argument('query')
@pass_context
@handle_cli_error
def lookup(ctx: CLIContext, query: str):
    """
    Look up a token by symbol or IBC denom.

    Use "all" to list every registered token.

    Examples:
        bbtk token lookup usdc
        bbtk token lookup all
    """
    registry = default_registry()

    if query.lower() == 'all':
        tokens = [t.model_dump(include=set(TOKEN_COLUMNS)) for t in registry.all_tokens()]
        ctx.output([{column: t[column] for column in TOKEN_COLUMNS} for t in tokens])
        return

    descriptor = registry.lookup(query)
    if descriptor is None:
        raise TokenNotFoundError(f"Token not found: {query}")

    ctx.output(descriptor.model_dump())


@token.command('decimals')
@click.argument('denom')
@pass_context
@handle_cli_error
def decimals(ctx: CLIContext, denom: str):
    """Show the decimal exponent for a denom or symbol."""
    ctx.output({
        "denom": denom,
        "decimals": default_registry().decimals_for(denom),
    })
