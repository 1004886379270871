#!/usr/bin/env python3
"""
Ledger API Commands for BitBadges Toolkit CLI

Commands that talk to the BitBadges API. Requires the BITBADGES_API_KEY
environment variable.
"""

import sys

import click

from cli.context import pass_context, CLIContext, handle_cli_error
from cli.commands.validate import build_validator
from network.ledger_client import LedgerAPIClient, LedgerAPIConfig, TransactionRejectedError


def build_client(ctx: CLIContext) -> LedgerAPIClient:
    """Create a ledger client from the loaded configuration."""
    config = LedgerAPIConfig.from_env(
        api_url=ctx.get_config('ledger.api_url'),
        testnet=ctx.get_config('ledger.testnet'),
        timeout=ctx.get_config('ledger.timeout'),
        max_retries=ctx.get_config('ledger.max_retries'),
        backoff_factor=ctx.get_config('ledger.backoff_factor'),
    )
    ctx.logger.debug(f"Ledger API base URL: {config.base_url}")
    return LedgerAPIClient(config, validator=build_validator(ctx))


@click.group()
@pass_context
def ledger(ctx: CLIContext):
    """
    Ledger API commands.

    Simulate transactions and query balances through the BitBadges API.
    """
    ctx.logger.debug("Ledger command group invoked")


@ledger.command('simulate')
@click.argument('transaction_file', type=click.File('r'))
@pass_context
@handle_cli_error
def simulate(ctx: CLIContext, transaction_file):
    """
    Validate a transaction and dry-run it through the API.

    The transaction is only sent when validation reports no errors.

    Examples:
        bbtk ledger simulate tx.json
    """
    with build_client(ctx) as client:
        try:
            result = client.submit_validated(transaction_file.read())
        except TransactionRejectedError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.output_report(e.report)
            sys.exit(1)

    ctx.output(result.to_dict())

    if not result.valid:
        sys.exit(1)


@ledger.command('balance')
@click.argument('collection_id')
@click.argument('address')
@pass_context
@handle_cli_error
def balance(ctx: CLIContext, collection_id: str, address: str):
    """
    Fetch an address's balance in a collection.

    Examples:
        bbtk ledger balance 1 bb1...
    """
    with build_client(ctx) as client:
        data = client.get_balance(collection_id, address)

    ctx.output(data)
