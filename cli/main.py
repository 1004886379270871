#!/usr/bin/env python3
"""
BitBadges Toolkit - Command Line Interface

A CLI for deriving BitBadges addresses, looking up IBC tokens, validating
transaction JSON and simulating transactions through the BitBadges API.
"""

from typing import Optional

import click

from cli import __version__
from cli.context import CLIContext, pass_context


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('--config-file', '-c',
              type=click.Path(dir_okay=False),
              help='Path to configuration file')
@click.option('--profile', '-p',
              type=click.Choice(['mainnet', 'testnet']),
              help='Configuration profile')
@click.option('--output-format', '-o',
              type=click.Choice(['table', 'json', 'yaml']),
              default=None,
              help='Output format (default from configuration, else table)')
@click.option('--verbose', '-v',
              count=True,
              help='Increase verbosity (-v for INFO, -vv for DEBUG)')
@click.version_option(__version__, prog_name='bbtk')
@pass_context
def cli(ctx: CLIContext, config_file: Optional[str], profile: Optional[str],
        output_format: Optional[str], verbose: int):
    """
    BitBadges Toolkit (bbtk) Command Line Interface

    Derive deterministic module addresses, convert between 0x and bb1
    address formats, look up IBC tokens and validate transactions before
    they are sent to the BitBadges API.

    Examples:
        bbtk address backing USDC
        bbtk address convert 0x742d35cc6634c0532925a3b844bc454e4438f44e
        bbtk token lookup all
        bbtk validate tx.json
    """
    ctx.config_file = config_file
    ctx.profile = profile
    ctx.output_format = output_format
    ctx.verbose = verbose

    # Initialize logging
    ctx.setup_logging()

    # Load configuration
    ctx.load_config()

    ctx.logger.debug("CLI initialized with context")


# Command registration
def register_commands():
    """Register all command modules with the main CLI."""
    from cli.commands.address import address
    from cli.commands.token import token
    from cli.commands.validate import validate
    from cli.commands.ledger import ledger
    from cli.commands.config import config

    for command in (address, token, validate, ledger, config):
        cli.add_command(command)


register_commands()


def main():
    """Console script entry point."""
    cli()


if __name__ == '__main__':
    main()
