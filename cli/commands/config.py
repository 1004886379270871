#!/usr/bin/env python3
"""
Configuration Commands for BitBadges Toolkit CLI
"""

import sys

import click

from cli.context import pass_context, CLIContext, handle_cli_error


@click.group()
@pass_context
def config(ctx: CLIContext):
    """
    Configuration management commands.

    Inspect and check the merged CLI configuration.
    """
    ctx.logger.debug("Config command group invoked")


@config.command('show')
@pass_context
@handle_cli_error
def show(ctx: CLIContext):
    """Show the merged configuration and where it came from."""
    data = ctx.config.redacted()
    if ctx.output_format in ('json', 'yaml'):
        ctx.output({"config": data, "sources": ctx.config.get_sources()})
        return

    ctx.output(data)
    click.echo(f"\nSources: {', '.join(ctx.config.get_sources())}")


@config.command('validate')
@pass_context
@handle_cli_error
def validate_config(ctx: CLIContext):
    """Check the configuration; exits with status 1 when it has problems."""
    errors = ctx.config.validate()

    if errors:
        for error in errors:
            click.echo(f"  - {error}", err=True)
        click.echo(f"Configuration has {len(errors)} problem(s)", err=True)
        sys.exit(1)

    click.echo("Configuration is valid")
