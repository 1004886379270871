#!/usr/bin/env python3
"""
Transaction Validation Command for BitBadges Toolkit CLI

Checks a transaction JSON document against the validation rules and
reports every error and warning with the path of the offending value.
"""

import sys
from typing import Tuple

import click

from cli.context import pass_context, CLIContext, handle_cli_error
from validator import ValidationEngine, create_default_validator


def build_validator(ctx: CLIContext, extra_disabled: Tuple[str, ...] = ()) -> ValidationEngine:
    """Create a validator honouring configured and command-line disabled rules."""
    disabled = list(ctx.get_config('validator.disabled_rules', []) or [])
    disabled.extend(rule for rule in extra_disabled if rule not in disabled)
    return create_default_validator({"disabled_rules": disabled})


@click.command('validate')
@click.argument('transaction_file', type=click.File('r'))
@click.option('--disable-rule', 'disabled_rules', multiple=True,
              help='Skip a validation rule by name (repeatable)')
@pass_context
@handle_cli_error
def validate(ctx: CLIContext, transaction_file, disabled_rules: Tuple[str, ...]):
    """
    Validate a transaction JSON file.

    Use "-" to read the transaction from standard input. Exits with status 1
    when the transaction has any error.

    Examples:
        bbtk validate tx.json
        cat tx.json | bbtk -o json validate -
    """
    engine = build_validator(ctx, disabled_rules)
    report = engine.validate_json(transaction_file.read())

    ctx.logger.info(f"Validated {transaction_file.name}: valid={report.valid}")
    ctx.output_report(report)

    if not report.valid:
        sys.exit(1)
