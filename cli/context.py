"""
Shared CLI state for BitBadges Toolkit commands.

Holds the CLIContext passed to every command, the logging setup and the
error handling decorator applied to command callbacks.
"""

import functools
import logging
import sys
import traceback
from typing import Any, Optional

import click

from cli.config import ConfigurationManager
from cli.output import OutputFormatter

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
HANDLER_NAME = 'bbtk-cli'


class CLIContext:
    """Global CLI context for sharing state across commands."""

    def __init__(self):
        self.config_file: Optional[str] = None
        self.profile: Optional[str] = None
        self.output_format: Optional[str] = None
        self.verbose: int = 0
        self.config: Optional[ConfigurationManager] = None
        self.logger: logging.Logger = logging.getLogger('bbtk-cli')

    def setup_logging(self):
        """Configure logging based on verbosity level."""
        log_levels = {
            0: logging.WARNING,
            1: logging.INFO,
            2: logging.DEBUG
        }

        level = log_levels.get(min(self.verbose, 2), logging.DEBUG)

        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))

        # Replace the handler from any earlier invocation in this process
        root = logging.getLogger()
        for existing in list(root.handlers):
            if existing.get_name() == HANDLER_NAME:
                root.removeHandler(existing)
        root.addHandler(handler)
        root.setLevel(level)

        # Suppress verbose third-party logs unless in debug mode
        if self.verbose < 2:
            logging.getLogger('requests').setLevel(logging.WARNING)
            logging.getLogger('urllib3').setLevel(logging.WARNING)

    def load_config(self):
        """Load layered configuration."""
        self.config = ConfigurationManager(self.config_file, self.profile)
        self.config.load()
        self.logger.debug(f"Configuration sources: {', '.join(self.config.get_sources())}")

        if self.output_format is None:
            self.output_format = self.config.get('cli.output_format', 'table')

    def get_config(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value with fallback to default."""
        if self.config is None:
            return default
        return self.config.get(key_path, default)

    def output(self, data: Any, format_override: Optional[str] = None):
        """Output data in the selected format."""
        formatter = OutputFormatter(format_override or self.output_format or 'table')
        click.echo(formatter.format(data))

    def output_report(self, report):
        """Output a validation report in the selected format."""
        formatter = OutputFormatter(self.output_format or 'table')
        click.echo(formatter.format_report(report))


pass_context = click.make_pass_decorator(CLIContext, ensure=True)


def handle_cli_error(func):
    """Decorator to handle CLI errors gracefully."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit, click.Abort):
            raise
        except KeyboardInterrupt:
            click.echo("\nOperation cancelled by user.", err=True)
            sys.exit(130)
        except Exception as e:
            ctx = click.get_current_context(silent=True)
            cli_ctx = ctx.find_object(CLIContext) if ctx is not None else None

            click.echo(f"Error: {e}", err=True)
            if cli_ctx is not None and cli_ctx.verbose >= 2:
                # Show full traceback in debug mode
                click.echo(traceback.format_exc(), err=True)
            else:
                click.echo("Use -vv for detailed error information.", err=True)

            sys.exit(1)

    return wrapper
