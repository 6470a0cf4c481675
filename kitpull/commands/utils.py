"""Shared helpers for commands."""

import asyncio
import logging
import sys

import click

from kitpull.errors import (
    ConfigurationMissing,
    KitpullError,
    UserCancelled,
    format_error,
    format_suggestion,
)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

_logging = logging.getLogger(__name__)


def run_or_exit(coro) -> None:
    """Run a command body and turn fatal errors into a message and exit code.

    This is the only place a kitpull command terminates the process.
    """
    try:
        asyncio.run(coro)
    except UserCancelled as e:
        click.echo(str(e))
        sys.exit(EXIT_FAILURE)
    except ConfigurationMissing as e:
        click.echo(format_suggestion(str(e), "run 'kitpull init' first"), err=True)
        sys.exit(EXIT_FAILURE)
    except KitpullError as e:
        _logging.debug(f"{type(e).__name__}: {e}")
        click.echo(format_error(str(e)), err=True)
        sys.exit(EXIT_FAILURE)
