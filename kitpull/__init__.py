"""kitpull: copy registry entries from a template repository into a project."""

import logging

import click

from .config import (
    DEFAULT_REPOSITORY,
    PACKAGE_MANAGERS,
    KitConfig,
    load_config,
    normalize_src_directory,
    read_kit_config,
    validate_config,
    write_kit_config,
)
from .errors import (
    ConfigError,
    ConfigurationMissing,
    FetchFailure,
    InstallFailure,
    KitpullError,
    RegistryFetchFailure,
    UnknownEntry,
    UserCancelled,
    format_error,
    format_suggestion,
)
from .execution import FETCH_TIMEOUT, INSTALL_TIMEOUT, run_command_async

__version__ = "0.3.0"

_logging = logging.getLogger(__name__)


class _ClickHandler(logging.Handler):
    """Route log records to stderr through click so they respect CliRunner capture."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def setup_logging(debug: bool = False) -> None:
    """Configure the kitpull logger for a command invocation.

    Args:
        debug: Show DEBUG records, otherwise only warnings and errors
    """
    logger = logging.getLogger("kitpull")
    for handler in list(logger.handlers):
        if isinstance(handler, _ClickHandler):
            logger.removeHandler(handler)

    handler = _ClickHandler()
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    logger.propagate = False


__all__ = [
    "__version__",
    "setup_logging",
    "DEFAULT_REPOSITORY",
    "PACKAGE_MANAGERS",
    "KitConfig",
    "load_config",
    "normalize_src_directory",
    "read_kit_config",
    "validate_config",
    "write_kit_config",
    "ConfigError",
    "ConfigurationMissing",
    "FetchFailure",
    "InstallFailure",
    "KitpullError",
    "RegistryFetchFailure",
    "UnknownEntry",
    "UserCancelled",
    "format_error",
    "format_suggestion",
    "FETCH_TIMEOUT",
    "INSTALL_TIMEOUT",
    "run_command_async",
]
