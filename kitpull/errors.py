"""Error types and formatting utilities for consistent error messages.

The core modules raise the exceptions defined here; only the click commands
turn them into a message and an exit code.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Field errors use structured format: '<entity> field '<field>' <issue>'
- Use present tense: 'must be', 'is required'
- Include actionable hints where helpful
"""


class KitpullError(Exception):
    """Base class for all fatal kitpull errors."""


class ConfigError(KitpullError):
    """Raised when config or registry loading or parsing fails.

    Provides detailed error messages including line numbers,
    column positions, and caret indicators for syntax errors.
    """


class ConfigurationMissing(KitpullError):
    """Raised when the project has no kitpull.json yet."""

    def __init__(self, config_path):
        self.config_path = config_path
        super().__init__(f"config file not found: {config_path}")


class UnknownEntry(KitpullError):
    """Raised when one or more names do not match the loaded registry."""

    def __init__(self, names: list[str]):
        self.names = list(names)
        plural = "s" if len(self.names) != 1 else ""
        super().__init__(f"Unknown option{plural}: \"{', '.join(self.names)}\"")


class UserCancelled(KitpullError):
    """Raised when the operator aborts an interactive prompt."""

    def __init__(self, message: str = "Aborted."):
        super().__init__(message)


class FetchFailure(KitpullError):
    """Raised when an entry cannot be retrieved from the template repository."""


class RegistryFetchFailure(KitpullError):
    """Raised when the registry document cannot be retrieved or parsed."""


class InstallFailure(KitpullError):
    """Raised when the package manager exits with a non-zero status."""

    def __init__(self, command: str, output: str):
        self.command = command
        self.output = output
        super().__init__(f"'{command}' failed: {output}")


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Examples:
        >>> format_error("file not found")
        'Error: file not found'
    """
    return f"Error: {message}"


def format_field_error(entity: str, field: str, issue: str) -> str:
    """Format a field validation error with structured format.

    Args:
        entity: Name of the entity being validated (e.g., "Registry entry 'biome-config'")
        field: Name of the field that failed validation
        issue: Description of the issue (e.g., "must be a non-empty string")

    Examples:
        >>> format_field_error("Registry entry 'zod'", "entry", "is required")
        "Registry entry 'zod' field 'entry' is required"
    """
    return f"{entity} field '{field}' {issue}"


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Examples:
        >>> format_suggestion("config file not found", "run 'kitpull init' to create one")
        "Error: config file not found. Hint: run 'kitpull init' to create one"
    """
    return f"{format_error(message)}. Hint: {suggestion}"


__all__ = [
    "KitpullError",
    "ConfigError",
    "ConfigurationMissing",
    "UnknownEntry",
    "UserCancelled",
    "FetchFailure",
    "RegistryFetchFailure",
    "InstallFailure",
    "format_error",
    "format_field_error",
    "format_suggestion",
]
