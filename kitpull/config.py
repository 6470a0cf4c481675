"""Configuration loading and JSON preprocessing utilities."""

import json
import re
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError, ConfigurationMissing
from .paths import get_config_path

PACKAGE_MANAGERS = ("npm", "pnpm", "bun")
DEFAULT_REPOSITORY = "romanlamsal/lamsal-kit"

REPOSITORY_PATTERN = re.compile(r"^[\w.-]+/[\w.-]+$")


@dataclass
class KitConfig:
    """Project-local settings stored in kitpull.json."""
    package_manager: str
    src_directory: str
    repository: str = DEFAULT_REPOSITORY

    def __post_init__(self):
        if self.package_manager not in PACKAGE_MANAGERS:
            raise ValueError(
                f"packageManager must be one of {', '.join(PACKAGE_MANAGERS)}, "
                f"got '{self.package_manager}'"
            )
        if not self.src_directory or not isinstance(self.src_directory, str):
            raise ValueError("srcDirectory must be a non-empty string")
        if not REPOSITORY_PATTERN.match(self.repository):
            raise ValueError(
                f"repository must look like 'owner/repo', got '{self.repository}'"
            )

    def to_dict(self) -> dict:
        data = {
            "packageManager": self.package_manager,
            "srcDirectory": self.src_directory,
        }
        if self.repository != DEFAULT_REPOSITORY:
            data["repository"] = self.repository
        return data


def normalize_src_directory(src_directory: str) -> str:
    """Make a source directory relative to the project root.

    Examples:
        >>> normalize_src_directory("src")
        './src'
        >>> normalize_src_directory("/lib/")
        './lib/'
        >>> normalize_src_directory("")
        './'
    """
    return re.sub(r"^\.?/*", "./", src_directory.strip(), count=1)


def validate_config(data: dict) -> KitConfig:
    """Validate and convert raw dict to KitConfig.

    Args:
        data: Raw dict from load_config() containing config data

    Returns:
        KitConfig with validated fields

    Raises:
        ConfigError: If validation fails with clear field errors
    """
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a JSON object, got {type(data).__name__}")

    for field_name in ("packageManager", "srcDirectory"):
        if field_name not in data:
            raise ConfigError(f"Missing required field: {field_name}")
        if not isinstance(data[field_name], str):
            raise ConfigError(
                f"{field_name} must be a string, got {type(data[field_name]).__name__}"
            )

    repository = data.get("repository", DEFAULT_REPOSITORY)
    if not isinstance(repository, str):
        raise ConfigError(
            f"repository must be a string, got {type(repository).__name__}"
        )

    try:
        return KitConfig(
            package_manager=data["packageManager"],
            src_directory=data["srcDirectory"],
            repository=repository,
        )
    except ValueError as e:
        raise ConfigError(str(e))


def read_kit_config(project_dir: Path) -> KitConfig:
    """Load kitpull.json from the project directory.

    Raises:
        ConfigurationMissing: If the project has not been initialized
        ConfigError: If the file is malformed
    """
    config_path = get_config_path(project_dir)
    if not config_path.exists():
        raise ConfigurationMissing(config_path)
    return validate_config(load_config(config_path))


def write_kit_config(project_dir: Path, config: KitConfig) -> Path:
    config_path = get_config_path(project_dir)
    config_path.write_text(json.dumps(config.to_dict(), indent=2) + "\n")
    return config_path


def preprocess_jsonish(text: str) -> str:
    """
    Preprocess JSON-ish text into strict JSON.

    Handles:
    - // line comments (replaced with spaces)
    - Trailing commas before ] or } (replaced with space)
    - Properly handles strings (escaped quotes don't end strings)

    Replaces stripped characters with spaces to preserve line/column positions
    for error messages.
    """
    result = []
    i = 0
    n = len(text)

    NORMAL = 0
    IN_STRING = 1
    ESCAPE = 2
    SLASH = 3  # Saw '/', checking if next is '/' for comment
    IN_COMMENT = 4

    state = NORMAL

    while i < n:
        char = text[i]

        if state == IN_COMMENT:
            if char == "\n":
                result.append(char)
                state = NORMAL
            else:
                result.append(" ")
            i += 1

        elif state == ESCAPE:
            result.append(char)
            state = IN_STRING
            i += 1

        elif state == IN_STRING:
            if char == "\\":
                state = ESCAPE
            elif char == '"':
                state = NORMAL
            result.append(char)
            i += 1

        elif state == SLASH:
            if char == "/":
                result[-1] = " "
                result.append(" ")
                state = IN_COMMENT
            else:
                result.append(char)
                state = NORMAL
            i += 1

        else:
            if char == '"':
                result.append(char)
                state = IN_STRING
            elif char == "/":
                result.append(char)
                state = SLASH
            elif char == ",":
                # Trailing comma: only whitespace and // comments before ] or }
                j = i + 1
                while j < n:
                    if text[j] in " \t\r\n":
                        j += 1
                    elif text[j] == "/" and j + 1 < n and text[j + 1] == "/":
                        j += 2
                        while j < n and text[j] != "\n":
                            j += 1
                    else:
                        break
                result.append(" " if j < n and text[j] in "]}" else char)
            else:
                result.append(char)
            i += 1

    return "".join(result)


def _format_syntax_error(original_text: str, error: json.JSONDecodeError) -> str:
    """Format a JSON syntax error with line, caret, and context."""
    lines = original_text.split("\n")
    line_num = error.lineno
    col_num = error.colno

    msg_parts = [f"Syntax error at line {line_num}, col {col_num}: {error.msg}"]

    if 1 <= line_num <= len(lines):
        msg_parts.append(lines[line_num - 1])
        msg_parts.append(" " * (col_num - 1) + "^")

    return "\n".join(msg_parts)


def parse_jsonish(original_text: str):
    """Parse JSON-ish text into Python data.

    Raises:
        ConfigError: If the text contains syntax errors
    """
    try:
        return json.loads(preprocess_jsonish(original_text))
    except json.JSONDecodeError as e:
        raise ConfigError(_format_syntax_error(original_text, e)) from e


def read_text_file(file_path: Path) -> str:
    """Read a UTF-8 file, mapping OS errors to ConfigError."""
    try:
        return file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"File not found: {file_path}")
    except PermissionError:
        raise ConfigError(f"Permission denied reading file: {file_path}")
    except UnicodeDecodeError:
        raise ConfigError(f"File is not valid UTF-8: {file_path}")
    except OSError as e:
        raise ConfigError(f"Error reading file {file_path}: {e}")


def load_config(path_or_text: Path | str) -> dict:
    """Load and parse a JSON config file.

    Accepts either a file path or raw text. The input can be 'JSON-ish':
    trailing commas and // line comments are tolerated.

    Raises:
        ConfigError: If the file cannot be read or contains syntax errors.
        TypeError: If path_or_text is neither Path nor str.
    """
    if isinstance(path_or_text, Path):
        original_text = read_text_file(path_or_text)
    elif isinstance(path_or_text, str):
        original_text = path_or_text
    else:
        raise TypeError(
            f"path_or_text must be Path or str, got {type(path_or_text).__name__}"
        )

    result = parse_jsonish(original_text)

    if not isinstance(result, dict):
        raise ConfigError(f"Config must be a JSON object, got {type(result).__name__}")

    return result


__all__ = [
    "PACKAGE_MANAGERS",
    "DEFAULT_REPOSITORY",
    "KitConfig",
    "normalize_src_directory",
    "validate_config",
    "read_kit_config",
    "write_kit_config",
    "preprocess_jsonish",
    "parse_jsonish",
    "read_text_file",
    "load_config",
]
