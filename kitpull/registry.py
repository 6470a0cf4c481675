"""Registry document models, validation and loading."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .config import parse_jsonish, read_text_file
from .errors import ConfigError, RegistryFetchFailure, UnknownEntry, format_field_error
from .execution import fetch_url_content

_logging = logging.getLogger(__name__)

REGISTRY_ROOT = "/registry/"

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

REGISTRY_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "$schema": {"type": "string"},
        "entries": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "name": {"type": "string"},
                    "entry": {"type": "string"},
                    "dependencies": _STRING_LIST,
                    "devDependencies": _STRING_LIST,
                    "copyTo": {"type": "string"},
                },
                "required": ["name", "entry"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["$schema", "entries"],
    "additionalProperties": False,
}


@dataclass(frozen=True)
class RegistryEntry:
    """A named template that can be copied into a project."""
    name: str
    entry: str
    dependencies: tuple[str, ...] = field(default_factory=tuple)
    dev_dependencies: tuple[str, ...] = field(default_factory=tuple)
    copy_to: str | None = None

    def __post_init__(self):
        if not self.name or not isinstance(self.name, str):
            raise ValueError("name must be a non-empty string")
        if not self.entry or not isinstance(self.entry, str):
            raise ValueError("entry must be a non-empty string")
        if self.copy_to is not None and not self.copy_to:
            raise ValueError("copyTo must be a non-empty string when set")

    @property
    def relative_entry(self) -> str:
        """Entry path with the registry root prefix stripped.

        Examples:
            /registry/typed-event-emitter.ts -> typed-event-emitter.ts
            /biome.json                      -> biome.json
        """
        if self.entry.startswith(REGISTRY_ROOT):
            return self.entry[len(REGISTRY_ROOT) :]
        return self.entry.lstrip("/")

    def to_dict(self) -> dict:
        data: dict = {"name": self.name, "entry": self.entry}
        if self.dependencies:
            data["dependencies"] = list(self.dependencies)
        if self.dev_dependencies:
            data["devDependencies"] = list(self.dev_dependencies)
        if self.copy_to is not None:
            data["copyTo"] = self.copy_to
        return data


def _string_list(data: dict, field_name: str, entity: str) -> tuple[str, ...]:
    value = data.get(field_name)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(format_field_error(entity, field_name, "must be a list of strings"))
    return tuple(value)


def _has_parent_segment(path: str | None) -> bool:
    return bool(path) and ".." in path.replace("\\", "/").split("/")


def parse_registry_entry(data: dict, index: int) -> RegistryEntry:
    """Validate one raw registry record.

    Raises:
        ConfigError: If a field is missing or has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigError(f"entries[{index}] must be an object, got {type(data).__name__}")

    entity = f"Registry entry '{data.get('name', index)}'"

    for field_name in ("name", "entry"):
        if field_name not in data:
            raise ConfigError(format_field_error(entity, field_name, "is required"))
        if not isinstance(data[field_name], str):
            raise ConfigError(format_field_error(entity, field_name, "must be a string"))

    copy_to = data.get("copyTo")
    if copy_to is not None and not isinstance(copy_to, str):
        raise ConfigError(format_field_error(entity, "copyTo", "must be a string or null"))

    for field_name in ("entry", "copyTo"):
        if _has_parent_segment(data.get(field_name)):
            raise ConfigError(format_field_error(entity, field_name, "must not contain '..'"))

    try:
        return RegistryEntry(
            name=data["name"],
            entry=data["entry"],
            dependencies=_string_list(data, "dependencies", entity),
            dev_dependencies=_string_list(data, "devDependencies", entity),
            copy_to=copy_to,
        )
    except ValueError as e:
        raise ConfigError(f"{entity}: {e}")


def parse_registry(data) -> list[RegistryEntry]:
    """Convert a registry document into entries sorted by name.

    Accepts either a bare list of entries or an object with an ``entries`` list.

    Raises:
        ConfigError: If the document structure is invalid or names repeat
    """
    if isinstance(data, dict):
        if "entries" not in data:
            raise ConfigError("Missing required field: entries")
        data = data["entries"]

    if not isinstance(data, list):
        raise ConfigError(f"Registry must be a list of entries, got {type(data).__name__}")

    entries = [parse_registry_entry(item, i) for i, item in enumerate(data)]

    seen = set()
    for entry in entries:
        if entry.name in seen:
            raise ConfigError(f"Duplicate registry entry name: '{entry.name}'")
        seen.add(entry.name)

    return sorted(entries, key=lambda e: e.name.casefold())


def _parse_document(text: str, source: str):
    if source.endswith((".yaml", ".yml")):
        import yaml

        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {source}: {e}") from e
    return parse_jsonish(text)


def read_registry_file(path: Path) -> list[RegistryEntry]:
    """Load a registry document from a local JSON or YAML file."""
    return parse_registry(_parse_document(read_text_file(path), str(path)))


async def load_registry(source: str | Path) -> list[RegistryEntry]:
    """Load the registry from a local path or a remote URL.

    Raises:
        RegistryFetchFailure: If the document cannot be retrieved or parsed
    """
    _logging.debug(f"Loading registry from {source}")
    try:
        if isinstance(source, Path):
            return read_registry_file(source)

        content, status = await fetch_url_content(source)
        if content is None:
            raise RegistryFetchFailure(status)
        return parse_registry(_parse_document(content, source))
    except ConfigError as e:
        raise RegistryFetchFailure(f"Could not load registry from {source}: {e}") from e


def find_entries(registry: list[RegistryEntry], names: list[str]) -> list[RegistryEntry]:
    """Look up entries by name, preserving the requested order.

    Raises:
        UnknownEntry: If any name is not in the registry
    """
    by_name = {entry.name: entry for entry in registry}
    missing = [name for name in names if name not in by_name]
    if missing:
        raise UnknownEntry(missing)
    return [by_name[name] for name in names]


def pin_dependencies(specifiers: tuple[str, ...], versions: dict[str, str]) -> tuple[str, ...]:
    """Pin bare dependency names to the versions the template repository uses.

    Examples:
        >>> pin_dependencies(("zod", "nanoid@5.0.0", "left-pad"), {"zod": "^3.24.1"})
        ('zod@^3.24.1', 'nanoid@5.0.0', 'left-pad')
    """
    return tuple(
        f"{spec}@{versions[spec]}" if "@" not in spec.lstrip("@") and spec in versions else spec
        for spec in specifiers
    )


def build_registry(
    entries: list[RegistryEntry],
    root: Path,
    versions: dict[str, str],
    schema_url: str | None = None,
) -> dict:
    """Validate entries against a template checkout and produce the registry document.

    Args:
        entries: Entries as authored by the template maintainer
        root: Checkout of the template repository
        versions: Package versions used to pin bare dependency names
        schema_url: Published location of REGISTRY_SCHEMA, written as ``$schema``

    Raises:
        ConfigError: If an entry path does not exist under root
    """
    built = []
    for entry in entries:
        if not (root / entry.entry.lstrip("/")).exists():
            raise ConfigError(f"Registry entry {entry.name} not found at {entry.entry}")
        built.append(
            RegistryEntry(
                name=entry.name,
                entry=entry.entry,
                dependencies=pin_dependencies(entry.dependencies, versions),
                dev_dependencies=pin_dependencies(entry.dev_dependencies, versions),
                copy_to=entry.copy_to,
            ).to_dict()
        )
    if schema_url is None:
        return {"entries": built}
    return {"$schema": schema_url, "entries": built}


__all__ = [
    "REGISTRY_ROOT",
    "REGISTRY_SCHEMA",
    "pin_dependencies",
    "build_registry",
    "RegistryEntry",
    "parse_registry_entry",
    "parse_registry",
    "read_registry_file",
    "load_registry",
    "find_entries",
]
