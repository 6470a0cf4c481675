"""Version specifier parsing and tolerance-aware comparison.

Only the leading ``major.minor.patch`` triple of a specifier takes part in
comparisons. A range modifier on the *requested* version says how much the
installed version may drift from it before it counts as a different version:

    ~1.2.3  patch may drift   -> compare major and minor
    ^1.2.3  minor may drift   -> compare major
    1.2.3   exact/major       -> compare major
"""

import re
from dataclasses import dataclass
from enum import Enum

LATEST_TAG = "latest"

VERSION_PATTERN = re.compile(
    r"^\s*(?P<prefix>\D*?)v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)(?P<suffix>.*)$"
)


class RangeModifier(Enum):
    NONE = ""
    PATCH = "~"
    MINOR = "^"

    @property
    def precision(self) -> int:
        """Number of leading version components compared for this modifier."""
        return {
            RangeModifier.PATCH: 2,
            RangeModifier.MINOR: 1,
            RangeModifier.NONE: 1,
        }[self]


@dataclass(frozen=True)
class VersionSpec:
    major: int
    minor: int
    patch: int
    modifier: RangeModifier = RangeModifier.NONE

    @property
    def triple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.modifier.value}{self.major}.{self.minor}.{self.patch}"


class _Latest:
    """Sentinel for an unconstrained version."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "LATEST"

    def __str__(self) -> str:
        return LATEST_TAG


LATEST = _Latest()

Version = VersionSpec | _Latest


def parse_version(spec: str) -> VersionSpec | None:
    """Parse a version specifier such as ``^3.1.0`` or ``1.2.3-beta.1``.

    Returns:
        The parsed VersionSpec, or None when no numeric triple can be extracted
    """
    if not spec:
        return None

    match = VERSION_PATTERN.match(spec)
    if not match:
        return None

    prefix = match.group("prefix").strip()
    if prefix in (RangeModifier.PATCH.value, RangeModifier.MINOR.value):
        modifier = RangeModifier(prefix)
    else:
        # ">=", "=", "npm:pkg@" and the like compare as exact/major
        modifier = RangeModifier.NONE

    return VersionSpec(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        modifier=modifier,
    )


def parse_version_or_latest(spec: str | None) -> Version:
    """Parse a specifier, degrading anything unparseable to LATEST."""
    if spec is None:
        return LATEST
    return parse_version(spec) or LATEST


def compare_versions(current: Version, next_version: Version) -> int:
    """Compare an installed version with a requested one. Returns -1, 0, or 1.

    The precision comes from the requested version's modifier. LATEST on
    either side differs from any concrete version; two LATEST values are equal.
    """
    if next_version is LATEST:
        return 0 if current is LATEST else 1
    if current is LATEST:
        return -1

    precision = next_version.modifier.precision
    current_key = current.triple[:precision]
    next_key = next_version.triple[:precision]

    if current_key < next_key:
        return -1
    elif current_key > next_key:
        return 1
    else:
        return 0


def split_specifier(specifier: str) -> tuple[str, str]:
    """Split ``name@version`` into name and version.

    The version defaults to ``latest``. Scoped names keep their leading ``@``.

    Examples:
        >>> split_specifier("zod@^3.0.0")
        ('zod', '^3.0.0')
        >>> split_specifier("@types/node")
        ('@types/node', 'latest')
        >>> split_specifier("@types/node@20.1.0")
        ('@types/node', '20.1.0')
    """
    specifier = specifier.strip()
    at = specifier.rfind("@")
    if at <= 0:
        return specifier, LATEST_TAG

    name, version = specifier[:at], specifier[at + 1 :]
    return name, version or LATEST_TAG


__all__ = [
    "LATEST",
    "LATEST_TAG",
    "RangeModifier",
    "VersionSpec",
    "Version",
    "parse_version",
    "parse_version_or_latest",
    "compare_versions",
    "split_specifier",
]
