"""
Version number arithmetic.

Versions are three-part ``major.minor.patch`` strings. All functions here are
lenient: a malformed version never raises. Comparison treats it as ``0.0.0``
and incrementing resets it to ``1.0.0``.
"""

import re
from enum import Enum
from typing import NamedTuple, Optional, Union

from rulebook.errors import VersionError

VERSION_PATTERN = re.compile(r"([0-9]+)\.([0-9]+)\.([0-9]+)")
INITIAL_VERSION = "1.0.0"
ZERO_VERSION = "0.0.0"


class VersionBump(str, Enum):
    """Which component of a version to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class ParsedVersion(NamedTuple):
    """Numeric components of a version string."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def validate_version(version: str) -> bool:
    """Check that a version matches major.minor.patch."""
    return isinstance(version, str) and VERSION_PATTERN.fullmatch(version) is not None


def parse_version(version: str) -> Optional[ParsedVersion]:
    """
    Parse a version string into its components.

    Args:
        version: Version string (e.g. "1.2.3")

    Returns:
        ParsedVersion, or None if the string is malformed
    """
    if not isinstance(version, str):
        return None
    match = VERSION_PATTERN.fullmatch(version)
    if not match:
        return None
    return ParsedVersion(*(int(part) for part in match.groups()))


def increment_version(
    version: str, bump: Union[VersionBump, str] = VersionBump.PATCH
) -> str:
    """
    Increment a version.

    Major resets minor and patch, minor resets patch, patch only touches patch.

    Args:
        version: Current version
        bump: Component to increment

    Returns:
        The incremented version, or "1.0.0" if ``version`` is malformed

    Raises:
        ValueError: If ``bump`` is not major, minor or patch

    Example:
        >>> increment_version("1.2.3", "minor")
        '1.3.0'
    """
    bump = VersionBump(bump)
    parsed = parse_version(version)
    if parsed is None:
        return INITIAL_VERSION

    major, minor, patch = parsed
    if bump == VersionBump.MAJOR:
        return str(ParsedVersion(major + 1, 0, 0))
    if bump == VersionBump.MINOR:
        return str(ParsedVersion(major, minor + 1, 0))
    return str(ParsedVersion(major, minor, patch + 1))


def compare_versions(a: str, b: str) -> int:
    """
    Compare two versions.

    Returns:
        -1 if a < b, 0 if equal, 1 if a > b
    """
    parsed_a = parse_version(a) or ParsedVersion(0, 0, 0)
    parsed_b = parse_version(b) or ParsedVersion(0, 0, 0)
    if parsed_a == parsed_b:
        return 0
    return 1 if parsed_a > parsed_b else -1


def ensure_valid_version(version: str) -> str:
    """
    Return ``version`` unchanged, or raise if it is malformed.

    Only used where a version is taken from user input.

    Raises:
        VersionError: If the version does not match major.minor.patch
    """
    if not validate_version(version):
        raise VersionError.invalid_format(version)
    return version
