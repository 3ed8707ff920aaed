"""Versioning - Apply semantic version increments to tag names."""

import re
from dataclasses import dataclass

import semver

from nextver.commits import BumpType

PREFIX_PATTERN = re.compile(r'^(?P<prefix>[^0-9]*)(?P<version>.*)$')


class VersionError(Exception):
    """Raised when a tag cannot be interpreted as a semantic version."""
    pass


@dataclass(frozen=True)
class NextVersion:
    """The computed version, with and without the tag prefix."""
    prefixed: str
    strict: str


def split_prefix(tag_name: str) -> tuple[str, str]:
    """Split 'v1.2.3' into ('v', '1.2.3')."""
    match = PREFIX_PATTERN.match(tag_name.strip())
    return match.group('prefix'), match.group('version')


def increment(base: str, bump: BumpType) -> str:
    """Return the bare next version for base (prefix allowed) and bump."""
    _, bare = split_prefix(base)
    try:
        version = semver.Version.parse(bare)
    except ValueError:
        raise VersionError(f"Tag '{base}' is not a valid semantic version")

    # A prerelease is promoted to its own release first (1.3.0-rc.1 + minor -> 1.3.0)
    if bump in (BumpType.MAJOR, BumpType.MINOR, BumpType.PATCH):
        return str(version.next_version(bump.value))
    raise VersionError(f"Cannot increment {base} without a version bump")


def next_version(tag_name: str, bump: BumpType, default_prefix: str = "v") -> NextVersion:
    """Increment tag_name and reattach its prefix (or default_prefix if it has none)."""
    prefix, _ = split_prefix(tag_name)
    strict = increment(tag_name, bump)
    return NextVersion(prefixed=f"{prefix or default_prefix}{strict}", strict=strict)
