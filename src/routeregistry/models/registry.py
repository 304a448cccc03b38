from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from routeregistry.errors import MalformedQuery

if TYPE_CHECKING:
    from collections.abc import Mapping

    from routeregistry.models.city import City

_VERSION_DIR_RE = re.compile(r"^v(\d+)$")
_VERSION_ARG_RE = re.compile(r"^\d+$")


def parse_version_dir(name: str) -> int | None:
    """Return the version number of a ``v<N>`` directory name, or None."""
    match = _VERSION_DIR_RE.match(name)
    return int(match.group(1)) if match else None


def parse_version_token(token: str) -> str:
    """Strip the ``v`` prefix from a query token such as ``"v12"``.

    Raises ``MalformedQuery`` for anything that is not ``v<digits>``.
    """
    match = _VERSION_DIR_RE.match(token)
    if not match:
        raise MalformedQuery('Version must be in format "v1", "v12", etc.')
    return match.group(1)


def parse_version_number(value: str) -> int:
    """Parse a bare non-negative integer version (CLI arguments)."""
    value = value.strip()
    if not _VERSION_ARG_RE.match(value):
        raise MalformedQuery("Version must be a non-negative integer (e.g., 0, 1, 42)")
    return int(value)


def version_dir_name(version: int | str) -> str:
    return f"v{version}"


def file_key(version: str, filename: str) -> str:
    return f"{version}/{filename}"


@dataclass(frozen=True)
class LoadStats:
    """Counts reported after a load pass. Informational only."""

    files_loaded: int = 0
    files_failed: int = 0
    versions_scanned: int = 0
    versions_missing_schema: tuple[str, ...] = ()
    root_missing: bool = False


@dataclass(frozen=True)
class RegistryIndexes:
    """Immutable snapshot built from a published root in a single pass.

    Never mutated after construction; a reload builds a new instance.
    """

    # "<version>/<filename>" -> record
    by_file: Mapping[str, City] = field(default_factory=lambda: MappingProxyType({}))

    # location key (see normalize.location_key) -> file key
    by_location: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    # version -> filenames, in load order
    files_by_version: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    stats: LoadStats = field(default_factory=LoadStats)

    @classmethod
    def build(
        cls,
        by_file: dict[str, City],
        by_location: dict[str, str],
        stats: LoadStats,
    ) -> RegistryIndexes:
        files_by_version: dict[str, list[str]] = {}
        for key in by_file:
            version, _, filename = key.partition("/")
            files_by_version.setdefault(version, []).append(filename)
        return cls(
            by_file=MappingProxyType(dict(by_file)),
            by_location=MappingProxyType(dict(by_location)),
            files_by_version=MappingProxyType(
                {version: tuple(names) for version, names in files_by_version.items()}
            ),
            stats=stats,
        )
