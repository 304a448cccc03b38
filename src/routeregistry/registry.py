"""Route registry: version store loading, index building, and lookups.

The loader walks a root of ``v<N>`` directories once and produces an
immutable ``RegistryIndexes`` snapshot. Per-file failures are logged and
skipped; they never abort the rest of the load. ``Registry`` is the read-only
query surface over the current snapshot. ``reload()`` builds a replacement
snapshot off to the side and swaps the reference when it is complete, so
concurrent readers never see a partially built index.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog

from routeregistry.errors import ErrorCode, LookupMiss
from routeregistry.models.city import City
from routeregistry.models.registry import (
    LoadStats,
    RegistryIndexes,
    file_key,
    parse_version_dir,
    parse_version_token,
    version_dir_name,
)
from routeregistry.normalize import city_token, location_key

if TYPE_CHECKING:
    from pathlib import Path

log = structlog.get_logger()

DEFAULT_MAX_FILE_BYTES = 5 * 1024 * 1024


def is_data_file(name: str) -> bool:
    """True for ``*.json`` record files; ``*.schema.json`` is excluded."""
    return name.endswith(".json") and not name.endswith(".schema.json")


def read_city(path: Path, *, max_file_bytes: int = DEFAULT_MAX_FILE_BYTES) -> City:
    """Read and parse one record file.

    Raises ``OSError`` on read failure or an oversize file, ``ValueError``
    (including ``json.JSONDecodeError`` and ``ValidationError``) on bad content.
    """
    size = path.stat().st_size
    if size > max_file_bytes:
        raise OSError(f"file is {size} bytes, limit is {max_file_bytes}")
    content = path.read_text(encoding="utf-8")
    try:
        data = json.loads(content)
    except RecursionError:
        raise ValueError("JSON nesting exceeds the parser recursion limit") from None
    return City.model_validate(data)


def load_registry(
    root: Path,
    *,
    label: str = "published",
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> RegistryIndexes:
    """Scan ``root`` and build both indexes in a single pass.

    Versions are walked in ascending numeric order, so when several versions
    hold the same location the highest one owns the location index entry.
    """
    if not root.is_dir():
        log.warning(
            "registry_root_missing", label=label, path=str(root), code=ErrorCode.MISSING_ROOT
        )
        return RegistryIndexes(stats=LoadStats(root_missing=True))

    try:
        entries = list(root.iterdir())
    except OSError as exc:
        log.error("registry_root_unreadable", label=label, path=str(root), error=str(exc))
        return RegistryIndexes(stats=LoadStats(root_missing=True))

    versions: list[tuple[int, Path]] = []
    for entry in entries:
        number = parse_version_dir(entry.name)
        if number is None or not entry.is_dir():
            log.debug(
                "registry_entry_ignored",
                path=str(entry),
                code=ErrorCode.MALFORMED_VERSION_ENTRY,
            )
            continue
        versions.append((number, entry))
    versions.sort(key=lambda item: item[0])

    if not versions:
        log.warning("registry_no_versions", label=label, path=str(root))

    by_file: dict[str, City] = {}
    by_location: dict[str, str] = {}
    failed = 0
    missing_schema: list[str] = []

    for number, version_path in versions:
        version = str(number)
        schema_name = f"{version_dir_name(version)}.schema.json"
        if not (version_path / schema_name).is_file():
            log.warning("registry_schema_missing", version=version, expected=schema_name)
            missing_schema.append(version)

        try:
            paths = sorted(version_path.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            log.error("registry_version_unreadable", version=version, error=str(exc))
            continue

        for path in paths:
            if not is_data_file(path.name) or not path.is_file():
                continue
            try:
                city = read_city(path, max_file_bytes=max_file_bytes)
            except OSError as exc:
                failed += 1
                log.error(
                    "registry_file_load_failed",
                    file=f"{version_path.name}/{path.name}",
                    code=ErrorCode.FILE_READ_FAILURE,
                    error=str(exc),
                )
                continue
            except ValueError as exc:
                failed += 1
                log.error(
                    "registry_file_load_failed",
                    file=f"{version_path.name}/{path.name}",
                    code=ErrorCode.PARSE_FAILURE,
                    error=str(exc),
                )
                continue

            key = file_key(version, path.name)
            by_file[key] = city
            by_location[
                location_key(city.island_group, city.region_code, city.province, city.city)
            ] = key

    stats = LoadStats(
        files_loaded=len(by_file),
        files_failed=failed,
        versions_scanned=len(versions),
        versions_missing_schema=tuple(missing_schema),
    )
    log.info(
        "registry_loaded",
        label=label,
        files_loaded=stats.files_loaded,
        files_failed=stats.files_failed,
        versions_scanned=stats.versions_scanned,
    )
    return RegistryIndexes.build(by_file, by_location, stats)


class Registry:
    """Read-only lookups over the current index snapshot."""

    def __init__(
        self,
        indexes: RegistryIndexes | None = None,
        *,
        root: Path | None = None,
        label: str = "published",
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    ) -> None:
        self._root = root
        self._label = label
        self._max_file_bytes = max_file_bytes
        self._indexes = indexes if indexes is not None else RegistryIndexes()

    @classmethod
    def from_root(
        cls,
        root: Path,
        *,
        label: str = "published",
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    ) -> Registry:
        indexes = load_registry(root, label=label, max_file_bytes=max_file_bytes)
        return cls(indexes, root=root, label=label, max_file_bytes=max_file_bytes)

    @property
    def indexes(self) -> RegistryIndexes:
        return self._indexes

    @property
    def stats(self) -> LoadStats:
        return self._indexes.stats

    def reload(self, root: Path | None = None) -> LoadStats:
        """Rebuild from disk and swap the snapshot in one assignment."""
        root = root or self._root
        if root is None:
            raise ValueError("Registry has no root directory to reload from")
        fresh = load_registry(root, label=self._label, max_file_bytes=self._max_file_bytes)
        self._root = root
        self._indexes = fresh
        return fresh.stats

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_by_version_and_file(self, version: str, filename: str) -> City | None:
        return self._indexes.by_file.get(file_key(version, filename))

    def find_by_location(
        self,
        island_group: str,
        region_code: str,
        province: str,
        city: str,
    ) -> City | None:
        indexes = self._indexes
        key = indexes.by_location.get(location_key(island_group, region_code, province, city))
        if key is None:
            return None
        return indexes.by_file.get(key)

    def list_versions(self) -> list[str]:
        return sorted(self._indexes.files_by_version, key=int)

    def list_files_in_version(self, version: str) -> list[str]:
        return list(self._indexes.files_by_version.get(version, ()))

    def find_by_city(self, version_token: str, city: str) -> City:
        """Resolve a ``("v<N>", city name)`` query.

        Matches on city name only, comparing ``city_token`` forms across the
        files of that version. Raises ``MalformedQuery`` for a bad version
        token and ``LookupMiss`` when nothing matches.
        """
        version = parse_version_token(version_token)

        indexes = self._indexes
        filenames = indexes.files_by_version.get(version, ())
        if not filenames:
            raise LookupMiss(f"No routes published in version v{version}")

        wanted = city_token(city)
        for filename in filenames:
            record = indexes.by_file.get(file_key(version, filename))
            if record is not None and city_token(record.city) == wanted:
                return record

        raise LookupMiss(f'No route data found for city "{city}" in version v{version}')
