"""Filesystem version store and the draft → published lifecycle.

A version directory that exists under the published root is never written
again. Fixing published data means publishing a new, higher version. Drafts
live under a separate root and may be overwritten freely until published.
"""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Any

import jsonschema
import structlog

from routeregistry.errors import DraftExists, DraftNotFound, NoFreeVersion, VersionConflict
from routeregistry.models.city import City, Route, Waypoint
from routeregistry.models.draft import DraftLocation, DraftReport
from routeregistry.models.registry import parse_version_dir, version_dir_name
from routeregistry.normalize import draft_filename
from routeregistry.registry import is_data_file, read_city

if TYPE_CHECKING:
    from collections.abc import Mapping

log = structlog.get_logger()


def schema_filename(version: int) -> str:
    return f"{version_dir_name(version)}.schema.json"


def city_json_schema() -> dict[str, Any]:
    """JSON schema for a single record file, generated from ``City``."""
    return City.model_json_schema()


def _write_json(path: Path, data: Any) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(data, handle, ensure_ascii=False, indent=2)
        handle.write("\n")


class VersionStore:
    """Write-once store of versions laid out as ``<root>/v<N>/<file>.json``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def path_for(self, version: int) -> Path:
        return self.root / version_dir_name(version)

    def exists(self, version: int) -> bool:
        return self.path_for(version).exists()

    def list(self) -> list[int]:
        if not self.root.is_dir():
            return []
        versions = [
            number
            for entry in self.root.iterdir()
            if entry.is_dir() and (number := parse_version_dir(entry.name)) is not None
        ]
        return sorted(versions)

    def get(self, version: int) -> dict[str, City]:
        """Filename → record for one version. Missing version gives ``{}``."""
        path = self.path_for(version)
        if not path.is_dir():
            return {}
        return {
            entry.name: read_city(entry)
            for entry in sorted(path.iterdir(), key=lambda p: p.name)
            if entry.is_file() and is_data_file(entry.name)
        }

    def put(
        self,
        version: int,
        records: Mapping[str, City],
        schema: dict[str, Any] | None = None,
    ) -> Path:
        """Create a new version. Raises ``VersionConflict`` if it exists.

        Files are written to a hidden staging directory that is renamed into
        place once complete; a failed write leaves no ``v<N>`` directory.
        """
        target = self.path_for(version)
        self.root.mkdir(parents=True, exist_ok=True)
        if target.exists():
            raise VersionConflict(f"Version {version_dir_name(version)} already exists at {target}")

        staging = Path(tempfile.mkdtemp(prefix=f".{target.name}-", dir=self.root))
        try:
            _write_json(staging / schema_filename(version), schema or city_json_schema())
            for filename, record in records.items():
                _write_json(staging / filename, record.model_dump(mode="json"))
        except Exception:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        try:
            staging.rename(target)
        except OSError:
            shutil.rmtree(staging, ignore_errors=True)
            raise VersionConflict(
                f"Version {version_dir_name(version)} was created concurrently at {target}"
            ) from None
        return target


# ----------------------------------------------------------------------
# Draft lifecycle
# ----------------------------------------------------------------------


def placeholder_city(location: DraftLocation) -> City:
    """Minimal valid record to be filled in by hand."""
    return City(
        country="Philippines",
        country_code="PH",
        island_group=location.island_group,
        region=f"Region {location.region_code}",
        region_code=location.region_code,
        province=location.province,
        province_code="XX",
        city=location.city,
        city_type="municipality",
        postal_code="0000",
        latitude=0,
        longitude=0,
        routes=[
            Route(
                route_code="01",
                name="New Route",
                waypoints=[
                    Waypoint(
                        sequence=1,
                        sub_locality="Barangay TBD",
                        sub_locality_type="barangay",
                        street="Main St",
                        destination=["Terminal", "Robinsons"],
                        latitude=0,
                        longitude=0,
                    )
                ],
            )
        ],
    )


def next_free_version(published: VersionStore, start: int, *, probe: int = 10) -> int:
    """First version above ``start`` that is not yet published."""
    for candidate in range(start + 1, start + probe + 1):
        if not published.exists(candidate):
            return candidate
    raise NoFreeVersion(
        f"Versions {start + 1}-{start + probe} are already published. Cannot create new draft."
    )


def create_draft(
    published: VersionStore,
    drafts: VersionStore,
    version: int,
    location: DraftLocation,
    *,
    overwrite: bool = False,
) -> Path:
    """Create ``<drafts>/v<N>/`` with a schema and a placeholder record.

    Returns the path of the new data file.
    """
    if published.exists(version):
        raise VersionConflict(
            f"Version {version} is already published at {published.path_for(version)}"
        )

    draft_dir = drafts.path_for(version)
    if draft_dir.exists():
        if not overwrite:
            raise DraftExists(f"Draft {version_dir_name(version)} already exists at {draft_dir}")
        shutil.rmtree(draft_dir)
        log.info("draft_removed", version=version, path=str(draft_dir))

    filename = draft_filename(
        location.island_group, location.region_code, location.province, location.city
    )
    target = drafts.put(version, {filename: placeholder_city(location)})
    log.info("draft_created", version=version, path=str(target), file=filename)
    return target / filename


def validate_drafts(drafts: VersionStore) -> list[DraftReport]:
    """Check every draft version against its own ``v<N>.schema.json``.

    Records that satisfy the schema are also checked against ``City`` so a
    draft that validates here will load once published.
    """
    reports: list[DraftReport] = []
    for version in drafts.list():
        report = DraftReport(version=str(version))
        reports.append(report)
        draft_dir = drafts.path_for(version)
        schema_name = schema_filename(version)

        schema_path = draft_dir / schema_name
        if not schema_path.is_file():
            report.problems.append(f'missing schema file "{schema_name}"')
            continue
        try:
            schema = json.loads(schema_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            report.problems.append("failed to parse schema JSON")
            continue

        validator = _compile_schema(schema)
        if isinstance(validator, str):
            report.problems.append(f"invalid schema ({validator})")
            continue

        for path in sorted(draft_dir.iterdir(), key=lambda p: p.name):
            if path.name.startswith(".") or not path.is_file() or not is_data_file(path.name):
                continue
            report.files_checked += 1
            report.problems.extend(_check_record(path, validator))
    return reports


def _compile_schema(schema: Any) -> jsonschema.protocols.Validator | str:
    """Validator for ``schema``, or the reason it is not a usable schema."""
    if not isinstance(schema, (dict, bool)):
        return "schema must be a JSON object"
    validator_cls = jsonschema.validators.validator_for(schema)
    try:
        validator_cls.check_schema(schema)
    except jsonschema.exceptions.SchemaError as exc:
        return exc.message
    return validator_cls(schema)


def _check_record(path: Path, validator: jsonschema.protocols.Validator) -> list[str]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        return [f"{path.name}: unreadable ({exc})"]
    except (ValueError, RecursionError):
        return [f"{path.name}: INVALID (not valid JSON)"]

    errors = sorted(validator.iter_errors(data), key=lambda err: err.json_path)
    if errors:
        return [f"{path.name}: INVALID at {err.json_path}: {err.message}" for err in errors]

    try:
        City.model_validate(data)
    except ValueError as exc:
        return [f"{path.name}: INVALID ({exc})"]
    return []


def publish(published: VersionStore, drafts: VersionStore, version: int) -> Path:
    """Copy a draft into the published root. One-way; never overwrites."""
    draft_dir = drafts.path_for(version)
    if not draft_dir.is_dir():
        raise DraftNotFound(f"Draft not found: {draft_dir}")

    target = published.path_for(version)
    if target.exists():
        raise VersionConflict(
            f"Version {version_dir_name(version)} is already published at {target}. "
            f"Published versions are immutable; publish a new version "
            f"(e.g. {version_dir_name(version + 1)}) instead."
        )

    published.root.mkdir(parents=True, exist_ok=True)
    try:
        shutil.copytree(draft_dir, target)
    except FileExistsError:
        raise VersionConflict(
            f"Version {version_dir_name(version)} was published concurrently"
        ) from None
    log.info("version_published", version=version, source=str(draft_dir), target=str(target))
    return target
