from __future__ import annotations

from routeregistry.models.city import City, Route, Waypoint
from routeregistry.models.draft import DraftLocation, DraftReport
from routeregistry.models.registry import (
    LoadStats,
    RegistryIndexes,
    file_key,
    parse_version_dir,
    parse_version_number,
    parse_version_token,
    version_dir_name,
)

__all__ = [
    # city
    "City",
    "Route",
    "Waypoint",
    # draft
    "DraftLocation",
    "DraftReport",
    # registry
    "LoadStats",
    "RegistryIndexes",
    "file_key",
    "parse_version_dir",
    "parse_version_number",
    "parse_version_token",
    "version_dir_name",
]
