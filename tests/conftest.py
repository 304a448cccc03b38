"""Shared fixtures: sample City payloads and on-disk version trees."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest
import structlog

from routeregistry.registry import Registry

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


def _city_payload(
    city: str = "Iloilo City",
    province: str = "Iloilo",
    island_group: str = "Visayas",
    region_code: str = "06",
    **overrides: Any,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "country": "Philippines",
        "country_code": "PH",
        "island_group": island_group,
        "region": "Western Visayas",
        "region_code": region_code,
        "province": province,
        "province_code": "ILO",
        "city": city,
        "city_type": "highly_urbanized_city",
        "postal_code": "5000",
        "latitude": 10.7202,
        "longitude": 122.5621,
        "routes": [
            {
                "route_code": "01",
                "name": "Jaro - City Proper",
                "waypoints": [
                    {
                        "sequence": 1,
                        "sub_locality": "Jaro",
                        "sub_locality_type": "district",
                        "street": "E. Lopez St",
                        "destination": ["City Proper", "SM City"],
                        "latitude": 10.7276,
                        "longitude": 122.5585,
                    },
                    {
                        "sequence": 2,
                        "sub_locality": "Tabuc Suba",
                        "sub_locality_type": "barangay",
                        "street": "Lopez Jaena St",
                        "destination": ["City Proper"],
                        "latitude": 10.7189,
                        "longitude": 122.5560,
                    },
                ],
            }
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any setup_logging() call so later tests do not write to a closed stream."""
    yield
    structlog.reset_defaults()


@pytest.fixture()
def city_payload() -> Callable[..., dict[str, Any]]:
    """Factory for valid City dicts; keyword arguments override fields."""
    return _city_payload


@pytest.fixture()
def write_version() -> Callable[..., Path]:
    """Write ``<root>/v<N>/`` with the given files.

    ``files`` maps filename to either a dict (dumped as JSON) or a raw string.
    """

    def _write(
        root: Path,
        version: int,
        files: dict[str, dict[str, Any] | str],
        *,
        schema: bool = True,
    ) -> Path:
        version_dir = root / f"v{version}"
        version_dir.mkdir(parents=True, exist_ok=True)
        if schema:
            (version_dir / f"v{version}.schema.json").write_text('{"type": "object"}', encoding="utf-8")
        for name, content in files.items():
            text = content if isinstance(content, str) else json.dumps(content)
            (version_dir / name).write_text(text, encoding="utf-8")
        return version_dir

    return _write


@pytest.fixture()
def published_root(tmp_path: Path, write_version: Callable[..., Path]) -> Path:
    """Published tree with versions 1, 2 and 10."""
    root = tmp_path / "data"
    write_version(
        root,
        1,
        {
            "visayas_region-06_iloilo_iloilo-city.json": _city_payload(),
            "luzon_region-03_pampanga_angeles.json": _city_payload(
                city="Angeles", province="Pampanga", island_group="Luzon", region_code="03"
            ),
        },
    )
    davao = _city_payload(
        city="Davao City", province="Davao del Sur", island_group="Mindanao", region_code="11"
    )
    write_version(root, 2, {"mindanao_region-11_davao-del-sur_davao-city.json": davao})
    cebu = _city_payload(city="Cebu City", province="Cebu", region_code="07")
    write_version(root, 10, {"visayas_region-07_cebu_cebu-city.json": cebu})
    return root


@pytest.fixture()
def registry(published_root: Path) -> Registry:
    return Registry.from_root(published_root)
