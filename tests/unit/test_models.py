"""Unit tests for routeregistry.models and routeregistry.errors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from pydantic import ValidationError

from routeregistry.errors import ErrorCode, LookupMiss, MalformedQuery, RegistryError
from routeregistry.models import (
    City,
    DraftLocation,
    RegistryIndexes,
    parse_version_dir,
    parse_version_number,
    parse_version_token,
)

if TYPE_CHECKING:
    from collections.abc import Callable


class TestCity:
    def test_parses_valid_payload(self, city_payload: Callable[..., dict[str, Any]]) -> None:
        city = City.model_validate(city_payload())
        assert city.city == "Iloilo City"
        assert city.routes[0].waypoints[1].sub_locality_type == "barangay"
        assert city.routes[0].waypoints[0].destination == ("City Proper", "SM City")

    def test_rejects_unknown_island_group(self, city_payload: Callable[..., dict[str, Any]]) -> None:
        with pytest.raises(ValidationError):
            City.model_validate(city_payload(island_group="Palawan"))

    def test_rejects_missing_routes(self, city_payload: Callable[..., dict[str, Any]]) -> None:
        payload = city_payload()
        del payload["routes"]
        with pytest.raises(ValidationError):
            City.model_validate(payload)

    def test_does_not_validate_coordinate_ranges(
        self, city_payload: Callable[..., dict[str, Any]]
    ) -> None:
        city = City.model_validate(city_payload(latitude=512.0))
        assert city.latitude == 512.0

    def test_records_are_frozen(self, city_payload: Callable[..., dict[str, Any]]) -> None:
        city = City.model_validate(city_payload())
        with pytest.raises(ValidationError):
            city.city = "Elsewhere"  # type: ignore[misc]


class TestVersionParsing:
    def test_version_dir(self) -> None:
        assert parse_version_dir("v0") == 0
        assert parse_version_dir("v12") == 12

    @pytest.mark.parametrize("name", ["1", "v", "v1a", "V1", ".v1", "v-1", "version1"])
    def test_version_dir_rejects(self, name: str) -> None:
        assert parse_version_dir(name) is None

    def test_version_token_strips_prefix(self) -> None:
        assert parse_version_token("v12") == "12"

    def test_version_token_without_prefix_is_malformed(self) -> None:
        with pytest.raises(MalformedQuery) as exc_info:
            parse_version_token("1")
        assert exc_info.value.code == ErrorCode.MALFORMED_QUERY

    def test_version_number(self) -> None:
        assert parse_version_number(" 42 ") == 42

    def test_version_number_rejects_negative(self) -> None:
        with pytest.raises(MalformedQuery):
            parse_version_number("-1")


class TestRegistryIndexes:
    def test_empty_by_default(self) -> None:
        indexes = RegistryIndexes()
        assert len(indexes.by_file) == 0
        assert indexes.stats.files_loaded == 0

    def test_build_groups_files_by_version(
        self, city_payload: Callable[..., dict[str, Any]]
    ) -> None:
        city = City.model_validate(city_payload())
        indexes = RegistryIndexes.build(
            {"1/a.json": city, "1/b.json": city, "2/c.json": city},
            {},
            RegistryIndexes().stats,
        )
        assert indexes.files_by_version["1"] == ("a.json", "b.json")
        assert indexes.files_by_version["2"] == ("c.json",)

    def test_mappings_are_read_only(self) -> None:
        indexes = RegistryIndexes()
        with pytest.raises(TypeError):
            indexes.by_file["1/x.json"] = None  # type: ignore[index]


class TestDraftLocation:
    def test_strips_fields(self) -> None:
        loc = DraftLocation(island_group="Visayas", region_code=" 06 ", province=" Iloilo ", city="Iloilo City")
        assert loc.region_code == "06"
        assert loc.province == "Iloilo"

    def test_region_code_must_be_two_digits(self) -> None:
        with pytest.raises(ValidationError):
            DraftLocation(island_group="Visayas", region_code="6", province="Iloilo", city="Iloilo City")

    def test_city_required(self) -> None:
        with pytest.raises(ValidationError):
            DraftLocation(island_group="Visayas", region_code="06", province="Iloilo", city="   ")


class TestRegistryError:
    def test_envelope(self) -> None:
        err = LookupMiss("No routes published in version v99")
        assert err.to_dict() == {
            "error": {
                "code": "LOOKUP_MISS",
                "message": "No routes published in version v99",
                "recoverable": False,
            }
        }

    def test_code_override(self) -> None:
        err = RegistryError("boom", code=ErrorCode.PARSE_FAILURE, recoverable=True)
        assert err.code == ErrorCode.PARSE_FAILURE
        assert err.recoverable is True
        assert str(err) == "boom"
