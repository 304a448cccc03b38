from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

IslandGroup = Literal["Luzon", "Visayas", "Mindanao"]
CityType = Literal["highly_urbanized_city", "component_city", "municipality"]
SubLocalityType = Literal["district", "barangay"]


class Waypoint(BaseModel):
    """Single ordered stop within a route."""

    model_config = ConfigDict(frozen=True)

    sequence: int  # 1-based; contiguity is not enforced here
    sub_locality: str
    sub_locality_type: SubLocalityType
    street: str
    destination: tuple[str, ...]
    latitude: float
    longitude: float


class Route(BaseModel):
    model_config = ConfigDict(frozen=True)

    route_code: str
    name: str
    waypoints: tuple[Waypoint, ...]


class City(BaseModel):
    """One published data file: a city and all of its routes."""

    model_config = ConfigDict(frozen=True)

    country: Literal["Philippines"]
    country_code: Literal["PH"]
    island_group: IslandGroup
    region: str
    region_code: str
    province: str
    province_code: str
    city: str
    city_type: CityType
    postal_code: str
    latitude: float
    longitude: float
    routes: tuple[Route, ...]
