from __future__ import annotations

import re

from pydantic import BaseModel, field_validator

from routeregistry.models.city import IslandGroup


class DraftLocation(BaseModel):
    """Location details used to name and seed a new draft file."""

    island_group: IslandGroup
    region_code: str
    province: str
    city: str

    @field_validator("region_code")
    @classmethod
    def validate_region_code(cls, v: str) -> str:
        v = v.strip()
        if not re.match(r"^\d{2}$", v):
            raise ValueError("region_code must be a 2-digit code (e.g. 06)")
        return v

    @field_validator("province", "city")
    @classmethod
    def validate_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v


class DraftReport(BaseModel):
    """Validation outcome for one draft version directory."""

    version: str
    files_checked: int = 0
    problems: list[str] = []

    @property
    def ok(self) -> bool:
        return not self.problems
