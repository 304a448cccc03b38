"""String normalizers.

Three separate transforms with separate contracts. They are not
interchangeable: the location key keeps punctuation, the filename slug keeps
hyphens, the city token keeps only ASCII letters and digits.
"""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN_RE = re.compile(r"-+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def _squash(value: str) -> str:
    return _WHITESPACE_RE.sub("", value.lower())


def location_key(island_group: str, region_code: str, province: str, city: str) -> str:
    """Canonical ``island_group|region_code|province|city`` join key.

    Each field is lower-cased with all whitespace removed. Used both when
    building the location index and when querying it.
    """
    return "|".join(_squash(part) for part in (island_group, region_code, province, city))


def filename_slug(value: str) -> str:
    """Filename-safe slug: ``"Iloilo City"`` -> ``"iloilo-city"``."""
    slug = _WHITESPACE_RE.sub("-", value.lower())
    slug = _SLUG_INVALID_RE.sub("", slug)
    slug = _HYPHEN_RUN_RE.sub("-", slug)
    return slug.strip("-")


def draft_filename(island_group: str, region_code: str, province: str, city: str) -> str:
    return (
        f"{filename_slug(island_group)}_region-{region_code}_"
        f"{filename_slug(province)}_{filename_slug(city)}.json"
    )


def city_token(value: str) -> str:
    """Comparison token for city-name queries: lower-case, alphanumerics only."""
    return _NON_ALNUM_RE.sub("", value.lower())
