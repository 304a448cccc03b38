from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from routeregistry.registry import Registry

if TYPE_CHECKING:
    from routeregistry.config import Settings


@dataclass
class AppState:
    """Everything a request handler needs, built once at startup."""

    settings: Settings
    registry: Registry


def build_state(settings: Settings) -> AppState:
    root, label = settings.source_dir()
    registry = Registry.from_root(
        root,
        label=label,
        max_file_bytes=settings.registry.max_file_bytes,
    )
    return AppState(settings=settings, registry=registry)
