"""Integration test fixtures.

Provides a FastAPI app wired to a registry loaded from the shared
``published_root`` tree, plus a subprocess environment whose settings point
into ``tmp_path``.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from routeregistry.app import create_app
from routeregistry.config import Settings
from routeregistry.state import AppState

if TYPE_CHECKING:
    from pathlib import Path

    from routeregistry.registry import Registry


@pytest.fixture()
def app_state(registry: Registry) -> AppState:
    return AppState(settings=Settings(), registry=registry)


@pytest.fixture()
def client(app_state: AppState):
    with TestClient(create_app(app_state)) as c:
        yield c


@pytest.fixture()
def registry_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Point published/drafts roots into tmp_path for in-process and child runs."""
    env = {
        "ROUTEREGISTRY__REGISTRY__PUBLISHED_DIR": str(tmp_path / "data"),
        "ROUTEREGISTRY__REGISTRY__DRAFTS_DIR": str(tmp_path / "next"),
        "ROUTEREGISTRY__LOGGING__FORMAT": "text",
    }
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return {**os.environ, **env}
