"""HTTP surface: ``GET /{version}/{city}`` over a loaded registry."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from routeregistry.errors import ErrorCode, RegistryError
from routeregistry.models.city import City
from routeregistry.state import AppState

log = structlog.get_logger()

_STATUS_BY_CODE = {
    ErrorCode.MALFORMED_QUERY: 400,
    ErrorCode.LOOKUP_MISS: 404,
}


def create_app(state: AppState) -> FastAPI:
    app = FastAPI(title="Route Registry")

    @app.exception_handler(RegistryError)
    async def registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
        status = _STATUS_BY_CODE.get(exc.code, 500)
        log.info("request_rejected", path=request.url.path, code=exc.code, status=status)
        return JSONResponse(status_code=status, content=exc.to_dict())

    @app.get("/health")
    def health() -> dict:
        registry = state.registry
        return {
            "status": "ok",
            "versions": registry.list_versions(),
            "files": registry.stats.files_loaded,
        }

    @app.get("/{version}/{city}", response_model=City)
    def get_routes_by_city(version: str, city: str) -> City:
        """Example: ``/v1/iloilo``."""
        return state.registry.find_by_city(version, city)

    return app
