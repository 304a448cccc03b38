"""Process entry point: ``python -m routeregistry.server``.

Configuration and the registry load both happen before the HTTP listener
starts; a bad config value exits non-zero without binding a port.
"""

from __future__ import annotations

import structlog
import uvicorn

from routeregistry.app import create_app
from routeregistry.config import Settings
from routeregistry.logging_config import setup_logging
from routeregistry.state import build_state

log = structlog.get_logger()


def main() -> None:
    settings = Settings()
    setup_logging(settings.logging)
    state = build_state(settings)
    app = create_app(state)
    log.info(
        "server_starting",
        environment=settings.environment,
        host=settings.server.host,
        port=settings.server.port,
    )
    uvicorn.run(app, host=settings.server.host, port=settings.server.port, log_level="warning")


if __name__ == "__main__":
    main()
