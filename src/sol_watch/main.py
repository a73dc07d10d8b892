"""Application entry point for the sol-watch server."""

from __future__ import annotations

import logging
import os

import uvicorn

from sol_watch.config.settings import AppConfig


def main() -> None:
    """Start the sol-watch server."""
    config = AppConfig()
    level = config.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    reload = os.getenv("SOLWATCH_RELOAD", "false").lower() in ("1", "true", "yes")
    uvicorn.run(
        "sol_watch.api.app:create_app",
        factory=True,
        host=config.server.host,
        port=config.server.port,
        reload=reload,
        log_level=level.lower(),
    )


if __name__ == "__main__":
    main()
