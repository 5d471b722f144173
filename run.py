"""Entry point for serving the Library API.

Starts the FastAPI application under Uvicorn.  It is intended to be
executed from the project root, for example in Docker, where you only
specify a single Python file to run.

Host, port and the database location are read from environment
variables (``API_HOST``, ``API_PORT``, ``DATABASE_URL``); see
``library_api/app/core/config.py`` for the full list.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from library_api.app.core.config import settings
from library_api.app.main import app


async def run_api() -> None:
    """Serve the API until the process is interrupted."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
        # Logging is configured by create_app; keep uvicorn from replacing it.
        log_config=None,
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    logging.getLogger(__name__).info(
        "Starting %s %s on %s:%s", settings.project_name, settings.api_version, settings.api_host, settings.api_port
    )
    await run_api()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
