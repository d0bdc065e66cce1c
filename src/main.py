"""Service entry point."""

import logging

import uvicorn

from api.app import create_app
from app_logging import setup_logging
from db.database import init_database
from settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Initialize logging and the database, then serve the API."""
    settings = get_settings()

    setup_logging(
        level=settings.service.log_level,
        json_output=settings.service.log_format == "json",
        environment=settings.service.environment,
    )

    session_factory = init_database(settings.database.url, echo=settings.database.echo)
    app = create_app(session_factory, settings=settings)

    logger.info("Starting dispatch service on %s:%s", settings.service.host, settings.service.port)
    uvicorn.run(
        app,
        host=settings.service.host,
        port=settings.service.port,
        log_level=settings.service.log_level.lower(),
    )


if __name__ == "__main__":
    main()
