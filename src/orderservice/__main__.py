"""Run the order management API with uvicorn: ``python -m orderservice``."""

import logging

import uvicorn

from orderservice.api import create_app
from orderservice.config import configure_logging, get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting order service on %s:%s", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
