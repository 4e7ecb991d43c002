"""Run the service with uvicorn: ``python -m offlookup`` or ``offlookup``."""

import logging

import uvicorn

from offlookup.config import get_settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT, force=True)
    logging.getLogger(__name__).info("Open Food Facts API server starting on port %d", settings.port)
    uvicorn.run("offlookup.app:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
