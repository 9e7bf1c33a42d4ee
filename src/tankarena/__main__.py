"""Run the headless arena server: ``python -m tankarena``."""

import sys

import uvicorn
from loguru import logger

from tankarena.config import settings


def main() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level.upper())
    uvicorn.run("tankarena.api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
