"""Run the relay server: python -m driverelay"""

from __future__ import annotations

import logging
import sys

import uvicorn

from driverelay.config import load_settings
from driverelay.errors import ConfigurationError
from driverelay.server import create_app

logger = logging.getLogger("driverelay")


def main() -> int:
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Invalid configuration: %s", exc)
        return 1

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    app = create_app(settings)
    logger.info("Server is running on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
