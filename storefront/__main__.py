"""
Server entrypoint. Run from project root:

  python -m storefront

Reads HOST, PORT, LOG_LEVEL and the rest of the settings from the
environment or .env.
"""

import logging
import sys

import uvicorn
from dotenv import load_dotenv

from storefront.core.config import get_settings


def main() -> int:
    load_dotenv()
    settings = get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    logger = logging.getLogger("storefront")
    logger.info("Starting server on %s:%s", settings.HOST, settings.PORT)
    uvicorn.run(
        "storefront.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
