"""
API main entry point.

Runs the tier rewards REST API with aiohttp.
"""

import sys
from pathlib import Path

from aiohttp import web
from loguru import logger


# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.app import create_app  # noqa: E402
from api.initialization.logging import setup_logging  # noqa: E402
from app.config.settings import settings  # noqa: E402


def main() -> None:
    """Initialize and run the API server."""
    setup_logging()

    app = create_app()
    logger.info(f"API listening on {settings.api_host}:{settings.api_port}")
    web.run_app(
        app,
        host=settings.api_host,
        port=settings.api_port,
        print=None,
    )


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("API stopped by user (KeyboardInterrupt)")
    except Exception as e:
        logger.exception(f"API crashed: {e}")
        sys.exit(1)
