"""Daemon entry point for ListArr."""

import sys

import uvicorn

from listarr.api.app import create_app
from listarr.config import Config
from listarr.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def start_daemon(config: Config):
    """Serve the API and run scheduled syncs until interrupted.

    Args:
        config: Application configuration
    """
    setup_logging(config.logging)

    app = create_app(config)

    logger.info(
        "Starting daemon",
        host=config.api.host,
        port=config.api.port,
        sync_interval_minutes=config.sync.interval_minutes,
    )

    try:
        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_level=config.logging.level if config.logging.level != "trace" else "debug",
            access_log=False,
        )
    except KeyboardInterrupt:
        logger.info("Daemon interrupted by user")
    except Exception as e:
        logger.exception("Daemon error", error=str(e))
        sys.exit(1)
    finally:
        logger.info("Daemon stopped")
