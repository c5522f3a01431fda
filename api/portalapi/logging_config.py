"""
Logging configuration for the portal client

The service embedding the client calls setup_logging() once at startup.
Login diagnostics are controlled separately by PortalConfig.DEBUG, which
raises them from DEBUG to INFO/WARNING inside PortalClient.
"""

import logging
import logging.config
import sys
from typing import Any, Dict, Optional

from portalapi.config import PortalConfig

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logging_config(log_level: str = "INFO") -> Dict[str, Any]:
    """
    Build the dictConfig for the portalapi loggers.

    httpx and httpcore log every request at INFO/DEBUG, which would repeat
    each login attempt, so they stay at WARNING whatever the level.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "portal": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": {
            "portal_console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": "portal",
                "stream": sys.stdout,
            },
        },
        "loggers": {
            "portalapi": {"level": log_level, "handlers": ["portal_console"], "propagate": False},
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
    }


def setup_logging(config: Optional[PortalConfig] = None):
    """Configure portalapi logging from LOG_LEVEL in the portal configuration."""
    config = config or PortalConfig()
    logging.config.dictConfig(get_logging_config(config.LOG_LEVEL))

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {config.LOG_LEVEL} (login diagnostics {'on' if config.DEBUG else 'off'})")
