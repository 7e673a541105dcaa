# =============================================================================
# app/log_config.py - Logging Setup
# =============================================================================
# Configures stdlib logging for scripts and services embedding the engine.
# Library modules never call this themselves; they only create module loggers
# with logging.getLogger(__name__).
#
# Usage:
#   from app.log_config import configure_logging
#   configure_logging()
# =============================================================================

import logging

from app.config import Settings, settings as default_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_log_level(config: Settings | None = None) -> int:
    """DEBUG wins over LOG_LEVEL, mirroring how the services start up."""
    config = config or default_settings
    if config.DEBUG:
        return logging.DEBUG
    return getattr(logging, config.LOG_LEVEL, logging.INFO)


def configure_logging(config: Settings | None = None) -> int:
    """
    Configure the root logger from settings.

    Returns:
        The numeric level that was applied
    """
    level = resolve_log_level(config)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return level
