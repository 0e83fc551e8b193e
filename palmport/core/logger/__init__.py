"""
Project logger: console + optional rotating JSON file.

Usage:
    from palmport.core.logger import LoggerConfig, configure

    # Once at startup (reads LOG_LEVEL, LOG_DIR, ... when no config is given)
    configure()

    # Everywhere else
    logger = logging.getLogger(__name__)
    logger.info("Order %s created", order.order_number)
"""
from palmport.core.logger.config import LoggerConfig
from palmport.core.logger.formatters import JsonFormatter, PlainConsoleFormatter
from palmport.core.logger.setup import configure

__all__ = [
    "LoggerConfig",
    "JsonFormatter",
    "PlainConsoleFormatter",
    "configure",
]
