"""
Logger setup: attach console and rotating JSON file handlers from config.
"""
from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from palmport.core.logger.config import LoggerConfig
from palmport.core.logger.formatters import JsonFormatter, PlainConsoleFormatter


def configure(config: Optional[LoggerConfig] = None) -> logging.Logger:
    """
    Configure the palmport root logger. Call once at application startup.
    If config is None, uses LoggerConfig.from_env(). Returns the root logger.
    """
    if config is None:
        config = LoggerConfig.from_env()
    level = getattr(logging, config.level.upper(), logging.INFO)

    root = logging.getLogger(config.root_name)
    root.setLevel(level)
    # Reconfiguring (tests, reload) must not stack handlers
    root.handlers.clear()

    if config.console:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(PlainConsoleFormatter())
        root.addHandler(console)

    if config.log_dir and config.log_dir.strip():
        try:
            os.makedirs(config.log_dir, exist_ok=True)
        except OSError:
            root.warning("Could not create log dir %s, skipping file handler", config.log_dir)
        else:
            file_handler = RotatingFileHandler(
                os.path.join(config.log_dir, f"{config.log_file_basename}.log"),
                maxBytes=config.max_bytes,
                backupCount=config.backup_count,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(JsonFormatter())
            root.addHandler(file_handler)

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    root.propagate = False
    return root
