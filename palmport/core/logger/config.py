"""
Logger configuration. Built in code or from env.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class LoggerConfig:
    """
    Configuration for the palmport logger tree.

    Use LoggerConfig.from_env() for env-based config, or build explicitly.
    """

    # Level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    level: str = "INFO"
    # Log directory for the rotating JSON file (None disables the file handler)
    log_dir: Optional[str] = None
    log_file_basename: str = "palmport"
    max_bytes: int = 5 * 1024 * 1024  # 5 MB
    backup_count: int = 5
    # Handlers are attached here; module loggers under it inherit them
    root_name: str = "palmport"
    console: bool = True
    # Third-party loggers that are too chatty at INFO
    quiet_loggers: Tuple[str, ...] = field(
        default=("httpx", "httpcore", "aiosmtplib", "sqlalchemy.engine")
    )

    @classmethod
    def from_env(cls) -> "LoggerConfig":
        """Build config from LOG_* environment variables."""
        return cls(
            level=os.environ.get("LOG_LEVEL", "INFO").upper(),
            log_dir=os.environ.get("LOG_DIR") or None,
            log_file_basename=os.environ.get("LOG_FILE_BASENAME", "palmport"),
            max_bytes=int(os.environ.get("LOG_MAX_BYTES", "5242880")),
            backup_count=int(os.environ.get("LOG_BACKUP_COUNT", "5")),
            console=os.environ.get("LOG_CONSOLE", "true").lower() in _TRUTHY,
        )
