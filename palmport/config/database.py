"""
palmport.config.database – database connection config (dataclass + validators).

Env vars: DATABASE_URL, DB_POOL_SIZE, DB_MAX_OVERFLOW, DB_POOL_TIMEOUT, DB_POOL_RECYCLE, DB_ECHO.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

_ALLOWED_SCHEMES = ("postgresql://", "postgres://", "postgresql+asyncpg://", "sqlite+aiosqlite://")


def _validate_url(url: str) -> str:
    url = (url or "").strip()
    if not url:
        raise ValueError("DATABASE_URL is required and must be non-empty")
    if not url.startswith(_ALLOWED_SCHEMES):
        raise ValueError(
            "DATABASE_URL must start with postgresql://, postgres://, "
            "postgresql+asyncpg:// or sqlite+aiosqlite://"
        )
    return url


def _validate_positive_int(value: int, name: str, min_val: int = 1) -> int:
    if not isinstance(value, int) or value < min_val:
        raise ValueError(f"{name} must be an integer >= {min_val}, got {value!r}")
    return value


@dataclass(frozen=True)
class DatabaseConfig:
    """
    Connection and pool configuration.

    All fields are validated on construction. Use load_database_config()
    to build from environment variables.
    """

    url: str
    """DSN. postgresql:// is rewritten to postgresql+asyncpg:// by the engine."""

    pool_size: int = 10
    max_overflow: int = 20
    pool_timeout: int = 30
    pool_recycle: int = 1800
    """Seconds after which a pooled connection is recycled."""

    echo: bool = False
    application_name: str = "palmport-backend"

    def __post_init__(self) -> None:
        _validate_url(self.url)
        _validate_positive_int(self.pool_size, "pool_size")
        _validate_positive_int(self.max_overflow, "max_overflow", min_val=0)
        _validate_positive_int(self.pool_timeout, "pool_timeout")
        _validate_positive_int(self.pool_recycle, "pool_recycle")
        if not isinstance(self.echo, bool):
            raise ValueError("echo must be a boolean")

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")

    @classmethod
    def from_env(cls, **overrides: object) -> DatabaseConfig:
        """
        Build config from environment variables. Keyword overrides take
        precedence over env.

        Env:
            DATABASE_URL          – default postgresql://localhost/palmport
            DB_POOL_SIZE          – default 10
            DB_MAX_OVERFLOW       – default 20
            DB_POOL_TIMEOUT       – default 30
            DB_POOL_RECYCLE       – default 1800
            DB_ECHO               – "1" / "true" / "yes" → True
        """
        raw_url = overrides.get("url") or os.environ.get("DATABASE_URL", "postgresql://localhost/palmport")
        url = _validate_url(str(raw_url))

        _env_int = {
            "pool_size": ("DB_POOL_SIZE", 10),
            "max_overflow": ("DB_MAX_OVERFLOW", 20),
            "pool_timeout": ("DB_POOL_TIMEOUT", 30),
            "pool_recycle": ("DB_POOL_RECYCLE", 1800),
        }

        def _int(attr: str) -> int:
            v = overrides.get(attr)
            if v is not None:
                return int(v)
            env_name, default = _env_int[attr]
            return int(os.environ.get(env_name, default))

        echo = overrides.get("echo")
        if echo is None:
            echo = os.environ.get("DB_ECHO", "").strip().lower() in ("1", "true", "yes")
        return cls(
            url=url,
            pool_size=_int("pool_size"),
            max_overflow=_int("max_overflow"),
            pool_timeout=_int("pool_timeout"),
            pool_recycle=_int("pool_recycle"),
            echo=bool(echo),
        )


def load_database_config(**overrides: object) -> DatabaseConfig:
    """Load and validate database config from env. Raises ValueError on bad values."""
    return DatabaseConfig.from_env(**overrides)
