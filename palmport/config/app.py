"""
palmport.config.app – storefront URLs, CORS, rate limiting and order policy.

Env vars: APP_BASE_URL, CLIENT_URL, CORS_ORIGINS, RATE_LIMIT, ORDER_STRICT_TRANSITIONS.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Tuple


def _validate_http_url(url: str, name: str) -> str:
    if not url.startswith(("http://", "https://")):
        raise ValueError(f"{name} must start with http:// or https://, got {url!r}")
    return url


@dataclass(frozen=True)
class AppConfig:
    app_base_url: str = "http://localhost:3000"
    """Storefront origin; used for payment callback and dashboard links."""

    client_url: str = "http://localhost:3000"
    """Origin used in batch traceability URLs (``<client_url>/trace/<batch_id>``)."""

    cors_origins: Tuple[str, ...] = field(default=("http://localhost:3000",))
    rate_limit: str = "120/minute"
    strict_transitions: bool = False
    """Treat cancelled/delivered/refunded as terminal states."""

    def __post_init__(self) -> None:
        _validate_http_url(self.app_base_url, "APP_BASE_URL")
        _validate_http_url(self.client_url, "CLIENT_URL")
        if "/" not in self.rate_limit:
            raise ValueError(f"RATE_LIMIT must look like '120/minute', got {self.rate_limit!r}")

    @classmethod
    def from_env(cls, **overrides: object) -> AppConfig:
        base = str(overrides.get("app_base_url") or os.environ.get("APP_BASE_URL", "http://localhost:3000")).rstrip("/")
        client = str(overrides.get("client_url") or os.environ.get("CLIENT_URL", base)).rstrip("/")
        raw_origins = os.environ.get("CORS_ORIGINS", "")
        origins = tuple(o.strip() for o in raw_origins.split(",") if o.strip()) or (base, "http://localhost:3000")
        strict = overrides.get("strict_transitions")
        if strict is None:
            strict = os.environ.get("ORDER_STRICT_TRANSITIONS", "").strip().lower() in ("1", "true", "yes")
        return cls(
            app_base_url=base,
            client_url=client,
            cors_origins=tuple(dict.fromkeys(origins)),
            rate_limit=str(overrides.get("rate_limit") or os.environ.get("RATE_LIMIT", "120/minute")),
            strict_transitions=bool(strict),
        )


def load_app_config(**overrides: object) -> AppConfig:
    return AppConfig.from_env(**overrides)
