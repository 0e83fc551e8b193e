"""
palmport.config.auth – token signing and the seeded admin account.

Env vars: JWT_SECRET, JWT_EXPIRE_MINUTES, ADMIN_EMAIL, ADMIN_PASSWORD.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AuthConfig:
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 60 * 24 * 7  # 7 days
    admin_email: Optional[str] = None
    admin_password: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.jwt_secret or not self.jwt_secret.strip():
            raise ValueError("JWT_SECRET is required and must be non-empty")
        if not isinstance(self.token_expire_minutes, int) or self.token_expire_minutes < 1:
            raise ValueError(f"token_expire_minutes must be a positive integer, got {self.token_expire_minutes!r}")

    @classmethod
    def from_env(cls, **overrides: object) -> AuthConfig:
        secret = overrides.get("jwt_secret") or os.environ.get("JWT_SECRET", "")
        expire = overrides.get("token_expire_minutes") or os.environ.get("JWT_EXPIRE_MINUTES", str(60 * 24 * 7))
        admin_email = overrides.get("admin_email") or os.environ.get("ADMIN_EMAIL") or None
        admin_password = overrides.get("admin_password") or os.environ.get("ADMIN_PASSWORD") or None
        return cls(
            jwt_secret=str(secret),
            token_expire_minutes=int(expire),
            admin_email=str(admin_email).strip().lower() if admin_email else None,
            admin_password=str(admin_password) if admin_password else None,
        )


def load_auth_config(**overrides: object) -> AuthConfig:
    return AuthConfig.from_env(**overrides)
