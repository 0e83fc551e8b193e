"""
palmport.config.mail – SMTP relay used for transactional email.

Env vars: SMTP_HOST, SMTP_PORT, EMAIL_USER, EMAIL_PASS, SMTP_STARTTLS,
          SMTP_TIMEOUT, MAIL_FROM_NAME, ADMIN_EMAIL.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MailConfig:
    host: str = "smtp.gmail.com"
    port: int = 587
    username: Optional[str] = None
    password: Optional[str] = None
    start_tls: bool = True
    timeout: int = 30
    from_name: str = "PalmPort"
    admin_email: Optional[str] = None
    """Recipient of new-order, payment and subscriber alerts."""

    def __post_init__(self) -> None:
        if not self.host or not self.host.strip():
            raise ValueError("SMTP_HOST must be non-empty")
        if not isinstance(self.port, int) or not 0 < self.port < 65536:
            raise ValueError(f"SMTP_PORT must be a valid port, got {self.port!r}")

    @property
    def sender(self) -> str:
        return self.username or f"no-reply@{self.host}"

    @classmethod
    def from_env(cls, **overrides: object) -> MailConfig:
        start_tls = overrides.get("start_tls")
        if start_tls is None:
            start_tls = os.environ.get("SMTP_STARTTLS", "true").strip().lower() in ("1", "true", "yes")
        return cls(
            host=str(overrides.get("host") or os.environ.get("SMTP_HOST", "smtp.gmail.com")),
            port=int(overrides.get("port") or os.environ.get("SMTP_PORT", "587")),
            username=overrides.get("username") or os.environ.get("EMAIL_USER") or None,
            password=overrides.get("password") or os.environ.get("EMAIL_PASS") or None,
            start_tls=bool(start_tls),
            timeout=int(overrides.get("timeout") or os.environ.get("SMTP_TIMEOUT", "30")),
            from_name=str(overrides.get("from_name") or os.environ.get("MAIL_FROM_NAME", "PalmPort")),
            admin_email=overrides.get("admin_email") or os.environ.get("ADMIN_EMAIL") or None,
        )


def load_mail_config(**overrides: object) -> MailConfig:
    return MailConfig.from_env(**overrides)
