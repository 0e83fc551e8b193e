"""
palmport.config.integrations – Paystack and Cloudinary credentials.

Env vars: PAYSTACK_SECRET_KEY, PAYSTACK_BASE_URL, PAYSTACK_TIMEOUT,
          CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET, CLOUDINARY_FOLDER.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PaystackConfig:
    secret_key: Optional[str] = None
    base_url: str = "https://api.paystack.co"
    timeout: int = 30

    def __post_init__(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise ValueError("PAYSTACK_BASE_URL must start with http:// or https://")
        if not isinstance(self.timeout, int) or self.timeout < 1:
            raise ValueError(f"timeout must be a positive integer, got {self.timeout!r}")

    @classmethod
    def from_env(cls, **overrides: object) -> PaystackConfig:
        return cls(
            secret_key=overrides.get("secret_key") or os.environ.get("PAYSTACK_SECRET_KEY") or None,
            base_url=str(overrides.get("base_url") or os.environ.get("PAYSTACK_BASE_URL", "https://api.paystack.co")).rstrip("/"),
            timeout=int(overrides.get("timeout") or os.environ.get("PAYSTACK_TIMEOUT", "30")),
        )


@dataclass(frozen=True)
class CloudinaryConfig:
    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    folder: str = "palmport_batches"
    timeout: int = 60

    @property
    def is_configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    @classmethod
    def from_env(cls, **overrides: object) -> CloudinaryConfig:
        return cls(
            cloud_name=overrides.get("cloud_name") or os.environ.get("CLOUDINARY_CLOUD_NAME") or None,
            api_key=overrides.get("api_key") or os.environ.get("CLOUDINARY_API_KEY") or None,
            api_secret=overrides.get("api_secret") or os.environ.get("CLOUDINARY_API_SECRET") or None,
            folder=str(overrides.get("folder") or os.environ.get("CLOUDINARY_FOLDER", "palmport_batches")),
        )


def load_paystack_config(**overrides: object) -> PaystackConfig:
    return PaystackConfig.from_env(**overrides)


def load_cloudinary_config(**overrides: object) -> CloudinaryConfig:
    return CloudinaryConfig.from_env(**overrides)
