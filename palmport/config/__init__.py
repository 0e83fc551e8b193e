"""
Backend config: load from env.

load_database_config(), load_app_config(), load_auth_config(),
load_mail_config(), load_paystack_config(), load_cloudinary_config().
"""
from palmport.config.app import AppConfig, load_app_config
from palmport.config.auth import AuthConfig, load_auth_config
from palmport.config.database import DatabaseConfig, load_database_config
from palmport.config.integrations import (
    CloudinaryConfig,
    PaystackConfig,
    load_cloudinary_config,
    load_paystack_config,
)
from palmport.config.mail import MailConfig, load_mail_config

__all__ = [
    "AppConfig",
    "load_app_config",
    "AuthConfig",
    "load_auth_config",
    "DatabaseConfig",
    "load_database_config",
    "MailConfig",
    "load_mail_config",
    "PaystackConfig",
    "load_paystack_config",
    "CloudinaryConfig",
    "load_cloudinary_config",
]
