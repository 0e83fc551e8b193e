"""SMTP transport for transactional email."""
from __future__ import annotations

import logging
from email.message import EmailMessage
from email.utils import formataddr

import aiosmtplib

from palmport.config import MailConfig

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Sends one HTML message per call over a fresh SMTP connection."""

    def __init__(self, config: MailConfig) -> None:
        self._config = config

    @property
    def admin_email(self) -> str | None:
        return self._config.admin_email

    def build_message(self, to: str, subject: str, html: str, *, sender_name: str | None = None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((sender_name or self._config.from_name, self._config.sender))
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML-capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    async def send(self, to: str, subject: str, html: str, *, sender_name: str | None = None) -> None:
        message = self.build_message(to, subject, html, sender_name=sender_name)
        await aiosmtplib.send(
            message,
            hostname=self._config.host,
            port=self._config.port,
            username=self._config.username,
            password=self._config.password,
            start_tls=self._config.start_tls,
            timeout=self._config.timeout,
        )
        logger.debug("SmtpMailer: sent %r to %s", subject, to)
