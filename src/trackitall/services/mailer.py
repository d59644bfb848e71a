"""Transactional email transport."""

from __future__ import annotations

import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING, Optional, Protocol

from ..logging_config import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from ..config import BaseConfig

logger = get_logger(__name__)


class MailDeliveryError(RuntimeError):
    """Raised when a message could not be handed to the mail server."""


class Mailer(Protocol):
    def send(self, *, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        ...  # pragma: no cover - interface


class SMTPMailer:
    """Send mail over SMTP, upgrading to TLS when the server offers it."""

    def __init__(
        self,
        *,
        host: Optional[str],
        port: int,
        username: Optional[str],
        password: Optional[str],
        sender: str,
        timeout: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.timeout = timeout

    def send(self, *, to: str, subject: str, text: str, html: Optional[str] = None) -> None:
        if not self.host:
            raise MailDeliveryError("SMTP host is not configured")

        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(text)
        if html:
            message.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(f"SMTP delivery to {self.host} failed") from exc
        logger.info("Email sent", extra={"subject": subject})


def build_mailer(config: BaseConfig) -> SMTPMailer:
    return SMTPMailer(
        host=config.SMTP_HOST,
        port=config.SMTP_PORT,
        username=config.SMTP_USER,
        password=config.SMTP_PASS,
        sender=config.EMAIL_FROM,
    )
