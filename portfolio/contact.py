"""
Contact-form relay and the mail senders it delivers through.

Supports an in-memory sender for tests/local runs and an SMTP sender built on
aiosmtplib for production.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional, Protocol
import logging

import aiosmtplib
from jinja2 import Environment, select_autoescape

from portfolio.errors import MailError, ValidationError

logger = logging.getLogger(__name__)

SENDER_DISPLAY_NAME = "Portfolio Contact"

_templates = Environment(autoescape=select_autoescape(default_for_string=True))
_HTML_BODY = _templates.from_string(
    "<p><strong>Email:</strong> {{ email }}</p><p>{{ message }}</p>"
)
_TEXT_BODY = "Email: {email}\n\n{message}\n"


class MailSender(Protocol):
    """Minimal interface for delivering a composed message."""

    async def send(self, message: EmailMessage) -> None:
        ...


@dataclass
class InMemoryMailSender:
    """Records messages instead of sending them. Raises `error` when set."""

    sent: list[EmailMessage] = field(default_factory=list)
    error: Optional[Exception] = None

    async def send(self, message: EmailMessage) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append(message)


@dataclass
class SmtpMailSender:
    """
    SMTP sender. Port 465 uses implicit TLS, any other port upgrades with
    STARTTLS when the server offers it.
    """

    hostname: str
    port: int
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = 30.0

    async def send(self, message: EmailMessage) -> None:
        await aiosmtplib.send(
            message,
            hostname=self.hostname,
            port=self.port,
            username=self.username,
            password=self.password,
            use_tls=self.port == 465,
            timeout=self.timeout,
        )


class ContactRelay:
    def __init__(self, sender: MailSender, from_address: str, recipient: str):
        self.sender = sender
        self.from_address = from_address
        self.recipient = recipient

    def compose(self, name: str, email: str, message: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = formataddr((SENDER_DISPLAY_NAME, self.from_address))
        msg["To"] = self.recipient
        # Header values must stay on one line.
        msg["Subject"] = f"Message from {' '.join(name.split())}"
        msg.set_content(_TEXT_BODY.format(email=email, message=message))
        msg.add_alternative(
            _HTML_BODY.render(email=email, message=message), subtype="html"
        )
        return msg

    async def send(
        self,
        name: Optional[str],
        email: Optional[str],
        message: Optional[str],
    ) -> None:
        """
        Validate the three fields and deliver them in one attempt.

        Non-string values count as missing.
        """
        fields = (name, email, message)
        if not all(isinstance(value, str) and value.strip() for value in fields):
            raise ValidationError("Missing required fields")

        msg = self.compose(name, email, message)
        try:
            await self.sender.send(msg)
        except Exception as exc:
            raise MailError(str(exc)) from exc
        logger.info("Relayed contact message: %s", msg["Subject"])
