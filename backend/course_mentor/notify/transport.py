"""Mail transport over SMTP."""

from __future__ import annotations

import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Protocol

from course_mentor.core.config import Settings
from course_mentor.core.errors import DeliveryError


@dataclass(frozen=True, slots=True)
class MailMessage:
    sender: str
    to: str
    subject: str
    html: str


class MailTransport(Protocol):
    def send(self, message: MailMessage) -> str:
        """Deliver ``message`` and return its message id; raise ``DeliveryError`` on failure."""
        ...


class SmtpMailTransport:
    """One SMTP connection per message; port 465 implies implicit TLS."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str | None,
        password: str | None,
        secure: bool = False,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.secure = secure or port == 465
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpMailTransport":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            user=settings.smtp_user,
            password=settings.smtp_password,
            secure=settings.smtp_secure,
            timeout=settings.request_timeout_s,
        )

    def send(self, message: MailMessage) -> str:
        if not self.user or not self.password:
            raise DeliveryError("SMTP user and password are not configured", retryable=False)
        message_id = make_msgid(domain=self.host)
        msg = MIMEMultipart("alternative")
        msg["From"] = message.sender
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg["Message-ID"] = message_id
        msg.attach(MIMEText(message.html, "html", "utf-8"))
        try:
            if self.secure:
                server: smtplib.SMTP = smtplib.SMTP_SSL(
                    self.host, self.port, timeout=self.timeout, context=ssl.create_default_context()
                )
            else:
                server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            with server:
                if not self.secure:
                    server.starttls(context=ssl.create_default_context())
                server.login(self.user, self.password)
                server.sendmail(message.sender, [message.to], msg.as_string())
        except smtplib.SMTPAuthenticationError as exc:
            raise DeliveryError(f"SMTP authentication failed: {exc}", retryable=False) from exc
        except smtplib.SMTPRecipientsRefused as exc:
            raise DeliveryError(f"Recipient refused: {message.to}", retryable=False) from exc
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"SMTP delivery failed: {exc}") from exc
        return message_id


def format_sender(name: str, address: str) -> str:
    return formataddr((name, address))


__all__ = ["MailMessage", "MailTransport", "SmtpMailTransport", "format_sender"]
