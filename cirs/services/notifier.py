"""E-mail notification for newly persisted reports.

Supports plain SMTP (stdlib smtplib) and the Resend HTTP API. Delivery is a
single attempt; callers decide what a failure means for the response.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Protocol

from cirs.config import MailConfig, get_settings
from cirs.errors import NotificationError
from cirs.models import Report

logger = logging.getLogger(__name__)

# Label, attribute
_BODY_FIELDS = (
    ("Category", "category"),
    ("Title", "title"),
    ("Location", "location"),
    ("Asset", "asset"),
    ("When", "when_ts"),
    ("Timezone", "tz"),
    ("Description", "description"),
    ("Immediate measures", "immediate"),
    ("Contact name", "contact_name"),
    ("Contact e-mail", "contact_email"),
    ("User agent", "user_agent"),
    ("Created at", "created_at"),
)


class MailTransport(Protocol):
    def send(self, message: EmailMessage) -> None: ...


class SmtpTransport:
    """Blocking SMTP delivery. Meant to run in a worker thread."""

    def __init__(self, config: MailConfig):
        self.config = config

    def send(self, message: EmailMessage) -> None:
        cfg = self.config
        if cfg.secure:
            server = smtplib.SMTP_SSL(
                cfg.host, cfg.port, timeout=cfg.timeout,
                context=ssl.create_default_context(),
            )
        else:
            server = smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout)
        with server:
            if not cfg.secure:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls(context=ssl.create_default_context())
                    server.ehlo()
            if cfg.user:
                server.login(cfg.user, cfg.password)
            server.send_message(message)


class ResendTransport:
    """Delivery through the Resend API."""

    def __init__(self, config: MailConfig):
        self.config = config

    def send(self, message: EmailMessage) -> None:
        import resend
        resend.api_key = self.config.resend_api_key

        resend.Emails.send({
            "from": str(message["From"]),
            "to": self.config.recipients,
            "subject": str(message["Subject"]),
            "text": message.get_content(),
        })


def compose_subject(report: Report, prefix: str = "CIRS") -> str:
    return f"[{prefix}] {report.category} – {report.title}"


def compose_body(report: Report) -> str:
    lines = [f"New incident report #{report.id}", ""]
    for label, attr in _BODY_FIELDS:
        value = getattr(report, attr, "") or "-"
        lines.append(f"{label}: {value}")
    return "\n".join(lines) + "\n"


def build_transport(config: MailConfig) -> MailTransport:
    if config.provider == "resend":
        return ResendTransport(config)
    if config.provider == "smtp":
        return SmtpTransport(config)
    raise ValueError(f"Unknown mail provider: {config.provider!r}")


class Notifier:
    """Sends one notification per report when mail is configured."""

    def __init__(self, config: MailConfig, transport: MailTransport | None = None):
        self.config = config
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return self.config.is_configured

    @property
    def transport(self) -> MailTransport:
        if self._transport is None:
            self._transport = build_transport(self.config)
        return self._transport

    def build_message(self, report: Report) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = compose_subject(report, self.config.subject_prefix)
        msg["From"] = self.config.sender
        msg["To"] = ", ".join(self.config.recipients)
        msg.set_content(compose_body(report))
        return msg

    async def notify(self, report: Report) -> bool:
        """Deliver a notification for ``report``.

        Returns False without doing anything when mail is not configured.
        Raises NotificationError if the single delivery attempt fails or
        exceeds the configured timeout.
        """
        if not self.is_configured:
            logger.debug("Mail not configured, skipping notification for report #%s", report.id)
            return False

        message = self.build_message(report)
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self.transport.send, message),
                timeout=self.config.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error("Notification for report #%s timed out after %ss", report.id, self.config.timeout)
            raise NotificationError(report.id, "timed out") from e
        except Exception as e:
            logger.exception("Notification for report #%s failed", report.id)
            raise NotificationError(report.id, str(e)) from e

        logger.info("Notification sent for report #%s to %s", report.id, self.config.to)
        return True


def get_notifier() -> Notifier:
    """FastAPI dependency returning the process-wide notifier."""
    return notifier


notifier = Notifier(get_settings().mail)
