import time

import pytest

from cirs.config import MailConfig
from cirs.errors import NotificationError
from cirs.models import Report
from cirs.services.notifier import (
    Notifier,
    ResendTransport,
    SmtpTransport,
    build_transport,
    compose_body,
    compose_subject,
)


class RecordingTransport:
    def __init__(self, error=None, delay=0.0):
        self.sent = []
        self.error = error
        self.delay = delay

    def send(self, message):
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        self.sent.append(message)


def _config(**overrides):
    values = {"host": "smtp.test", "to": "a@example.org, b@example.org", "sender": "cirs@example.org"}
    values.update(overrides)
    return MailConfig(**values)


def _report():
    return Report(
        id=12, created_at="2026-03-01T10:00:00+00:00", category="Medication",
        title="Mix-up", location="RTW 1", asset="", description="Two vials swapped.",
        immediate="Checked stock", when_ts="08:00", tz="Europe/Vienna",
        contact_name="", contact_email="", user_agent="",
    )


def test_compose_subject():
    assert compose_subject(_report()) == "[CIRS] Medication – Mix-up"
    assert compose_subject(_report(), prefix="ÖRK") == "[ÖRK] Medication – Mix-up"


def test_compose_body_lists_id_and_fields():
    body = compose_body(_report())
    assert "#12" in body
    assert "Location: RTW 1" in body
    assert "Description: Two vials swapped." in body
    assert "Asset: -" in body


def test_recipients_are_split():
    assert _config().recipients == ["a@example.org", "b@example.org"]


def test_is_configured_requires_recipient_and_transport():
    assert _config().is_configured
    assert not _config(to="").is_configured
    assert not _config(host="").is_configured
    assert not _config(provider="resend", host="").is_configured
    assert _config(provider="resend", host="", resend_api_key="re_123").is_configured


def test_build_transport():
    assert isinstance(build_transport(_config()), SmtpTransport)
    assert isinstance(build_transport(_config(provider="resend")), ResendTransport)
    with pytest.raises(ValueError):
        build_transport(_config(provider="carrier-pigeon"))


async def test_notify_skips_when_not_configured():
    transport = RecordingTransport()
    notifier = Notifier(_config(to=""), transport=transport)
    assert await notifier.notify(_report()) is False
    assert transport.sent == []


async def test_notify_sends_one_message():
    transport = RecordingTransport()
    notifier = Notifier(_config(), transport=transport)

    assert await notifier.notify(_report()) is True
    assert len(transport.sent) == 1
    msg = transport.sent[0]
    assert msg["Subject"] == "[CIRS] Medication – Mix-up"
    assert msg["From"] == "cirs@example.org"
    assert "b@example.org" in msg["To"]
    assert "Two vials swapped." in msg.get_content()


async def test_notify_failure_raises_notification_error():
    transport = RecordingTransport(error=ConnectionRefusedError("relay down"))
    notifier = Notifier(_config(), transport=transport)

    with pytest.raises(NotificationError) as exc:
        await notifier.notify(_report())
    assert exc.value.report_id == 12
    assert "relay down" in exc.value.reason
    assert "relay down" not in exc.value.public_message


async def test_notify_times_out():
    transport = RecordingTransport(delay=0.5)
    notifier = Notifier(_config(timeout=0.05), transport=transport)

    with pytest.raises(NotificationError) as exc:
        await notifier.notify(_report())
    assert exc.value.reason == "timed out"
