import smtplib

import pytest

import email_digest
from email_digest import EmailNotifier, build_prompt_email
from errors import NotificationError


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.logged_in = None
        self.sent = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False

    def login(self, user, password):
        self.logged_in = (user, password)

    def sendmail(self, sender, recipients, message):
        self.sent.append((sender, recipients, message))


class FailingSMTP(FakeSMTP):
    def login(self, user, password):
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


@pytest.fixture(autouse=True)
def reset_fake_smtp():
    FakeSMTP.instances = []


def test_build_prompt_email():
    subject, text_body, html_body = build_prompt_email("https://e.com/jobs/view/1-assessment", "data analyst")

    assert subject == "Action Required for Job Application: data analyst"
    assert "https://e.com/jobs/view/1-assessment" in text_body
    assert 'href="https://e.com/jobs/view/1-assessment"' in html_body


def test_notify_sends_to_requester(monkeypatch):
    monkeypatch.setattr(email_digest.smtplib, "SMTP_SSL", FakeSMTP)
    notifier = EmailNotifier(sender="bot@example.com", app_password="app-pass", host="smtp.test", port=465)

    notifier.notify("me@example.com", "https://e.com/jobs/view/1-assessment", "data analyst")

    [smtp] = FakeSMTP.instances
    assert (smtp.host, smtp.port) == ("smtp.test", 465)
    assert smtp.logged_in == ("bot@example.com", "app-pass")
    sender, recipients, message = smtp.sent[0]
    assert sender == "bot@example.com"
    assert recipients == ["me@example.com"]
    assert "Action Required for Job Application: data analyst" in message


def test_notify_without_credentials_raises():
    notifier = EmailNotifier(sender="", app_password="")

    with pytest.raises(NotificationError):
        notifier.notify("me@example.com", "https://e.com/jobs/view/1", "analyst")


def test_notify_without_recipient_raises():
    notifier = EmailNotifier(sender="bot@example.com", app_password="x")

    with pytest.raises(NotificationError):
        notifier.notify("", "https://e.com/jobs/view/1", "analyst")


def test_smtp_failures_become_notification_errors(monkeypatch):
    monkeypatch.setattr(email_digest.smtplib, "SMTP_SSL", FailingSMTP)
    notifier = EmailNotifier(sender="bot@example.com", app_password="wrong")

    with pytest.raises(NotificationError, match="me@example.com"):
        notifier.notify("me@example.com", "https://e.com/jobs/view/1", "analyst")
