"""
email_digest.py — Escalation emails for postings that need a human response.
Sends via Gmail SMTP using an App Password.
"""

import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional, Protocol

from errors import NotificationError
from config import GMAIL_ADDRESS, GMAIL_APP_PASSWORD, SMTP_HOST, SMTP_PORT, SMTP_TIMEOUT_SECONDS
from monitoring import get_logger

logger = get_logger("email_digest")


class Notifier(Protocol):
    def notify(self, recipient: str, posting_url: str, job_title: str) -> None:
        ...


def build_prompt_email(posting_url: str, job_title: str) -> tuple[str, str, str]:
    """Build subject, plain-text and HTML bodies for a writing-prompt escalation."""
    subject = f"Action Required for Job Application: {job_title}"
    text_body = (
        "Please complete the writing prompt for the following job application:\n\n"
        f"{posting_url}\n"
    )
    html_body = f"""
    <!DOCTYPE html>
    <html>
    <body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; max-width:600px; margin:0 auto; padding:20px; color:#333;">
    <h1 style="color:#4f46e5; border-bottom:2px solid #4f46e5; padding-bottom:8px;">✍️ Action Required</h1>
    <p style="margin:8px 0;">A <strong>{job_title}</strong> posting asks for a written response before you can apply.
    It was not submitted automatically.</p>
    <div style="text-align:center; margin:24px 0;">
        <a href="{posting_url}" style="background:#4f46e5; color:white; padding:12px 24px; border-radius:6px; text-decoration:none; font-weight:bold;">
            Open Posting
        </a>
    </div>
    <hr style="border:none; border-top:1px solid #e0e0e0; margin:24px 0;">
    <p style="color:#999; font-size:12px; text-align:center;">
        This email was sent by your Job Apply pipeline.
    </p>
    </body>
    </html>
    """
    return subject, text_body, html_body


class EmailNotifier:
    """Emails the requester when a posting needs a human-authored answer."""

    def __init__(
        self,
        sender: Optional[str] = None,
        app_password: Optional[str] = None,
        host: str = SMTP_HOST,
        port: int = SMTP_PORT,
        timeout: float = SMTP_TIMEOUT_SECONDS,
    ):
        self.sender = sender if sender is not None else GMAIL_ADDRESS
        self.app_password = app_password if app_password is not None else GMAIL_APP_PASSWORD
        self.host = host
        self.port = port
        self.timeout = timeout

    def notify(self, recipient: str, posting_url: str, job_title: str) -> None:
        if not self.sender or not self.app_password:
            raise NotificationError("Email credentials not configured")
        if not recipient:
            raise NotificationError("No recipient address for escalation email")

        subject, text_body, html_body = build_prompt_email(posting_url, job_title)

        try:
            self._send_email(recipient, subject, text_body, html_body)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send escalation email to {recipient}: {e}") from e

        logger.info(f"Escalation email for {posting_url} sent to {recipient}")

    def _send_email(self, recipient: str, subject: str, text_body: str, html_body: str):
        """Send an email via Gmail SMTP."""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = recipient

        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        with smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout) as server:
            server.login(self.sender, self.app_password)
            server.sendmail(self.sender, [recipient], msg.as_string())
