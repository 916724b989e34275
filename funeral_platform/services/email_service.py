"""
Email Service

Sends welcome and admin-key reset emails over SMTP, rendered from Jinja2
templates. Sending is best effort: failures are logged and reported as False,
never raised to the request that triggered them.
"""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
import structlog

from funeral_platform.core.config import Settings

logger = structlog.get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "emails"


class EmailService:
    """Service for sending emails with template support"""

    def __init__(self, settings: Settings):
        self.env = Environment(
            loader=FileSystemLoader(str(TEMPLATE_DIR)),
            autoescape=select_autoescape(["html", "xml"]),
        )
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_from = settings.SMTP_FROM
        self.base_url = settings.PUBLIC_BASE_URL.rstrip("/")

    @property
    def enabled(self) -> bool:
        return bool(self.smtp_host)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: Optional[str] = None) -> bool:
        if not self.enabled:
            logger.info(f"SMTP not configured, skipping email to {to_email}", subject=subject)
            return False

        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = self.smtp_from
            msg["To"] = to_email
            if text_body:
                msg.attach(MIMEText(text_body, "plain"))
            msg.attach(MIMEText(html_body, "html"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as server:
                server.starttls()
                if self.smtp_user and self.smtp_password:
                    server.login(self.smtp_user, self.smtp_password)
                server.send_message(msg)

            logger.info(f"Email sent to {to_email}", subject=subject)
            return True
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            return False

    def send_reset_email(self, to_email: str, funeral_home_name: str, reset_token: str) -> bool:
        reset_url = f"{self.base_url}/admin/reset.html?token={reset_token}"
        html_body = self.env.get_template("password_reset.html").render(
            funeral_home_name=funeral_home_name,
            reset_url=reset_url,
        )
        text_body = f"Reset your admin key for {funeral_home_name}: {reset_url}"
        return self._send_email(to_email, "Reset your admin key", html_body, text_body)

    def send_welcome_email(self, to_email: str, funeral_home_name: str, slug: str, admin_key: str) -> bool:
        login_url = f"{self.base_url}/admin/admin-login.html?tenant={slug}"
        html_body = self.env.get_template("welcome.html").render(
            funeral_home_name=funeral_home_name,
            slug=slug,
            admin_key=admin_key,
            login_url=login_url,
        )
        text_body = (
            f"Welcome, {funeral_home_name}. Your tenant id is {slug} and your "
            f"temporary admin key is {admin_key}. Sign in at {login_url}"
        )
        return self._send_email(to_email, "Welcome to your funeral home dashboard", html_body, text_body)
