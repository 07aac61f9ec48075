"""
Email Service for delivering notification emails over SMTP.
"""
import asyncio
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib
from injector import inject

from services.email_template_service import EmailTemplateService
import config.settings as settings

logger = logging.getLogger(__name__)


class EmailService:
    """SMTP email service. Delivery failures are reported, never raised."""

    @inject
    def __init__(self, template_service: EmailTemplateService):
        self.template_service = template_service
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.EMAIL_FROM
        self.from_name = settings.EMAIL_FROM_NAME

        if not self.is_configured:
            logger.warning("[Email] SMTP credentials not configured; emails will be skipped")

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    def send_notification_email(
        self,
        to: str,
        title: Optional[str],
        message: str,
        priority: str = 'medium',
        action_url: Optional[str] = None,
        action_label: Optional[str] = None,
        subject: Optional[str] = None
    ) -> bool:
        """
        Render and send a notification email.

        Returns:
            True if the email was handed to the SMTP server, False otherwise
        """
        if not self.is_configured:
            logger.warning(f"[Email] Email service not available, skipping email to {to}")
            return False

        html_body, text_body = self.template_service.render_notification(
            title, message, priority, action_url, action_label
        )
        return self.send_email(to, subject or title or 'New Notification', html_body, text_body)

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """Send one email; blocks the calling (consumer) thread until done."""
        try:
            return asyncio.run(self._send_via_smtp(to_email, subject, html_content, text_content))
        except RuntimeError as e:
            # asyncio.run refuses to start inside a running event loop
            logger.error(f"[Email/SMTP] Cannot send email to {to_email}: {e}")
            return False

    async def _send_via_smtp(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None
    ) -> bool:
        """Send email via SMTP"""
        try:
            message = MIMEMultipart("alternative")
            message["From"] = f"{self.from_name} <{self.from_email}>"
            message["To"] = to_email
            message["Subject"] = subject

            # Plain text first so clients prefer the HTML part
            if text_content:
                message.attach(MIMEText(text_content, "plain"))
            message.attach(MIMEText(html_content, "html"))

            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True
            )

            logger.info(f"[Email/SMTP] Successfully sent email to {to_email}: {subject}")
            return True

        except Exception as e:
            logger.error(f"[Email/SMTP] Failed to send email to {to_email}: {e}")
            return False
