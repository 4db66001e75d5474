"""
SMTP email sender.

Uses aiosmtplib for asynchronous delivery. SMTP_SECURE selects implicit
TLS (port 465); otherwise STARTTLS is negotiated when the server offers it.
"""

import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

import aiosmtplib
from pydantic import BaseModel

from tipsy.app.services.email_sender import EmailDeliveryError, IEmailSender

logger = logging.getLogger(__name__)


class SmtpSettings(BaseModel):
    """Configuration settings for the SMTP sender"""

    host: str
    port: int = 465
    secure: bool = True
    username: Optional[str] = None
    password: Optional[str] = None
    from_email: str
    timeout: int = 10


class SmtpEmailSender(IEmailSender):
    def __init__(self, settings: SmtpSettings):
        self.settings = settings

    async def send(self, to: str, subject: str, body: str) -> None:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = self.settings.from_email
        message["To"] = to
        message.attach(MIMEText(body, "html"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.settings.host,
                port=self.settings.port,
                username=self.settings.username or None,
                password=self.settings.password or None,
                use_tls=self.settings.secure,
                timeout=self.settings.timeout,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery to {self.settings.host} failed: {e}")
            raise EmailDeliveryError(str(e)) from e
