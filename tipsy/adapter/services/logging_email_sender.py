import logging

from tipsy.app.services.email_sender import IEmailSender

logger = logging.getLogger(__name__)


class LoggingEmailSender(IEmailSender):
    """
    Fallback sender used when no SMTP host is configured.

    Logs recipient and subject only; the body can hold a reset link.
    """

    async def send(self, to: str, subject: str, body: str) -> None:
        logger.warning(f"SMTP not configured, email to {to} not sent: {subject}")
