"""
Forgot Password Use Case

Issues a reset token and emails a one-time link to the account owner.
"""

import logging
from datetime import datetime
from typing import Callable

from tipsy.app.services.email_sender import EmailDeliveryError, IEmailSender
from tipsy.app.services.reset_token_store import ResetTokenStore
from tipsy.app.services.unit_of_work import UnitOfWork
from tipsy.domain.base import utcnow
from tipsy.libs.result import Result, Return
from .dtos import MessageResponse
from .validation import require, validation_error

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "If an account exists with this email, a reset link has been sent."

RESET_EMAIL_SUBJECT = "Tipsy - Password reset"


def build_reset_url(frontend_url: str, token: str) -> str:
    return f"{frontend_url.rstrip('/')}/reset-password?token={token}"


def build_reset_email(username: str, reset_url: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #3b82f6;">Password reset</h2>
      <p>Hello <strong>{username}</strong>,</p>
      <p>You asked to reset your Tipsy password.</p>
      <p>Click the button below to choose a new password:</p>
      <p style="text-align: center; margin: 30px 0;">
        <a href="{reset_url}"
           style="background-color: #3b82f6; color: white; padding: 12px 24px;
                  text-decoration: none; border-radius: 8px; display: inline-block;">
          Reset my password
        </a>
      </p>
      <p style="color: #666; font-size: 14px;">
        This link expires in 1 hour.<br>
        If you did not ask for a reset, you can ignore this email.
      </p>
    </div>
    """


class ForgotPasswordUseCase:
    """
    Use case for requesting a password reset email.

    Business Rules:
    - Same response whether or not the email is registered
    - Token is 32 random bytes, stored as SHA-256 digest, expires in 1 hour
    - Issuing a new token replaces any pending one
    - Delivery failures are logged, never surfaced to the caller
    """

    def __init__(
        self,
        uow: UnitOfWork,
        email_sender: IEmailSender,
        frontend_url: str,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.uow = uow
        self.email_sender = email_sender
        self.frontend_url = frontend_url
        self.clock = clock

    async def execute(self, email: str) -> Result[MessageResponse]:
        if not require(email):
            return validation_error("Email is required")

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                logger.debug("Password reset requested for an unknown email")
                return Return.ok(MessageResponse(message=GENERIC_MESSAGE))

            store = ResetTokenStore(self.uow.users, clock=self.clock)
            token = await store.issue(user)
            await self.uow.commit()

            username, address = user.username, user.email

        reset_url = build_reset_url(self.frontend_url, token)
        try:
            await self.email_sender.send(
                address, RESET_EMAIL_SUBJECT, build_reset_email(username, reset_url)
            )
            logger.info(f"Password reset email sent for user: {username}")
        except EmailDeliveryError:
            logger.error(f"Password reset email could not be sent for user: {username}")

        return Return.ok(MessageResponse(message=GENERIC_MESSAGE))
