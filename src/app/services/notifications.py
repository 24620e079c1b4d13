"""
Outbound notifications (email and SMS) used by the auth flows.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable
from urllib.parse import urlencode

logger = logging.getLogger(__name__)

# schedule(func, *args): runs func after the response has been sent
# (FastAPI BackgroundTasks.add_task)
TaskScheduler = Callable[..., Any]


class NotificationError(Exception):
    """Delivery provider rejected the message or could not be reached."""


class IEmailSender(ABC):
    @abstractmethod
    async def send(self, to: str, subject: str, html: str) -> None:
        """Deliver one email. Raises NotificationError on failure."""
        pass


class ISmsSender(ABC):
    @abstractmethod
    async def send(self, phone: str, message: str) -> None:
        """Deliver one SMS. Raises NotificationError on failure."""
        pass


VERIFICATION_EMAIL = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #10b981;">Welcome to SCRIBE AI!</h2>
  <p>Thank you for signing up. Please verify your email address by entering this code:</p>
  <div style="background: #f3f4f6; padding: 20px; text-align: center; margin: 20px 0;">
    <h1 style="color: #1f2937; font-size: 32px; margin: 0; letter-spacing: 4px;">{code}</h1>
  </div>
  <p>This code will expire in 24 hours.</p>
  <p>If you didn't create an account, please ignore this email.</p>
</div>
"""

PASSWORD_RESET_EMAIL = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #10b981;">Password Reset Request</h2>
  <p>We received a request to reset your password for your SCRIBE AI account.</p>
  <p><a href="{reset_url}">Reset Password</a></p>
  <p>If the link doesn't work, copy and paste this URL into your browser:</p>
  <p style="word-break: break-all; color: #6b7280;">{reset_url}</p>
  <p>This link will expire in 1 hour.</p>
  <p>If you didn't request a password reset, please ignore this email.</p>
</div>
"""


class AuthNotifier:
    """Renders auth messages and hands them to the configured senders."""

    def __init__(self, email_sender: IEmailSender, sms_sender: ISmsSender, app_base_url: str):
        self.email_sender = email_sender
        self.sms_sender = sms_sender
        self.app_base_url = app_base_url.rstrip("/")

    async def send_verification_email(self, email: str, code: str) -> None:
        await self.email_sender.send(
            email, "Verify your SCRIBE AI account", VERIFICATION_EMAIL.format(code=code)
        )

    async def send_password_reset_email(self, email: str, reset_token: str) -> None:
        reset_url = f"{self.app_base_url}/reset-password?{urlencode({'token': reset_token})}"
        await self.email_sender.send(
            email,
            "Reset your SCRIBE AI password",
            PASSWORD_RESET_EMAIL.format(reset_url=reset_url),
        )

    async def send_phone_code(self, phone: str, code: str, ttl_minutes: int) -> None:
        await self.sms_sender.send(
            phone,
            f"Your SCRIBE AI verification code is: {code}. Valid for {ttl_minutes} minutes.",
        )
