import logging
from typing import Optional

import httpx

from src.app.services.notifications import IEmailSender, NotificationError

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


class ResendEmailSender(IEmailSender):
    """Sends email through the Resend HTTP API"""

    def __init__(
        self,
        api_key: str,
        from_address: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.from_address = from_address
        self.timeout = timeout
        self.transport = transport

    async def send(self, to: str, subject: str, html: str) -> None:
        payload = {"from": self.from_address, "to": [to], "subject": subject, "html": html}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    RESEND_API_URL,
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as exc:
            raise NotificationError(f"Email provider unreachable: {exc}") from exc

        if response.is_error:
            raise NotificationError(
                f"Email provider rejected message ({response.status_code})"
            )
        logger.info(f"Email sent to {to}: {subject}")


class ConsoleEmailSender(IEmailSender):
    """Development sender: logs the message instead of delivering it"""

    async def send(self, to: str, subject: str, html: str) -> None:
        logger.info(f"[console email] to={to} subject={subject!r}\n{html}")
