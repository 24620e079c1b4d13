import logging
from typing import Optional

import httpx

from src.app.services.notifications import ISmsSender, NotificationError

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"


class TwilioSmsSender(ISmsSender):
    """Sends SMS through Twilio's REST API"""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.from_number = from_number
        self.timeout = timeout
        self.transport = transport

    async def send(self, phone: str, message: str) -> None:
        url = TWILIO_MESSAGES_URL.format(account_sid=self.account_sid)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    url,
                    data={"To": phone, "From": self.from_number, "Body": message},
                    auth=(self.account_sid, self.auth_token),
                )
        except httpx.HTTPError as exc:
            raise NotificationError(f"SMS provider unreachable: {exc}") from exc

        if response.is_error:
            raise NotificationError(f"SMS provider rejected message ({response.status_code})")
        logger.info(f"SMS sent to {phone}")


class ConsoleSmsSender(ISmsSender):
    """Development sender: logs the message instead of delivering it"""

    async def send(self, phone: str, message: str) -> None:
        logger.info(f"[console sms] to={phone}: {message}")
