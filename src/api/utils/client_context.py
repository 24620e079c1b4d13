from fastapi import Request

from src.app.services.device_info import first_forwarded_address
from src.app.use_cases.common_dtos import ClientContext


def get_client_context(request: Request) -> ClientContext:
    """User agent and caller IP (first X-Forwarded-For hop, else the socket peer)."""
    ip_address = first_forwarded_address(request.headers.get("x-forwarded-for"))
    if ip_address is None and request.client is not None:
        ip_address = request.client.host

    return ClientContext(
        user_agent=request.headers.get("user-agent"),
        ip_address=ip_address,
    )
