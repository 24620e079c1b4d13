import re
from typing import Optional

MOBILE_PATTERN = re.compile(r"Mobile|Android|iPhone|iPad")
USER_AGENT_MAX_LENGTH = 200


def get_device_info(user_agent: Optional[str]) -> Optional[dict]:
    """Coarse device classification stored with each session."""
    if not user_agent:
        return None

    if "Chrome" in user_agent:
        browser = "Chrome"
    elif "Firefox" in user_agent:
        browser = "Firefox"
    elif "Safari" in user_agent:
        browser = "Safari"
    else:
        browser = "Unknown"

    return {
        "is_mobile": bool(MOBILE_PATTERN.search(user_agent)),
        "browser": browser,
        "user_agent": user_agent[:USER_AGENT_MAX_LENGTH],
    }


def first_forwarded_address(forwarded_for: Optional[str]) -> Optional[str]:
    if not forwarded_for:
        return None
    address = forwarded_for.split(",")[0].strip()
    return address or None
