from typing import Optional

from pydantic import BaseModel

from src.app.use_cases.common_dtos import UserProfile


class UpdateProfileCommand(BaseModel):
    """
    Partial profile update.

    Only fields explicitly present are applied; an explicit None clears the
    field.
    """

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    phone: Optional[str] = None


class CurrentUserResponse(UserProfile):
    """Profile plus the user's organization membership, if any"""

    organization_id: Optional[str] = None
    role: Optional[str] = None
