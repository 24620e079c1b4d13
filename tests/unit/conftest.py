from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.services.notifications import AuthNotifier
from src.app.services.password_hasher import Argon2PasswordHasher
from src.app.services.session_manager import SessionManager
from src.app.services.token_service import TokenService
from src.app.services.totp_service import TotpService


def _returns_argument(entity):
    return entity


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with every repository; create/update echo the entity back"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    uow.users = MagicMock()
    uow.users.get_by_id = AsyncMock(return_value=None)
    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.get_by_phone = AsyncMock(return_value=None)
    uow.users.create = AsyncMock(side_effect=_returns_argument)
    uow.users.update = AsyncMock(side_effect=_returns_argument)

    uow.sessions = MagicMock()
    uow.sessions.get_by_id = AsyncMock(return_value=None)
    uow.sessions.get_by_token_hash = AsyncMock(return_value=None)
    uow.sessions.create = AsyncMock(side_effect=_returns_argument)
    uow.sessions.delete_if_active = AsyncMock(return_value=True)
    uow.sessions.delete_by_token_hash = AsyncMock(return_value=1)
    uow.sessions.delete_by_id = AsyncMock(return_value=1)
    uow.sessions.delete_all_by_user_id = AsyncMock(return_value=0)

    uow.verification_codes = MagicMock()
    uow.verification_codes.create = AsyncMock(side_effect=_returns_argument)
    uow.verification_codes.find_latest = AsyncMock(return_value=None)
    uow.verification_codes.mark_used = AsyncMock(return_value=True)

    uow.social_accounts = MagicMock()
    uow.social_accounts.get_by_provider_user_id = AsyncMock(return_value=None)
    uow.social_accounts.get_by_user_and_provider = AsyncMock(return_value=None)
    uow.social_accounts.create = AsyncMock(side_effect=_returns_argument)

    uow.organizations = MagicMock()
    uow.organizations.get_sso_enabled_by_domain = AsyncMock(return_value=None)

    uow.organization_members = MagicMock()
    uow.organization_members.get_by_organization_and_user = AsyncMock(return_value=None)
    uow.organization_members.get_first_by_user_id = AsyncMock(return_value=None)
    uow.organization_members.create = AsyncMock(side_effect=_returns_argument)

    uow.audit_events = MagicMock()
    uow.audit_events.create = AsyncMock(side_effect=_returns_argument)

    return uow


@pytest.fixture
def hasher():
    # Low cost parameters keep the suite fast
    return Argon2PasswordHasher(time_cost=1, memory_cost=1024, parallelism=1)


@pytest.fixture
def token_service():
    return TokenService("unit-test-secret")


@pytest.fixture
def totp():
    return TotpService("SCRIBE AI")


@pytest.fixture
def session_manager(mock_uow, token_service):
    return SessionManager(
        mock_uow,
        token_service,
        session_ttl=timedelta(hours=24),
        remember_me_ttl=timedelta(days=7),
    )


@pytest.fixture
def notifier():
    mock = MagicMock(spec=AuthNotifier)
    mock.send_verification_email = AsyncMock()
    mock.send_password_reset_email = AsyncMock()
    mock.send_phone_code = AsyncMock()
    return mock


@pytest.fixture
def audit_actions(mock_uow):
    """Callable returning the action of every audit row created so far"""

    def actions():
        return [call.args[0].action for call in mock_uow.audit_events.create.await_args_list]

    return actions


class RecordingScheduler:
    """Stands in for BackgroundTasks.add_task; run() executes what was queued"""

    def __init__(self):
        self.tasks = []

    def __call__(self, func, *args, **kwargs):
        self.tasks.append((func, args, kwargs))

    async def run(self):
        for func, args, kwargs in self.tasks:
            await func(*args, **kwargs)


@pytest.fixture
def scheduler():
    return RecordingScheduler()
