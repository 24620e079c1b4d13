import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from libs.result import Error, Return
from src.adapter.identity.sso_validators import SamlAssertionValidator
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.api.app import create_app
from src.app.services.identity import (
    ExternalIdentity,
    IdentityProviderRegistry,
    IIdentityProvider,
)
from src.app.services.notifications import AuthNotifier, IEmailSender, ISmsSender
from src.depends import (
    get_identity_providers,
    get_notifier,
    get_sso_validators,
    get_unit_of_work,
)
from src.domain.entities import SocialProvider, SsoProtocol


class RecordingEmailSender(IEmailSender):
    def __init__(self):
        self.sent = []

    async def send(self, to, subject, html):
        self.sent.append({"to": to, "subject": subject, "html": html})


class RecordingSmsSender(ISmsSender):
    def __init__(self):
        self.sent = []

    async def send(self, phone, message):
        self.sent.append({"phone": phone, "message": message})


class FakeIdentityProvider(IIdentityProvider):
    """Maps authorization codes to identities registered by the test"""

    def __init__(self):
        self.identities = {}

    async def exchange_code(self, code, redirect_uri):
        if code not in self.identities:
            return Return.err(Error("UPSTREAM_AUTH_FAILED", "Failed to authenticate with google"))
        return Return.ok(self.identities[code])


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest.fixture
def email_outbox():
    return RecordingEmailSender()


@pytest.fixture
def sms_outbox():
    return RecordingSmsSender()


@pytest.fixture
def google():
    return FakeIdentityProvider()


@pytest_asyncio.fixture
async def client(db_session, email_outbox, sms_outbox, google):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    notifier = AuthNotifier(email_outbox, sms_outbox, "https://app.scribeai.com")

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_identity_providers] = lambda: IdentityProviderRegistry(
        {SocialProvider.google: google}
    )
    app.dependency_overrides[get_sso_validators] = lambda: {
        SsoProtocol.saml: SamlAssertionValidator()
    }

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


PASSWORD = "SecurePass123!"


@pytest.fixture
def register_user(client):
    """Registers an account through the API and returns the auth response body"""

    async def register(email="user@scribeai.com", password=PASSWORD, **extra):
        response = await client.post(
            "/auth/register", json={"email": email, "password": password, **extra}
        )
        assert response.status_code == 201, response.text
        return response.json()

    return register