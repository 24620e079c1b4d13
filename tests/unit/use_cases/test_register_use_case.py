import pytest

from src.app.services.notifications import NotificationError
from src.app.services.security import hash_token
from src.app.use_cases.auth import RegisterCommand, RegisterUseCase
from src.domain.base import DuplicateRecordError
from src.domain.entities import User, VerificationType


@pytest.fixture
def use_case(mock_uow, session_manager, hasher, notifier):
    return RegisterUseCase(mock_uow, session_manager, hasher, notifier)


@pytest.mark.asyncio
async def test_successful_registration(use_case, mock_uow, notifier, hasher, audit_actions):
    """New account is created unverified, signed in and sent a code"""
    result = await use_case.execute(
        RegisterCommand(
            email="New.User@ScribeAI.com",
            password="Secure!Pass1",
            first_name="Ada",
            last_name="Lovelace",
        )
    )

    assert result.is_ok()
    response = result.value
    assert response.user.email == "new.user@scribeai.com"
    assert response.user.email_verified is False
    assert response.user.first_name == "Ada"
    assert response.token and response.refresh_token

    created = mock_uow.users.create.await_args.args[0]
    assert created.password_hash != "Secure!Pass1"
    assert hasher.verify("Secure!Pass1", created.password_hash)

    mock_uow.sessions.create.assert_awaited_once()
    mock_uow.commit.assert_awaited_once()
    assert audit_actions() == ["user_registered"]

    stored_code = mock_uow.verification_codes.create.await_args.args[0]
    assert stored_code.type == VerificationType.email_verification
    email, code = notifier.send_verification_email.await_args.args
    assert email == "new.user@scribeai.com"
    assert stored_code.code_hash == hash_token(code)


@pytest.mark.asyncio
async def test_invalid_email(use_case, mock_uow):
    result = await use_case.execute(RegisterCommand(email="not-an-email", password="Secure!Pass1"))

    assert result.error.code == "INVALID_EMAIL"
    mock_uow.users.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_weak_password_lists_every_rule(use_case):
    result = await use_case.execute(RegisterCommand(email="a@b.com", password="short"))

    assert result.error.code == "INVALID_PASSWORD"
    assert "at least 8 characters" in result.error.message
    assert "uppercase" in result.error.message
    assert "; " in result.error.message


@pytest.mark.asyncio
async def test_invalid_phone(use_case):
    result = await use_case.execute(
        RegisterCommand(email="a@b.com", password="Secure!Pass1", phone="12")
    )

    assert result.error.code == "INVALID_PHONE"


@pytest.mark.asyncio
async def test_duplicate_email(use_case, mock_uow, notifier):
    mock_uow.users.get_by_email.return_value = User(email="a@b.com")

    result = await use_case.execute(RegisterCommand(email="A@B.com", password="Secure!Pass1"))

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.users.create.assert_not_awaited()
    mock_uow.commit.assert_not_awaited()
    notifier.send_verification_email.assert_not_awaited()


@pytest.mark.asyncio
async def test_duplicate_phone(use_case, mock_uow):
    mock_uow.users.get_by_phone.return_value = User(email="other@b.com", phone="+14155550100")

    result = await use_case.execute(
        RegisterCommand(email="a@b.com", password="Secure!Pass1", phone="+1 415 555 0100")
    )

    assert result.error.code == "PHONE_ALREADY_EXISTS"
    mock_uow.users.get_by_phone.assert_awaited_once_with("+14155550100")


@pytest.mark.asyncio
async def test_concurrent_registration_loses_race(use_case, mock_uow):
    mock_uow.users.create.side_effect = DuplicateRecordError()

    result = await use_case.execute(RegisterCommand(email="a@b.com", password="Secure!Pass1"))

    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_email_delivery_failure_keeps_account(use_case, mock_uow, notifier):
    notifier.send_verification_email.side_effect = NotificationError("provider down")

    result = await use_case.execute(RegisterCommand(email="a@b.com", password="Secure!Pass1"))

    assert result.is_ok()
    mock_uow.commit.assert_awaited_once()
