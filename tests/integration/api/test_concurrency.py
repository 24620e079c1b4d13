import asyncio
from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy.orm import sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.session_manager import SessionManager
from src.app.services.token_service import TokenService
from src.app.services.verification_codes import VerificationCodeService
from src.domain.entities import Session, User, VerificationCode, VerificationType


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def user(session_factory):
    async with session_factory() as session:
        user = User(email="race@scribeai.com")
        session.add(user)
        await session.commit()
        return user


async def consume_code(session_factory, code):
    # Each contender gets its own connection, like two API workers would
    async with session_factory() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            result = await VerificationCodeService(uow).consume(
                code, VerificationType.email_verification, email="race@scribeai.com"
            )
            if result.is_ok():
                await uow.commit()
            return result


async def rotate(session_factory, refresh_token):
    async with session_factory() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            result = await SessionManager(uow, TokenService("race-secret")).refresh_session(
                refresh_token
            )
            if result.is_ok():
                await uow.commit()
            return result


@pytest.mark.asyncio
async def test_concurrent_code_consumption_has_one_winner(session_factory, user):
    async with session_factory() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            code = await VerificationCodeService(uow).issue(
                VerificationType.email_verification,
                timedelta(hours=1),
                user_id=user.id,
                email=user.email,
            )
            await uow.commit()

    results = await asyncio.gather(
        consume_code(session_factory, code), consume_code(session_factory, code)
    )

    winners = [result for result in results if result.is_ok()]
    losers = [result for result in results if result.is_err()]
    assert len(winners) == 1
    assert len(losers) == 1
    assert losers[0].error.code == "CODE_ALREADY_USED"

    async with session_factory() as session:
        stored = (await session.exec(select(VerificationCode))).one()
        assert stored.used_at is not None


@pytest.mark.asyncio
async def test_concurrent_refresh_rotation_has_one_winner(session_factory, user):
    async with session_factory() as session:
        async with SqlAlchemyUnitOfWork(session) as uow:
            issued = await SessionManager(uow, TokenService("race-secret")).create_session(user.id)
            await uow.commit()

    results = await asyncio.gather(
        rotate(session_factory, issued.refresh_token),
        rotate(session_factory, issued.refresh_token),
    )

    winners = [result for result in results if result.is_ok()]
    losers = [result for result in results if result.is_err()]
    assert len(winners) == 1
    assert len(losers) == 1
    assert losers[0].error.code == "INVALID_REFRESH_TOKEN"

    async with session_factory() as session:
        sessions = (await session.exec(select(Session))).all()
        assert [s.id for s in sessions] == [winners[0].value.session_id]
