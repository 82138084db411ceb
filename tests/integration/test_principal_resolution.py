"""Integration tests for resolving bearer tokens to principals."""

import time

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.models import User, UserRole
from duplex_tracker.services.auth_service import get_principal_for_token, sign_token
from duplex_tracker.services.errors import AuthenticationError


@pytest.mark.asyncio
async def test_token_resolves_to_principal(session: AsyncSession, user: User):
    principal = await get_principal_for_token(session, sign_token(user.email))

    assert principal.id == user.id
    assert principal.email == "mona@example.com"
    assert principal.display_name == "Mona Saleh"
    assert principal.role == UserRole.USER
    assert principal.is_admin is False


@pytest.mark.asyncio
async def test_admin_principal(session: AsyncSession, admin: User):
    principal = await get_principal_for_token(session, sign_token(admin.email))

    assert principal.is_admin is True


@pytest.mark.asyncio
async def test_missing_token(session: AsyncSession):
    with pytest.raises(AuthenticationError) as exc:
        await get_principal_for_token(session, None)
    assert exc.value.http_status == 401


@pytest.mark.asyncio
async def test_invalid_token(session: AsyncSession, user: User):
    with pytest.raises(AuthenticationError):
        await get_principal_for_token(session, sign_token(user.email, secret="wrong-secret"))


@pytest.mark.asyncio
async def test_expired_token(session: AsyncSession, user: User):
    token = sign_token(user.email, auth_date=int(time.time()) - 7 * 24 * 3600)

    with pytest.raises(AuthenticationError):
        await get_principal_for_token(session, token)


@pytest.mark.asyncio
async def test_unknown_user(session: AsyncSession):
    with pytest.raises(AuthenticationError) as exc:
        await get_principal_for_token(session, sign_token("nobody@example.com"))
    assert exc.value.message == "User not found"
