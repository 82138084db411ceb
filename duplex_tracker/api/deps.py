"""Request dependencies: database session and authenticated principal."""

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.services import get_async_session
from duplex_tracker.services.auth_service import (
    Principal,
    extract_bearer_token,
    get_principal_for_token,
    require_admin,
)


async def get_principal(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    authorization: str | None = Header(None, alias="Authorization"),  # noqa: B008
) -> Principal:
    """Resolve the bearer token of the request to a principal."""
    return await get_principal_for_token(session, extract_bearer_token(authorization))


async def get_admin(principal: Principal = Depends(get_principal)) -> Principal:  # noqa: B008
    """Like get_principal, but only for admins."""
    return require_admin(principal)


__all__ = ["get_admin", "get_principal"]
