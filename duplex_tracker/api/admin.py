"""Admin API endpoints: users, roles and activity."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.api.deps import get_admin
from duplex_tracker.api.errors import success_response
from duplex_tracker.services import get_async_session
from duplex_tracker.services.admin_service import ActivityEntry, AdminService
from duplex_tracker.services.auth_service import Principal

router = APIRouter(prefix="/api/admin", tags=["admin"])


def _user(user) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role.value,
        "created_at": user.created_at.isoformat(),
    }


def _entry(entry: ActivityEntry) -> dict[str, Any]:
    data = entry._asdict()
    data["created_at"] = entry.created_at.isoformat()
    return data


@router.get("/users")
async def list_users(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    admin: Principal = Depends(get_admin),  # noqa: B008
) -> dict[str, Any]:
    users = await AdminService(session).list_users(admin)
    return success_response([_user(u) for u in users])


@router.put("/users/{email}/role")
async def update_user_role(
    email: str,
    body: dict[str, Any] = Body(...),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    admin: Principal = Depends(get_admin),  # noqa: B008
) -> dict[str, Any]:
    """Set a user's role to ``user`` or ``admin``."""
    user = await AdminService(session).update_user_role(email, str(body.get("role", "")), admin)
    return success_response(_user(user), message="User role updated successfully")


@router.get("/activity")
async def get_activity_feed(
    limit: int | None = None,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    admin: Principal = Depends(get_admin),  # noqa: B008
) -> dict[str, Any]:
    entries = await AdminService(session).get_activity_feed(admin, limit=limit)
    return success_response([_entry(e) for e in entries])


@router.get("/users/{identity}/history")
async def get_user_history(
    identity: str,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    admin: Principal = Depends(get_admin),  # noqa: B008
) -> dict[str, Any]:
    entries = await AdminService(session).get_user_history(identity, admin)
    return success_response([_entry(e) for e in entries])


__all__ = ["router"]
