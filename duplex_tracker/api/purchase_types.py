"""Purchase type API endpoints; writes are admin only."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.api.deps import get_admin, get_principal
from duplex_tracker.api.errors import success_response
from duplex_tracker.schemas.ledger import PurchaseTypeResponse
from duplex_tracker.services import get_async_session
from duplex_tracker.services.auth_service import Principal
from duplex_tracker.services.purchase_type_service import PurchaseTypeService

router = APIRouter(prefix="/api/purchase-types", tags=["purchase-types"])


@router.get("")
async def list_purchase_types(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    types = await PurchaseTypeService(session).list_purchase_types()
    return success_response(
        [PurchaseTypeResponse.model_validate(t).model_dump(mode="json") for t in types]
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_purchase_type(
    body: dict[str, Any] = Body(...),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    admin: Principal = Depends(get_admin),  # noqa: B008
) -> dict[str, Any]:
    purchase_type = await PurchaseTypeService(session).create_purchase_type(body, admin)
    return success_response(
        PurchaseTypeResponse.model_validate(purchase_type).model_dump(mode="json"),
        message="Purchase type created successfully",
    )


@router.delete("/{type_id}")
async def delete_purchase_type(
    type_id: int,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    admin: Principal = Depends(get_admin),  # noqa: B008
) -> dict[str, Any]:
    await PurchaseTypeService(session).delete_purchase_type(type_id, admin)
    return success_response(message="Purchase type deleted successfully")


__all__ = ["router"]
