"""Purchase API endpoints."""

from datetime import date
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.api.deps import get_principal
from duplex_tracker.api.errors import success_response
from duplex_tracker.schemas.ledger import PurchaseResponse
from duplex_tracker.services import get_async_session
from duplex_tracker.services.auth_service import Principal
from duplex_tracker.services.purchase_service import PurchaseService

router = APIRouter(prefix="/api/purchases", tags=["purchases"])


def _dump(purchase) -> dict[str, Any]:
    return PurchaseResponse.model_validate(purchase).model_dump(mode="json")


@router.get("")
async def list_purchases(
    start_date: date | None = None,
    end_date: date | None = None,
    duplex_number: int | None = None,
    type: str | None = None,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    """List purchases recorded between start_date and end_date (inclusive), newest first."""
    purchases = await PurchaseService(session).list_purchases(
        start_date=start_date,
        end_date=end_date,
        duplex_number=duplex_number,
        purchase_type=type,
    )
    return success_response([_dump(p) for p in purchases])


@router.get("/{purchase_id}")
async def get_purchase(
    purchase_id: int,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    purchase = await PurchaseService(session).get(purchase_id)
    return success_response(_dump(purchase))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_purchase(
    body: dict[str, Any] = Body(...),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    """
    Record a purchase with its attachments.

    Body fields: name, duplex_number, type, purchase_date, price, notes,
    attachment_paths (list of already-uploaded file URLs).

    Returns:
        201: created purchase
        400: missing or invalid fields
        409: duplicate purchase
    """
    purchase = await PurchaseService(session).create_purchase(
        body, principal, attachment_paths=body.get("attachment_paths")
    )
    return success_response(_dump(purchase), message="Purchase created successfully")


@router.put("/{purchase_id}")
async def update_purchase(
    purchase_id: int,
    body: dict[str, Any] = Body(...),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    """Overwrite a purchase; attachments converge on the submitted attachment_paths."""
    purchase = await PurchaseService(session).update_purchase(
        purchase_id, body, attachment_paths=body.get("attachment_paths"), principal=principal
    )
    return success_response(_dump(purchase), message="Purchase updated successfully")


@router.delete("/{purchase_id}")
async def delete_purchase(
    purchase_id: int,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    await PurchaseService(session).delete_purchase(purchase_id, principal=principal)
    return success_response(message="Purchase deleted successfully")


__all__ = ["router"]
