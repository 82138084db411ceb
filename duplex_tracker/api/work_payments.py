"""Work payment API endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.api.deps import get_principal
from duplex_tracker.api.errors import success_response
from duplex_tracker.schemas.ledger import WorkPaymentResponse
from duplex_tracker.services import get_async_session
from duplex_tracker.services.auth_service import Principal
from duplex_tracker.services.work_payment_service import WorkPaymentService

router = APIRouter(prefix="/api/work-payments", tags=["work-payments"])


def _dump(payment) -> dict[str, Any]:
    return WorkPaymentResponse.model_validate(payment).model_dump(mode="json")


@router.get("")
async def list_work_payments(
    project_id: int | None = None,
    duplex_number: int | None = None,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    payments = await WorkPaymentService(session).list_work_payments(
        project_id=project_id, duplex_number=duplex_number
    )
    return success_response([_dump(p) for p in payments])


@router.get("/{payment_id}")
async def get_work_payment(
    payment_id: int,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    payment = await WorkPaymentService(session).get(payment_id)
    return success_response(_dump(payment))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_work_payment(
    body: dict[str, Any] = Body(...),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    """
    Record a payment against a work project.

    Returns:
        201: created payment
        400: missing or invalid fields
        404: project not found
        409: duplicate payment
    """
    payment = await WorkPaymentService(session).create_work_payment(
        body, principal, attachment_paths=body.get("attachment_paths")
    )
    return success_response(_dump(payment), message="Work payment created successfully")


@router.put("/{payment_id}")
async def update_work_payment(
    payment_id: int,
    body: dict[str, Any] = Body(...),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    payment = await WorkPaymentService(session).update_work_payment(
        payment_id, body, attachment_paths=body.get("attachment_paths"), principal=principal
    )
    return success_response(_dump(payment), message="Work payment updated successfully")


@router.delete("/{payment_id}")
async def delete_work_payment(
    payment_id: int,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    await WorkPaymentService(session).delete_work_payment(payment_id, principal=principal)
    return success_response(message="Work payment deleted successfully")


__all__ = ["router"]
