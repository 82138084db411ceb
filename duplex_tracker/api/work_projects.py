"""Work project API endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.api.deps import get_principal
from duplex_tracker.api.errors import success_response
from duplex_tracker.schemas.ledger import WorkPaymentResponse, WorkProjectResponse
from duplex_tracker.services import get_async_session
from duplex_tracker.services.auth_service import Principal
from duplex_tracker.services.work_payment_service import WorkPaymentService
from duplex_tracker.services.work_project_service import WorkProjectService

router = APIRouter(prefix="/api/work-projects", tags=["work-projects"])


def _dump(project) -> dict[str, Any]:
    return WorkProjectResponse.model_validate(project).model_dump(mode="json")


@router.get("")
async def list_work_projects(
    duplex_number: int | None = None,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    projects = await WorkProjectService(session).list_work_projects(duplex_number=duplex_number)
    return success_response([_dump(p) for p in projects])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_work_project(
    body: dict[str, Any] = Body(...),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    project = await WorkProjectService(session).create_work_project(body, principal)
    return success_response(_dump(project), message="Work project created successfully")


@router.get("/{project_id}")
async def get_work_project(
    project_id: int,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    project = await WorkProjectService(session).get(project_id)
    return success_response(_dump(project))


@router.get("/{project_id}/payments")
async def get_project_payments(
    project_id: int,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    """Project with its payments, total paid and remaining budget."""
    result = await WorkProjectService(session).get_project_payments(project_id)
    return success_response(
        {
            "project": _dump(result.project),
            "payments": [
                WorkPaymentResponse.model_validate(p).model_dump(mode="json") for p in result.payments
            ],
            "total_paid": result.total_paid,
            "remaining": result.remaining,
        }
    )


@router.post("/{project_id}/payments", status_code=status.HTTP_201_CREATED)
async def add_project_payment(
    project_id: int,
    body: dict[str, Any] = Body(...),  # noqa: B008
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    """Record a payment against the project in the path."""
    payload = {**body, "project_id": project_id}
    payload.pop("projectId", None)
    payment = await WorkPaymentService(session).create_work_payment(
        payload, principal, attachment_paths=body.get("attachment_paths")
    )
    return success_response(
        WorkPaymentResponse.model_validate(payment).model_dump(mode="json"),
        message="Work payment created successfully",
    )


__all__ = ["router"]
