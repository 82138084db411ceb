"""Analytics API endpoints."""

from datetime import date
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.api.deps import get_principal
from duplex_tracker.api.errors import success_response
from duplex_tracker.services import get_async_session
from duplex_tracker.services.analytics_service import CostAggregator
from duplex_tracker.services.auth_service import Principal

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/summary")
async def get_analytics_summary(
    as_of: date | None = None,
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    """All-time spending totals with month-over-month change percentages."""
    summary = await CostAggregator(session).summary(as_of=as_of)
    return success_response(
        {
            "total_spending": summary.total_spending,
            "labor_costs": summary.labor_costs,
            "material_costs": summary.material_costs,
            "monthly_change": summary.monthly_change._asdict(),
        }
    )


@router.get("/duplex-costs")
async def get_duplex_costs(
    session: AsyncSession = Depends(get_async_session),  # noqa: B008
    principal: Principal = Depends(get_principal),  # noqa: B008
) -> dict[str, Any]:
    """One row per duplex number with labor, material and total cost."""
    rows = await CostAggregator(session).duplex_costs()
    return success_response(
        [
            {
                "duplex_number": row.duplex_number,
                "labor_cost": row.labor_cost,
                "material_cost": row.material_cost,
                "total": row.total,
                "last_updated": row.last_updated.isoformat(),
            }
            for row in rows
        ]
    )


__all__ = ["router"]
