"""Cost analytics across all duplexes.

Read-only aggregation over purchases (material costs) and work payments
(labor costs):

- Summary: all-time labor and material totals plus month-over-month
  change percentages, each clamped to [-100, 100]
- Duplex costs: one row per duplex number, including duplexes with no
  activity at all
"""

import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import NamedTuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.config import settings
from duplex_tracker.models.purchase import Purchase
from duplex_tracker.models.work_payment import WorkPayment
from duplex_tracker.services.errors import ValidationError, store_errors

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
"""last_updated of a duplex with no recorded activity"""


class MonthlyChange(NamedTuple):
    """Percentage change of the current month against the previous one."""

    total_spending: float
    labor_costs: float
    material_costs: float


class AggregateSummary(NamedTuple):
    """Fleet-wide spending totals.

    The totals are all-time sums, while ``monthly_change`` compares only the
    current calendar month against the previous one.
    """

    total_spending: float
    labor_costs: float
    material_costs: float
    monthly_change: MonthlyChange


class DuplexCostRow(NamedTuple):
    """Labor and material costs recorded against one duplex."""

    duplex_number: int
    labor_cost: float
    material_cost: float
    total: float
    last_updated: datetime


def monthly_change(current: Decimal | float, last: Decimal | float) -> float:
    """Percentage change from ``last`` to ``current``, clamped to [-100, 100].

    A previous value of zero yields 0 rather than an unbounded increase.

    Examples:
        >>> monthly_change(150, 100)
        50.0
        >>> monthly_change(500, 0)
        0.0
    """
    current = Decimal(str(current))
    last = Decimal(str(last))
    if last == 0:
        return 0.0
    change = float((current - last) / last * 100)
    return max(min(change, 100.0), -100.0)


def previous_month(year: int, month: int) -> tuple[int, int]:
    """Calendar month before (year, month); January rolls back to December."""
    if month == 1:
        return year - 1, 12
    return year, month - 1


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First day of the month and first day of the following month."""
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def _to_decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands timestamps back without tzinfo; they are stored as UTC
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class CostAggregator:
    """Compute spending summaries and per-duplex cost rows."""

    def __init__(self, session: AsyncSession, duplex_count: int | None = None):
        """Initialize with database session.

        Args:
            session: AsyncSession for database operations
            duplex_count: Highest duplex number reported (default: settings)
        """
        self.session = session
        self.duplex_count = duplex_count or settings.duplex_count

    async def _sum(self, column, date_column=None, bounds: tuple[date, date] | None = None) -> Decimal:
        stmt = select(func.coalesce(func.sum(column), 0))
        if bounds is not None:
            start, end = bounds
            stmt = stmt.where(date_column >= start, date_column < end)
        result = await self.session.execute(stmt)
        return _to_decimal(result.scalar())

    async def summary(self, as_of: date | None = None) -> AggregateSummary:
        """Spending summary as seen on ``as_of`` (default: today, UTC).

        Returns:
            AggregateSummary with all-time totals and monthly change percentages
        """
        as_of = as_of or datetime.now(timezone.utc).date()
        current = month_bounds(as_of.year, as_of.month)
        last = month_bounds(*previous_month(as_of.year, as_of.month))

        with store_errors():
            total_labor = await self._sum(WorkPayment.amount)
            total_material = await self._sum(Purchase.price)
            current_labor = await self._sum(WorkPayment.amount, WorkPayment.date, current)
            current_material = await self._sum(Purchase.price, Purchase.purchase_date, current)
            last_labor = await self._sum(WorkPayment.amount, WorkPayment.date, last)
            last_material = await self._sum(Purchase.price, Purchase.purchase_date, last)

        summary = AggregateSummary(
            total_spending=float(total_labor + total_material),
            labor_costs=float(total_labor),
            material_costs=float(total_material),
            monthly_change=MonthlyChange(
                total_spending=monthly_change(
                    current_labor + current_material, last_labor + last_material
                ),
                labor_costs=monthly_change(current_labor, last_labor),
                material_costs=monthly_change(current_material, last_material),
            ),
        )
        logger.debug("Computed analytics summary as of %s: %s", as_of, summary)
        return summary

    async def duplex_costs(self, first: int = 1, last: int | None = None) -> list[DuplexCostRow]:
        """One cost row per duplex number in [first, last], ascending.

        Labor last-updated tracks work payment edits (updated_at) while
        material last-updated tracks purchase creation (created_at).

        Raises:
            ValidationError: if the range is empty or starts below 1
        """
        last = last if last is not None else self.duplex_count
        if first < 1 or last < first:
            raise ValidationError(
                "Invalid duplex range", fields={"range": f"expected 1 <= first <= last, got {first}..{last}"}
            )

        labor_stmt = (
            select(
                WorkPayment.duplex_number,
                func.sum(WorkPayment.amount),
                func.max(WorkPayment.updated_at),
            )
            .where(WorkPayment.duplex_number.between(first, last))
            .group_by(WorkPayment.duplex_number)
        )
        material_stmt = (
            select(
                Purchase.duplex_number,
                func.sum(Purchase.price),
                func.max(Purchase.created_at),
            )
            .where(Purchase.duplex_number.between(first, last))
            .group_by(Purchase.duplex_number)
        )

        with store_errors():
            labor = {
                number: (_to_decimal(cost), _as_utc(updated))
                for number, cost, updated in (await self.session.execute(labor_stmt)).all()
            }
            material = {
                number: (_to_decimal(cost), _as_utc(updated))
                for number, cost, updated in (await self.session.execute(material_stmt)).all()
            }

        rows = []
        for number in range(first, last + 1):
            labor_cost, labor_updated = labor.get(number, (Decimal("0"), None))
            material_cost, material_updated = material.get(number, (Decimal("0"), None))
            rows.append(
                DuplexCostRow(
                    duplex_number=number,
                    labor_cost=float(labor_cost),
                    material_cost=float(material_cost),
                    total=float(labor_cost + material_cost),
                    last_updated=max(labor_updated or EPOCH, material_updated or EPOCH),
                )
            )
        return rows


__all__ = [
    "EPOCH",
    "AggregateSummary",
    "CostAggregator",
    "DuplexCostRow",
    "MonthlyChange",
    "month_bounds",
    "monthly_change",
    "previous_month",
]
