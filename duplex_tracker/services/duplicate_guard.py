"""Duplicate-entry checks run before a financial record is created."""

import logging
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.models.purchase import Purchase
from duplex_tracker.models.work_payment import WorkPayment

logger = logging.getLogger(__name__)


def _as_day(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


class DuplicateGuard:
    """Detect accidental double entry of purchases and work payments.

    The checks are plain reads with no unique constraint behind them, so
    two concurrent identical creates can both pass. Only create paths call
    the guard; updates may collide freely.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def is_duplicate_purchase(
        self,
        name: str,
        duplex_number: int,
        purchase_type: str,
        purchase_date: date | datetime,
    ) -> bool:
        """True if a purchase matches all four fields, date compared by day."""
        stmt = (
            select(Purchase.id)
            .where(
                Purchase.name == name,
                Purchase.duplex_number == duplex_number,
                Purchase.type == purchase_type,
                Purchase.purchase_date == _as_day(purchase_date),
            )
            .limit(1)
        )
        existing_id = (await self.session.execute(stmt)).scalar_one_or_none()
        if existing_id is not None:
            logger.info(
                "Duplicate purchase rejected: matches purchase %d (%s, duplex %d)",
                existing_id,
                name,
                duplex_number,
            )
        return existing_id is not None

    async def is_duplicate_work_payment(
        self,
        project_id: int,
        amount: Decimal,
        payment_date: date | datetime,
    ) -> bool:
        """True if the project already has a payment of this amount on this day."""
        stmt = (
            select(WorkPayment.id)
            .where(
                WorkPayment.project_id == project_id,
                WorkPayment.amount == amount,
                WorkPayment.date == _as_day(payment_date),
            )
            .limit(1)
        )
        existing_id = (await self.session.execute(stmt)).scalar_one_or_none()
        if existing_id is not None:
            logger.info(
                "Duplicate work payment rejected: matches payment %d (project %d)",
                existing_id,
                project_id,
            )
        return existing_id is not None


__all__ = ["DuplicateGuard"]
