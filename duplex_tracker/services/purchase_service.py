"""Purchase ledger: material purchases and their attachments."""

import logging
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from duplex_tracker.models.purchase import Purchase, PurchaseAttachment
from duplex_tracker.schemas.ledger import (
    PurchasePayload,
    normalize_attachment_paths,
    validate_payload,
)
from duplex_tracker.services.audit_service import AuditService, ledger_changes
from duplex_tracker.services.auth_service import Principal
from duplex_tracker.services.errors import DuplicateRecordError, NotFoundError, store_errors
from duplex_tracker.services.ledger_service import LedgerWriter

logger = logging.getLogger(__name__)


def _day_start(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


class PurchaseService(LedgerWriter):
    """Create, update, delete and list purchases.

    Purchases stamp the principal's display name as their creator.
    """

    record_model = Purchase
    attachment_model = PurchaseAttachment
    owner_key = "purchase_id"
    entity_type = "purchase"
    entity_label = "Purchase"

    async def create_purchase(
        self,
        payload: PurchasePayload | dict[str, Any],
        principal: Principal,
        attachment_paths: Iterable[str] | None = None,
    ) -> Purchase:
        """Create a purchase together with its attachments.

        Args:
            payload: Scalar purchase fields
            principal: Authenticated user recording the purchase
            attachment_paths: Already-uploaded file URLs/paths

        Returns:
            The stored purchase with attachments loaded

        Raises:
            ValidationError: payload or attachment list is malformed
            DuplicateRecordError: same name, duplex, type and day already recorded
            TransactionError: the insert failed and was rolled back
        """
        data = validate_payload(PurchasePayload, payload)
        paths = normalize_attachment_paths(attachment_paths)

        async with self._transaction("create"):
            if await self.guard.is_duplicate_purchase(
                data.name, data.duplex_number, data.type, data.purchase_date
            ):
                raise DuplicateRecordError(
                    "A purchase with the same name, duplex number, type, and date already exists"
                )

            purchase = Purchase(
                name=data.name,
                duplex_number=data.duplex_number,
                type=data.type,
                purchase_date=data.purchase_date,
                price=data.price,
                notes=data.notes or None,
                created_by=principal.display_name,
            )
            self.session.add(purchase)
            await self.session.flush()
            purchase_id = purchase.id

            # A new record has no attachments, so every desired path is an insert
            inserted = await self._insert_attachments(purchase_id, paths)
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=purchase_id,
                action="create",
                actor_id=principal.id,
                changes=ledger_changes(added=paths),
            )

        logger.info(
            "Created purchase %d for duplex %d by %s with %d attachments",
            purchase_id,
            data.duplex_number,
            principal.display_name,
            inserted,
        )
        return await self.get(purchase_id)

    async def update_purchase(
        self,
        purchase_id: int,
        payload: PurchasePayload | dict[str, Any],
        attachment_paths: Iterable[str] | None = None,
        principal: Principal | None = None,
    ) -> Purchase:
        """Overwrite all scalar fields and converge attachments onto ``attachment_paths``.

        An empty or missing attachment list detaches every file. The creator
        is never changed.

        Raises:
            ValidationError: payload or attachment list is malformed
            NotFoundError: no purchase with this id
            TransactionError: the update failed and was rolled back
        """
        data = validate_payload(PurchasePayload, payload)
        paths = normalize_attachment_paths(attachment_paths)

        async with self._transaction("update"):
            purchase = await self.session.get(Purchase, purchase_id)
            if purchase is None:
                raise NotFoundError("Purchase not found")

            changed = self._overwrite(
                purchase,
                {
                    "name": data.name,
                    "duplex_number": data.duplex_number,
                    "type": data.type,
                    "purchase_date": data.purchase_date,
                    "price": data.price,
                    "notes": data.notes or None,
                },
            )
            await self.session.flush()

            delta = await self._reconcile(purchase_id, paths)
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=purchase_id,
                action="update",
                actor_id=principal.id if principal else None,
                changes=ledger_changes(changed, delta.to_insert, delta.to_delete),
            )

        logger.info(
            "Updated purchase %d: +%d/-%d attachments",
            purchase_id,
            len(delta.to_insert),
            len(delta.to_delete),
        )
        return await self.get(purchase_id)

    async def delete_purchase(self, purchase_id: int, principal: Principal | None = None) -> None:
        """Delete a purchase; its attachments are removed by cascade.

        Raises:
            NotFoundError: no purchase with this id
        """
        await self._delete_record(purchase_id, actor_id=principal.id if principal else None)

    async def list_purchases(
        self,
        start_date: date | None = None,
        end_date: date | None = None,
        duplex_number: int | None = None,
        purchase_type: str | None = None,
    ) -> list[Purchase]:
        """List purchases newest first.

        The date range filters on the day the purchase was recorded
        (created_at), inclusive on both ends, and only applies when both
        bounds are given.
        """
        stmt = select(Purchase).options(selectinload(Purchase.attachments))

        if start_date and end_date:
            stmt = stmt.where(
                Purchase.created_at >= _day_start(start_date),
                Purchase.created_at < _day_start(end_date + timedelta(days=1)),
            )
        if duplex_number:
            stmt = stmt.where(Purchase.duplex_number == duplex_number)
        if purchase_type:
            stmt = stmt.where(Purchase.type == purchase_type)

        stmt = stmt.order_by(Purchase.created_at.desc(), Purchase.id.desc())

        with store_errors():
            result = await self.session.execute(stmt)
            return list(result.scalars().all())


__all__ = ["PurchaseService"]
