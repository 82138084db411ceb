"""Work payment ledger: labor payments against work projects, with attachments."""

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from duplex_tracker.models import utcnow
from duplex_tracker.models.work_payment import WorkPayment, WorkPaymentAttachment
from duplex_tracker.models.work_project import WorkProject
from duplex_tracker.schemas.ledger import (
    WorkPaymentPayload,
    normalize_attachment_paths,
    validate_payload,
)
from duplex_tracker.services.audit_service import AuditService, ledger_changes
from duplex_tracker.services.auth_service import Principal
from duplex_tracker.services.errors import DuplicateRecordError, NotFoundError, store_errors
from duplex_tracker.services.ledger_service import LedgerWriter

logger = logging.getLogger(__name__)


class WorkPaymentService(LedgerWriter):
    """Create, update, delete and list work payments.

    Work payments stamp the client-supplied ``created_by`` when present,
    otherwise the principal's email.
    """

    record_model = WorkPayment
    attachment_model = WorkPaymentAttachment
    owner_key = "payment_id"
    entity_type = "work_payment"
    entity_label = "Payment"

    def _load_options(self) -> list:
        return [
            selectinload(WorkPayment.attachments),
            selectinload(WorkPayment.project),
        ]

    async def _require_project(self, project_id: int) -> None:
        result = await self.session.execute(
            select(WorkProject.id).where(WorkProject.id == project_id)
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Project not found")

    async def create_work_payment(
        self,
        payload: WorkPaymentPayload | dict[str, Any],
        principal: Principal,
        attachment_paths: Iterable[str] | None = None,
    ) -> WorkPayment:
        """Create a work payment together with its attachments.

        Raises:
            ValidationError: payload or attachment list is malformed
            NotFoundError: the referenced project does not exist
            DuplicateRecordError: the project already has this amount on this day
            TransactionError: the insert failed and was rolled back
        """
        data = validate_payload(WorkPaymentPayload, payload)
        paths = normalize_attachment_paths(attachment_paths)

        async with self._transaction("create"):
            await self._require_project(data.project_id)
            if await self.guard.is_duplicate_work_payment(data.project_id, data.amount, data.date):
                raise DuplicateRecordError(
                    "A payment with the same amount and date already exists for this project"
                )

            payment = WorkPayment(
                project_id=data.project_id,
                amount=data.amount,
                date=data.date,
                notes=data.notes or None,
                duplex_number=data.duplex_number,
                created_by=data.created_by or principal.email,
            )
            self.session.add(payment)
            await self.session.flush()
            payment_id = payment.id

            inserted = await self._insert_attachments(payment_id, paths)
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=payment_id,
                action="create",
                actor_id=principal.id,
                changes=ledger_changes(added=paths),
            )

        logger.info(
            "Created work payment %d on project %d with %d attachments",
            payment_id,
            data.project_id,
            inserted,
        )
        return await self.get(payment_id)

    async def update_work_payment(
        self,
        payment_id: int,
        payload: WorkPaymentPayload | dict[str, Any],
        attachment_paths: Iterable[str] | None = None,
        principal: Principal | None = None,
    ) -> WorkPayment:
        """Overwrite all scalar fields and converge attachments onto ``attachment_paths``.

        ``updated_at`` is refreshed even when only attachments change. The
        creator is never changed.

        Raises:
            ValidationError: payload or attachment list is malformed
            NotFoundError: no such payment, or the new project does not exist
            TransactionError: the update failed and was rolled back
        """
        data = validate_payload(WorkPaymentPayload, payload)
        paths = normalize_attachment_paths(attachment_paths)

        async with self._transaction("update"):
            payment = await self.session.get(WorkPayment, payment_id)
            if payment is None:
                raise NotFoundError("Payment not found")
            if data.project_id != payment.project_id:
                await self._require_project(data.project_id)

            changed = self._overwrite(
                payment,
                {
                    "project_id": data.project_id,
                    "amount": data.amount,
                    "date": data.date,
                    "notes": data.notes or None,
                    "duplex_number": data.duplex_number,
                },
            )
            payment.updated_at = utcnow()
            await self.session.flush()

            delta = await self._reconcile(payment_id, paths)
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=payment_id,
                action="update",
                actor_id=principal.id if principal else None,
                changes=ledger_changes(changed, delta.to_insert, delta.to_delete),
            )

        logger.info(
            "Updated work payment %d: +%d/-%d attachments",
            payment_id,
            len(delta.to_insert),
            len(delta.to_delete),
        )
        return await self.get(payment_id)

    async def delete_work_payment(self, payment_id: int, principal: Principal | None = None) -> None:
        """Delete a work payment; its attachments are removed by cascade.

        Raises:
            NotFoundError: no payment with this id
        """
        await self._delete_record(payment_id, actor_id=principal.id if principal else None)

    async def list_work_payments(
        self,
        project_id: int | None = None,
        duplex_number: int | None = None,
    ) -> list[WorkPayment]:
        """List work payments, most recent payment date first."""
        stmt = select(WorkPayment).options(*self._load_options())
        if project_id:
            stmt = stmt.where(WorkPayment.project_id == project_id)
        if duplex_number:
            stmt = stmt.where(WorkPayment.duplex_number == duplex_number)
        stmt = stmt.order_by(WorkPayment.date.desc(), WorkPayment.id.desc())

        with store_errors():
            result = await self.session.execute(stmt)
            return list(result.scalars().all())


__all__ = ["WorkPaymentService"]
