"""Admin-managed custom purchase categories."""

import logging
from typing import Any

from sqlalchemy import delete, func, or_, select

from duplex_tracker.models.purchase import Purchase
from duplex_tracker.models.purchase_type import PurchaseType
from duplex_tracker.schemas.ledger import PurchaseTypePayload, validate_payload
from duplex_tracker.services.audit_service import AuditService
from duplex_tracker.services.auth_service import Principal, require_admin
from duplex_tracker.services.errors import (
    DuplicateRecordError,
    NotFoundError,
    ValidationError,
    store_errors,
)
from duplex_tracker.services.ledger_service import SessionService

logger = logging.getLogger(__name__)


class PurchaseTypeService(SessionService):
    """List, create and delete custom purchase types.

    A purchase uses a custom type by storing its ``type_key``
    (``custom-<id>``) in ``Purchase.type``; such a type cannot be deleted.
    """

    record_model = PurchaseType
    entity_type = "purchase_type"
    entity_label = "Purchase type"

    async def list_purchase_types(self) -> list[PurchaseType]:
        """All purchase types, newest first."""
        with store_errors():
            result = await self.session.execute(
                select(PurchaseType).order_by(PurchaseType.created_at.desc(), PurchaseType.id.desc())
            )
            return list(result.scalars().all())

    async def create_purchase_type(
        self, payload: PurchaseTypePayload | dict[str, Any], principal: Principal
    ) -> PurchaseType:
        """Create a purchase type.

        Raises:
            PermissionDeniedError: principal is not an admin
            ValidationError: name or Arabic name missing
            DuplicateRecordError: either label is already taken
        """
        require_admin(principal)
        data = validate_payload(PurchaseTypePayload, payload)

        async with self._transaction("create"):
            existing = await self.session.execute(
                select(PurchaseType.id)
                .where(or_(PurchaseType.name == data.name, PurchaseType.name_ar == data.name_ar))
                .limit(1)
            )
            if existing.scalar_one_or_none() is not None:
                raise DuplicateRecordError("A purchase type with this name already exists")

            purchase_type = PurchaseType(name=data.name, name_ar=data.name_ar, created_by=principal.email)
            self.session.add(purchase_type)
            await self.session.flush()
            type_id = purchase_type.id
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=type_id,
                action="create",
                actor_id=principal.id,
                changes={"name": data.name, "name_ar": data.name_ar},
            )

        logger.info("Created purchase type %d (%s)", type_id, data.name)
        return await self.get(type_id)

    async def delete_purchase_type(self, type_id: int, principal: Principal) -> None:
        """Delete an unused purchase type.

        Raises:
            PermissionDeniedError: principal is not an admin
            NotFoundError: no purchase type with this id
            ValidationError: purchases still reference the type
        """
        require_admin(principal)

        async with self._transaction("delete"):
            if not await self._exists(type_id):
                raise NotFoundError("Purchase type not found")

            in_use = await self.session.execute(
                select(func.count(Purchase.id)).where(Purchase.type == f"custom-{type_id}")
            )
            if in_use.scalar_one() > 0:
                raise ValidationError(
                    "Cannot delete a type that is being used in purchases",
                    fields={"id": "type is in use"},
                )

            await self.session.execute(delete(PurchaseType).where(PurchaseType.id == type_id))
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=type_id,
                action="delete",
                actor_id=principal.id,
            )

        logger.info("Deleted purchase type %d", type_id)


__all__ = ["PurchaseTypeService"]
