"""Admin service: user management and activity reporting."""

import logging
from datetime import datetime
from typing import NamedTuple

from sqlalchemy import select

from duplex_tracker.models.purchase import Purchase
from duplex_tracker.models.user import User, UserRole
from duplex_tracker.models.work_payment import WorkPayment
from duplex_tracker.services.audit_service import AuditService
from duplex_tracker.services.auth_service import Principal, require_admin
from duplex_tracker.services.errors import NotFoundError, ValidationError, store_errors
from duplex_tracker.services.ledger_service import SessionService

logger = logging.getLogger(__name__)


class ActivityEntry(NamedTuple):
    """One purchase or work payment as it appears in activity reports."""

    type: str  # "purchase" or "work_payment"
    id: int
    created_by: str | None
    user_email: str | None
    user_name: str | None
    action: str
    duplex_number: int
    amount: float
    notes: str | None
    created_at: datetime


class AdminService(SessionService):
    """Service for admin-only user and activity operations.

    Every public method checks the admin role first.
    """

    record_model = User
    entity_type = "user"
    entity_label = "User"

    async def list_users(self, principal: Principal) -> list[User]:
        """All users, newest first."""
        require_admin(principal)
        with store_errors():
            result = await self.session.execute(
                select(User).order_by(User.created_at.desc(), User.id.desc())
            )
            return list(result.scalars().all())

    async def update_user_role(self, email: str, role: str, principal: Principal) -> User:
        """Set the role of the user identified by ``email``.

        Args:
            email: Email of the user to change
            role: ``user`` or ``admin``
            principal: Acting admin

        Raises:
            PermissionDeniedError: principal is not an admin
            ValidationError: role is not one of the known roles
            NotFoundError: no user with this email
        """
        require_admin(principal)
        try:
            new_role = UserRole(role)
        except ValueError as e:
            raise ValidationError("Invalid role specified", fields={"role": "must be 'user' or 'admin'"}) from e

        async with self._transaction("update"):
            result = await self.session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
            if user is None:
                raise NotFoundError("User not found")

            old_role = user.role
            user.role = new_role
            await self.session.flush()
            user_id = user.id
            AuditService.log(
                self.session,
                entity_type=self.entity_type,
                entity_id=user_id,
                action="role_change",
                actor_id=principal.id,
                changes={"old_role": UserRole(old_role).value, "new_role": new_role.value},
            )

        logger.info("Changed role of %s to %s (by user %d)", email, new_role.value, principal.id)
        return await self.get(user_id)

    async def _entries(self, created_by: str | None = None) -> list[ActivityEntry]:
        purchase_stmt = select(Purchase)
        payment_stmt = select(WorkPayment)
        if created_by is not None:
            purchase_stmt = purchase_stmt.where(Purchase.created_by == created_by)
            payment_stmt = payment_stmt.where(WorkPayment.created_by == created_by)

        with store_errors():
            users = (await self.session.execute(select(User))).scalars().all()
            purchases = (await self.session.execute(purchase_stmt)).scalars().all()
            payments = (await self.session.execute(payment_stmt)).scalars().all()

        # Purchases record the full name, work payments the email
        by_identity: dict[str, User] = {}
        for user in users:
            by_identity[user.full_name] = user
            by_identity[user.email] = user

        entries = []
        for purchase in purchases:
            user = by_identity.get(purchase.created_by)
            entries.append(
                ActivityEntry(
                    type="purchase",
                    id=purchase.id,
                    created_by=purchase.created_by,
                    user_email=user.email if user else None,
                    user_name=user.full_name if user else None,
                    action="Created Purchase",
                    duplex_number=purchase.duplex_number,
                    amount=float(purchase.price),
                    notes=purchase.notes,
                    created_at=purchase.created_at,
                )
            )
        for payment in payments:
            user = by_identity.get(payment.created_by) if payment.created_by else None
            entries.append(
                ActivityEntry(
                    type="work_payment",
                    id=payment.id,
                    created_by=payment.created_by,
                    user_email=user.email if user else None,
                    user_name=user.full_name if user else None,
                    action="Created Work Payment",
                    duplex_number=payment.duplex_number,
                    amount=float(payment.amount),
                    notes=payment.notes,
                    created_at=payment.created_at,
                )
            )

        entries.sort(key=lambda e: (e.created_at, e.type, e.id), reverse=True)
        return entries

    async def get_activity_feed(self, principal: Principal, limit: int | None = None) -> list[ActivityEntry]:
        """Purchases and work payments of all users, newest first."""
        require_admin(principal)
        entries = await self._entries()
        return entries[:limit] if limit else entries

    async def get_user_history(self, identity: str, principal: Principal) -> list[ActivityEntry]:
        """Entries whose ``created_by`` equals ``identity`` (email or full name), newest first."""
        require_admin(principal)
        return await self._entries(created_by=identity)


__all__ = ["ActivityEntry", "AdminService"]
