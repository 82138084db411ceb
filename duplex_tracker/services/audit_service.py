"""Audit service for logging ledger writes."""

from collections.abc import Iterable
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.models.audit_log import AuditLog


def ledger_changes(
    fields: Iterable[str] = (),
    added: Iterable[str] = (),
    removed: Iterable[str] = (),
) -> dict[str, Any] | None:
    """Build the ``changes`` snapshot of a purchase or work payment write.

    Args:
        fields: Names of scalar fields whose value changed
        added: Attachment paths inserted
        removed: Attachment paths deleted

    Returns:
        Dict with the non-empty keys among ``fields``, ``attachments_added``
        and ``attachments_removed`` (sorted lists), or None if nothing changed
    """
    changes = {
        "fields": sorted(fields),
        "attachments_added": sorted(added),
        "attachments_removed": sorted(removed),
    }
    return {key: value for key, value in changes.items() if value} or None


class AuditService:
    """Service for audit log operations.

    Entries are only added to the session; they are committed (or rolled
    back) together with the write they describe.
    """

    @staticmethod
    def log(
        session: AsyncSession,
        entity_type: str,
        entity_id: int,
        action: str,
        actor_id: int | None = None,
        changes: dict[str, Any] | None = None,
    ) -> AuditLog:
        """Add an audit entry for ``action`` on ``entity_type`` #``entity_id``.

        Args:
            session: Session of the enclosing write transaction
            entity_type: "purchase", "work_payment", "work_project", "purchase_type" or "user"
            entity_id: Primary key of the entity
            action: "create", "update", "delete" or "role_change"
            actor_id: Principal who performed the action (None for system writes)
            changes: JSON snapshot, see ``ledger_changes``

        Returns:
            The pending AuditLog row
        """
        audit = AuditLog(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            actor_id=actor_id,
            changes=changes,
        )
        session.add(audit)
        return audit


__all__ = ["AuditService", "ledger_changes"]
