"""Audit trail of ledger writes."""

from typing import Any

from sqlalchemy import JSON, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from duplex_tracker.models import Base, BaseModel


class AuditLog(Base, BaseModel):
    """One write to a purchase, work payment, project, purchase type or user role.

    Rows are added in the same transaction as the write, so a rolled-back
    write leaves no audit entry.
    """

    __tablename__ = "audit_logs"
    __table_args__ = (Index("idx_audit_entity", "entity_type", "entity_id"),)

    entity_type: Mapped[str] = mapped_column(String(50))
    """"purchase", "work_payment", "work_project", "purchase_type" or "user"."""

    entity_id: Mapped[int]

    action: Mapped[str] = mapped_column(String(50))
    """"create", "update", "delete" or "role_change"."""

    actor_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    """Principal who wrote the record; None for system writes."""

    changes: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    """Changed fields and attachment paths, e.g.
    {"fields": ["price"], "attachments_added": ["c.jpg"], "attachments_removed": ["a.jpg"]},
    or {"old_role": "user", "new_role": "admin"} for role changes."""

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, {self.action} {self.entity_type}#{self.entity_id}, "
            f"actor_id={self.actor_id})>"
        )


__all__ = ["AuditLog"]
