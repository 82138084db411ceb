"""SQLAlchemy base model with common fields and model exports."""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

# Base class for all models
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for all timestamp defaults."""
    return datetime.now(timezone.utc)


class BaseModel:
    """Base model with autoincrement id and creation timestamp."""

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
    )


class UpdatedAtMixin:
    """Adds an updated_at column refreshed on every UPDATE."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


# Import models to register them with Base (after Base is defined)
# This must be after Base declaration to avoid circular imports
from duplex_tracker.models.user import User, UserRole  # noqa: E402
from duplex_tracker.models.audit_log import AuditLog  # noqa: E402
from duplex_tracker.models.purchase import Purchase, PurchaseAttachment  # noqa: E402
from duplex_tracker.models.purchase_type import PurchaseType  # noqa: E402
from duplex_tracker.models.work_project import WorkProject  # noqa: E402
from duplex_tracker.models.work_payment import WorkPayment, WorkPaymentAttachment  # noqa: E402

__all__ = [
    "Base",
    "BaseModel",
    "UpdatedAtMixin",
    "utcnow",
    "User",
    "UserRole",
    "AuditLog",
    "Purchase",
    "PurchaseAttachment",
    "PurchaseType",
    "WorkProject",
    "WorkPayment",
    "WorkPaymentAttachment",
]
