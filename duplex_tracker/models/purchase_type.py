"""Admin-defined purchase categories."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from duplex_tracker.models import Base, BaseModel


class PurchaseType(Base, BaseModel):
    """Custom purchase category with an English and an Arabic label.

    Purchases reference a custom type by storing ``custom-<id>`` in
    ``Purchase.type``.
    """

    __tablename__ = "purchase_types"

    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name_ar: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    @property
    def type_key(self) -> str:
        return f"custom-{self.id}"

    def __repr__(self) -> str:
        return f"<PurchaseType(id={self.id}, name={self.name})>"


__all__ = ["PurchaseType"]
