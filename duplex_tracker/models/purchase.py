"""Purchase ORM models: material purchases and their file attachments."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from duplex_tracker.models import Base, BaseModel


class Purchase(Base, BaseModel):
    """A dated material purchase attributed to one duplex unit.

    Attachments are owned exclusively by the purchase and removed by the
    database when the purchase row is deleted.
    """

    __tablename__ = "purchases"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    duplex_number: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Duplex unit number, 1..N",
    )
    type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Free-text category, built-in or custom-<purchase_type_id>",
    )
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name of the user who recorded the purchase",
    )

    attachments: Mapped[list["PurchaseAttachment"]] = relationship(
        "PurchaseAttachment",
        back_populates="purchase",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index(
            "idx_purchase_identity",
            "name",
            "duplex_number",
            "type",
            "purchase_date",
        ),
    )

    @property
    def attachment_paths(self) -> list[str]:
        return sorted(a.attachment_path for a in self.attachments)

    def __repr__(self) -> str:
        return (
            f"<Purchase(id={self.id}, name={self.name}, duplex_number={self.duplex_number}, "
            f"price={self.price}, date={self.purchase_date})>"
        )


class PurchaseAttachment(Base, BaseModel):
    """One uploaded file reference bound to a purchase."""

    __tablename__ = "purchases_attachments"

    purchase_id: Mapped[int] = mapped_column(
        ForeignKey("purchases.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attachment_path: Mapped[str] = mapped_column(String(255), nullable=False)

    purchase: Mapped["Purchase"] = relationship("Purchase", back_populates="attachments")

    def __repr__(self) -> str:
        return (
            f"<PurchaseAttachment(id={self.id}, purchase_id={self.purchase_id}, "
            f"path={self.attachment_path})>"
        )


__all__ = ["Purchase", "PurchaseAttachment"]
