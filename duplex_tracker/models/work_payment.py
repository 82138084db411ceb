"""Work payment ORM models: labor payments and their file attachments."""

import datetime
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from duplex_tracker.models import Base, BaseModel, UpdatedAtMixin


class WorkPayment(Base, BaseModel, UpdatedAtMixin):
    """A dated payment made against a work project."""

    __tablename__ = "work_payments"

    project_id: Mapped[int] = mapped_column(
        ForeignKey("work_projects.id"),
        nullable=False,
        index=True,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    duplex_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_by: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="Email of the recording user, or the value supplied by the client",
    )

    project: Mapped["WorkProject"] = relationship(  # noqa: F821
        "WorkProject",
        back_populates="payments",
    )
    attachments: Mapped[list["WorkPaymentAttachment"]] = relationship(
        "WorkPaymentAttachment",
        back_populates="payment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("idx_work_payment_identity", "project_id", "amount", "date"),)

    @property
    def attachment_paths(self) -> list[str]:
        return sorted(a.attachment_path for a in self.attachments)

    @property
    def project_name(self) -> str | None:
        return self.project.name if self.project is not None else None

    def __repr__(self) -> str:
        return (
            f"<WorkPayment(id={self.id}, project_id={self.project_id}, "
            f"amount={self.amount}, date={self.date})>"
        )


class WorkPaymentAttachment(Base, BaseModel):
    """One uploaded file reference bound to a work payment."""

    __tablename__ = "work_payment_attachments"

    payment_id: Mapped[int] = mapped_column(
        ForeignKey("work_payments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attachment_path: Mapped[str] = mapped_column(String(255), nullable=False)

    payment: Mapped["WorkPayment"] = relationship("WorkPayment", back_populates="attachments")

    def __repr__(self) -> str:
        return (
            f"<WorkPaymentAttachment(id={self.id}, payment_id={self.payment_id}, "
            f"path={self.attachment_path})>"
        )


__all__ = ["WorkPayment", "WorkPaymentAttachment"]
