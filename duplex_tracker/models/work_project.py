"""Work project ORM model: a labor budget envelope for one duplex."""

from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from duplex_tracker.models import Base, BaseModel


class WorkProject(Base, BaseModel):
    """Contracted labor job on one duplex.

    The sum of its payments compared against total_price gives the
    remaining figure, which goes negative on overpayment.
    """

    __tablename__ = "work_projects"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment='Stored as "<name> - duplex(<n>)"',
    )
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    duration: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="Planned duration in days"
    )
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    duplex_number: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)

    payments: Mapped[list["WorkPayment"]] = relationship(  # noqa: F821
        "WorkPayment",
        back_populates="project",
    )

    def __repr__(self) -> str:
        return (
            f"<WorkProject(id={self.id}, name={self.name}, "
            f"total_price={self.total_price}, duplex_number={self.duplex_number})>"
        )


__all__ = ["WorkProject"]
