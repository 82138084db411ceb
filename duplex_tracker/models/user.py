"""User ORM model with role-based access control."""

from enum import Enum

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from duplex_tracker.models import Base, BaseModel, UpdatedAtMixin


class UserRole(str, Enum):
    """Roles a user can hold."""

    USER = "user"
    """Can record and edit purchases and work payments"""

    ADMIN = "admin"
    """Can additionally manage users, purchase types and view activity"""


class User(Base, BaseModel, UpdatedAtMixin):
    """
    A person allowed to record costs.

    Users are identified by email. The full name is what purchases record
    as their creator; work payments record the email instead.
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Login identity, unique",
    )
    full_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Display name stamped on purchases",
    )
    role: Mapped[UserRole] = mapped_column(
        default=UserRole.USER,
        nullable=False,
        comment="user or admin",
    )

    __table_args__ = (Index("idx_user_email", "email", unique=True),)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


__all__ = ["User", "UserRole"]
