"""Profile model mirroring the Supabase profiles table."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from neocrm.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from neocrm.models.cliente_member import ClienteMember


class Profile(Base, TimestampMixin):
    """
    CRM user profile.

    The id is the Supabase auth user id (the 'sub' claim of the access
    token). The role is stored as plain text rather than an enum column
    so that rows holding an unknown role can still be loaded; such rows
    get no privilege from RoleAuthority.
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    role: Mapped[str | None] = mapped_column(String(32), nullable=True)
    cliente_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Relationships
    memberships: Mapped[list["ClienteMember"]] = relationship(
        "ClienteMember",
        back_populates="profile",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email='{self.email}', role={self.role})>"
