"""Membership linking profiles to clientes with a role."""

from sqlalchemy import Integer, String, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from neocrm.models.base import Base, TimestampMixin
from neocrm.models.role import UserRole

if TYPE_CHECKING:
    from neocrm.models.profile import Profile
    from neocrm.models.cliente import Cliente


class ClienteMember(Base, TimestampMixin):
    """
    Join table linking profiles to clientes.

    Constraints:
    - Unique(cliente_id, user_id) - one membership per user per cliente
    """

    __tablename__ = "cliente_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    cliente_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("clientes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=UserRole.VIEWER.value)

    # Relationships
    cliente: Mapped["Cliente"] = relationship("Cliente", back_populates="members")
    profile: Mapped["Profile"] = relationship("Profile", back_populates="memberships")

    # Constraints
    __table_args__ = (
        UniqueConstraint("cliente_id", "user_id", name="uq_cliente_user"),
    )

    def __repr__(self) -> str:
        return f"<ClienteMember(cliente_id={self.cliente_id}, user_id={self.user_id}, role={self.role})>"
