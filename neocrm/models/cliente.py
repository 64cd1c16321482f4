"""Cliente (tenant) model."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from neocrm.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from neocrm.models.cliente_member import ClienteMember


class Cliente(Base, TimestampMixin):
    """
    Tenant boundary of the CRM.

    Leads, messages, agents and settings all belong to a cliente. Users
    reach a cliente through a ClienteMember row; SUPER_ADMIN users reach
    every cliente without one.
    """

    __tablename__ = "clientes"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    nome: Mapped[str] = mapped_column(String(255), nullable=False)

    # Relationships
    members: Mapped[list["ClienteMember"]] = relationship(
        "ClienteMember",
        back_populates="cliente",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Cliente(id={self.id}, nome='{self.nome}')>"
