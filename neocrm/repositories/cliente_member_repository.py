"""Repository for ClienteMember model operations."""

from sqlalchemy.orm import Session
from neocrm.models.cliente_member import ClienteMember


class ClienteMemberRepository:
    """Repository for ClienteMember model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, member_id: int, cliente_id: str) -> ClienteMember | None:
        """
        Get a membership row, restricted to one cliente.

        Args:
            member_id: Membership ID
            cliente_id: Cliente the row must belong to

        Returns:
            ClienteMember object or None if not found in that cliente
        """
        return (
            self.db.query(ClienteMember)
            .filter(
                ClienteMember.id == member_id,
                ClienteMember.cliente_id == cliente_id,
            )
            .first()
        )

    def get_membership(self, user_id: str, cliente_id: str) -> ClienteMember | None:
        return (
            self.db.query(ClienteMember)
            .filter(
                ClienteMember.user_id == user_id,
                ClienteMember.cliente_id == cliente_id,
            )
            .first()
        )

    def get_cliente_members(self, cliente_id: str) -> list[ClienteMember]:
        """
        Get all memberships for a cliente, newest first.

        Args:
            cliente_id: Cliente ID

        Returns:
            List of ClienteMember objects for the cliente
        """
        return (
            self.db.query(ClienteMember)
            .filter(ClienteMember.cliente_id == cliente_id)
            .order_by(ClienteMember.created_at.desc(), ClienteMember.id.desc())
            .all()
        )

    def create(self, membership: ClienteMember) -> ClienteMember:
        """
        Create a new cliente membership.

        Raises:
            IntegrityError: If (cliente_id, user_id) already exists
        """
        self.db.add(membership)
        self.db.commit()
        self.db.refresh(membership)
        return membership

    def update(self, membership: ClienteMember) -> ClienteMember:
        self.db.commit()
        self.db.refresh(membership)
        return membership

    def delete(self, membership: ClienteMember) -> None:
        """Remove a user from a cliente"""
        self.db.delete(membership)
        self.db.commit()
