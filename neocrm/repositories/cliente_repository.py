from sqlalchemy.orm import Session
from neocrm.models.cliente import Cliente
from neocrm.models.cliente_member import ClienteMember


class ClienteRepository:
    """Repository for Cliente model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, cliente_id: str) -> Cliente | None:
        return self.db.query(Cliente).filter(Cliente.id == cliente_id).first()

    def get_all(self) -> list[Cliente]:
        """Get every cliente, ordered by name"""
        return self.db.query(Cliente).order_by(Cliente.nome).all()

    def get_for_user(self, user_id: str) -> list[Cliente]:
        """
        Get clientes a user is a member of.

        Args:
            user_id: Profile ID

        Returns:
            Clientes in membership creation order
        """
        return (
            self.db.query(Cliente)
            .join(ClienteMember, ClienteMember.cliente_id == Cliente.id)
            .filter(ClienteMember.user_id == user_id)
            .order_by(ClienteMember.created_at, ClienteMember.id)
            .all()
        )
