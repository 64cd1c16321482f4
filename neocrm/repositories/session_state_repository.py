"""Durable tenant store backed by the session_state table."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from neocrm.config import settings
from neocrm.core.exceptions import TenantStorageError
from neocrm.models.session_state import SessionState


class SessionStateRepository:
    """Repository for SessionState model operations"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str, key: str) -> SessionState | None:
        return (
            self.db.query(SessionState)
            .filter(SessionState.user_id == user_id, SessionState.key == key)
            .first()
        )

    def put(self, user_id: str, key: str, value: str) -> SessionState:
        """Insert or overwrite one value"""
        state = self.get(user_id, key)
        if state:
            state.value = value
        else:
            state = SessionState(user_id=user_id, key=key, value=value)
            self.db.add(state)
        self.db.commit()
        return state

    def remove(self, user_id: str, key: str) -> None:
        state = self.get(user_id, key)
        if state:
            self.db.delete(state)
            self.db.commit()


class SqlTenantStore:
    """
    TenantStore keeping the last selected cliente per user.

    Database errors are rolled back and re-raised as TenantStorageError.
    """

    def __init__(self, db: Session, user_id: str, key: str | None = None):
        self.db = db
        self.user_id = user_id
        self.key = key or settings.TENANT_STORAGE_KEY
        self.repo = SessionStateRepository(db)

    def load(self) -> str | None:
        try:
            state = self.repo.get(self.user_id, self.key)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise TenantStorageError(str(e)) from e
        return state.value if state else None

    def save(self, tenant_id: str) -> None:
        try:
            self.repo.put(self.user_id, self.key, tenant_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise TenantStorageError(str(e)) from e

    def clear(self) -> None:
        try:
            self.repo.remove(self.user_id, self.key)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise TenantStorageError(str(e)) from e
