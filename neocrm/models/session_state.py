"""Per-user key/value session state that survives reloads."""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from neocrm.models.base import Base, TimestampMixin


class SessionState(Base, TimestampMixin):
    """
    Durable session value for one user, e.g. the last selected cliente.

    Constraints:
    - Unique(user_id, key)
    """

    __tablename__ = "session_state"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    key: Mapped[str] = mapped_column(String(128), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "key", name="uq_session_state_user_key"),
    )

    def __repr__(self) -> str:
        return f"<SessionState(user_id={self.user_id}, key='{self.key}')>"
