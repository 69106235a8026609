"""User action log used for search telemetry."""

from enum import Enum

from sqlalchemy import BigInteger, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, CreatedAtMixin, PortableINET


class ActionType(str, Enum):
    """Kinds of user actions recorded in the action log."""

    SEARCH = "SEARCH"
    CLICK_LINK = "CLICK_LINK"


class ActionLog(CreatedAtMixin, Base):
    """Immutable action log entry.

    Entries are append-only. For ``SEARCH`` events the payload holds the
    trimmed query text; aggregated payload counts feed query suggestions
    and the trending-searches list.
    """

    __tablename__ = "action_logs"

    # SQLite only auto-increments INTEGER PRIMARY KEY columns
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    user_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    action_type: Mapped[str] = mapped_column(String(32), nullable=False)
    target_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    payload: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_addr: Mapped[str | None] = mapped_column(PortableINET(), nullable=True)

    __table_args__ = (
        Index("idx_action_logs_type_payload", "action_type", "payload"),
        Index("idx_action_logs_user", "user_id"),
        Index("idx_action_logs_created", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<ActionLog(id={self.id}, type={self.action_type}, payload={self.payload!r})>"
