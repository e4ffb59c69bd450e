from __future__ import annotations

from sqlalchemy import Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from flight_mode.database.base import Base


class FocusSessionRow(Base):
    """One focus session ("flight"). Timestamps are kept as ISO-8601 strings."""

    __tablename__ = "focus_sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('in-progress', 'completed', 'abandoned')",
            name="ck_focus_sessions_status",
        ),
        Index("idx_user_id", "user_id"),
        Index("idx_start_time", "start_time"),
        Index("idx_status", "status"),
        Index("idx_synced", "synced_to_remote"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    objective: Mapped[str | None] = mapped_column(Text, nullable=True)
    from_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    to_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    seat: Mapped[str | None] = mapped_column(String(16), nullable=True)
    start_time: Mapped[str] = mapped_column(String(64), nullable=False)
    end_time: Mapped[str | None] = mapped_column(String(64), nullable=True)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="completed")
    created_at: Mapped[str] = mapped_column(String(64), nullable=False)
    synced_to_remote: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
