"""ProgressEntry model - body composition samples."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Date, Float, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymtracker.core.clock import utc_today
from gymtracker.db.base import Base


class ProgressEntry(Base):
    """Append-only weight / body fat sample for a user on a date."""

    __tablename__ = "progress_tracking"
    __table_args__ = (Index("ix_progress_tracking_user_date", "user_id", "date"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, default=utc_today, nullable=False)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    body_fat_percentage: Mapped[float | None] = mapped_column(Float, nullable=True)

    user: Mapped["User"] = relationship("User", back_populates="progress_entries")
