"""PersonalRecord model - append-only log of record-breaking values."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymtracker.core.enums import PRType
from gymtracker.db.base import Base


class PersonalRecord(Base):
    """A row is appended only when its value beats every earlier row of the same
    (user, exercise, type), so the latest row is the running maximum."""

    __tablename__ = "personal_records"
    __table_args__ = (
        Index("ix_personal_records_user_exercise_type", "user_id", "exercise_id", "type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), nullable=False)
    value: Mapped[float] = mapped_column(Float, nullable=False)
    date_achieved: Mapped[date] = mapped_column(Date, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=PRType.WEIGHT.value)

    user: Mapped["User"] = relationship("User", back_populates="personal_records")
    exercise: Mapped["Exercise"] = relationship("Exercise")
