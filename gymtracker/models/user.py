"""User account model."""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, Float, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymtracker.core.clock import utc_today
from gymtracker.db.base import Base


class User(Base):
    """Registered account. Username and email are unique at the store level."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    height: Mapped[float | None] = mapped_column(Float, nullable=True)  # cm
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)  # kg, latest known
    join_date: Mapped[date] = mapped_column(Date, default=utc_today, nullable=False)

    workouts: Mapped[list["Workout"]] = relationship("Workout", back_populates="user")
    personal_records: Mapped[list["PersonalRecord"]] = relationship(
        "PersonalRecord", back_populates="user"
    )
    progress_entries: Mapped[list["ProgressEntry"]] = relationship(
        "ProgressEntry", back_populates="user"
    )
