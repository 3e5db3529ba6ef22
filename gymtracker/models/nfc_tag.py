"""NfcTag model - binds a physical tag to an (equipment, exercise) pair."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymtracker.core.clock import utc_today
from gymtracker.db.base import Base


class NfcTag(Base):
    """The tag id is the natural key, so re-registering a tag rebinds it."""

    __tablename__ = "nfc_tags"

    tag_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    equipment_id: Mapped[str] = mapped_column(ForeignKey("equipment.id"), nullable=False)
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), nullable=False)
    date_registered: Mapped[date] = mapped_column(Date, default=utc_today, nullable=False)
    last_scanned: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    equipment: Mapped["Equipment"] = relationship("Equipment", back_populates="nfc_tags")
    exercise: Mapped["Exercise"] = relationship("Exercise")
