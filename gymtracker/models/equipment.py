"""Equipment model - gym machines and stations, keyed by their label (e.g. BP001)."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gymtracker.db.base import Base


class Equipment(Base):
    """Static reference data, seeded at bootstrap."""

    __tablename__ = "equipment"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)

    nfc_tags: Mapped[list["NfcTag"]] = relationship("NfcTag", back_populates="equipment")
