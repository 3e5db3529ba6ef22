"""Catalog lookups: NFC tag resolution and binding."""

from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gymtracker.core.clock import utc_now, utc_today
from gymtracker.core.errors import NotFound
from gymtracker.models.equipment import Equipment
from gymtracker.models.exercise import Category, Exercise
from gymtracker.models.nfc_tag import NfcTag
from gymtracker.schemas.nfc_tag import NfcTagResolved

logger = logging.getLogger(__name__)


async def resolve_tag(db: AsyncSession, tag_id: str) -> NfcTagResolved:
    """Tag -> equipment + exercise + category in one query; NotFound if unknown."""
    result = await db.execute(
        select(
            NfcTag.tag_id,
            NfcTag.equipment_id,
            Equipment.name.label("equipment_name"),
            Equipment.location,
            NfcTag.exercise_id,
            Exercise.name.label("exercise_name"),
            Exercise.category_id,
            Category.name.label("category_name"),
        )
        .join(Equipment, Equipment.id == NfcTag.equipment_id)
        .join(Exercise, Exercise.id == NfcTag.exercise_id)
        .join(Category, Category.id == Exercise.category_id)
        .where(NfcTag.tag_id == tag_id)
    )
    row = result.one_or_none()
    if row is None:
        raise NotFound("NFC tag not found")
    return NfcTagResolved.model_validate(row._asdict())


async def touch_last_scanned(
    session_factory: async_sessionmaker[AsyncSession],
    tag_id: str,
) -> None:
    """Stamp the tag's last scan time. Runs after the lookup response; never raises."""
    try:
        async with session_factory() as db:
            async with db.begin():
                await db.execute(
                    update(NfcTag)
                    .where(NfcTag.tag_id == tag_id)
                    .values(last_scanned=utc_now())
                )
    except Exception:
        logger.exception("Could not update last_scanned for NFC tag %s", tag_id)


async def upsert_tag(
    db: AsyncSession,
    tag_id: str,
    equipment_id: str,
    exercise_id: int,
) -> tuple[NfcTag, bool]:
    """Bind ``tag_id`` to (equipment, exercise). Returns (tag, created)."""
    if await db.get(Equipment, equipment_id) is None:
        raise NotFound("Equipment not found")
    if await db.get(Exercise, exercise_id) is None:
        raise NotFound("Exercise not found")

    tag = await db.get(NfcTag, tag_id)
    created = tag is None
    if tag:
        tag.equipment_id = equipment_id
        tag.exercise_id = exercise_id
        tag.date_registered = utc_today()
    else:
        tag = NfcTag(
            tag_id=tag_id,
            equipment_id=equipment_id,
            exercise_id=exercise_id,
            date_registered=utc_today(),
        )
        db.add(tag)

    await db.flush()
    logger.info("NFC tag %s %s -> equipment %s, exercise %s",
                tag_id, "registered" if created else "rebound", equipment_id, exercise_id)
    return tag, created
