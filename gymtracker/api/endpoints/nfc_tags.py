"""NFC tag endpoints: resolve a scan, register or rebind a tag."""

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gymtracker.db.session import get_db, get_session_factory
from gymtracker.schemas.nfc_tag import NfcTagResolved, NfcTagUpsert, NfcTagUpserted
from gymtracker.services.catalog import resolve_tag, touch_last_scanned, upsert_tag

router = APIRouter()


@router.get("/{tag_id}", response_model=NfcTagResolved)
async def get_nfc_tag(
    tag_id: str,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Resolve a scanned tag to its equipment and exercise. Stamps last_scanned after responding."""
    resolved = await resolve_tag(db, tag_id)
    background_tasks.add_task(touch_last_scanned, session_factory, tag_id)
    return resolved


@router.post("", response_model=NfcTagUpserted)
async def register_nfc_tag(
    payload: NfcTagUpsert,
    db: AsyncSession = Depends(get_db),
):
    """Register a tag, or rebind an existing one to new equipment/exercise."""
    tag, created = await upsert_tag(db, payload.tag_id, payload.equipment_id, payload.exercise_id)
    return NfcTagUpserted(
        message="Tag registered" if created else "Tag updated",
        tag_id=tag.tag_id,
        created=created,
    )
