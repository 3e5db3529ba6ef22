"""Static reference data: categories, equipment and a starter exercise list."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gymtracker.models.equipment import Equipment
from gymtracker.models.exercise import Category, Exercise

logger = logging.getLogger(__name__)

CATEGORIES = ["Chest", "Back", "Legs", "Shoulders", "Arms", "Core"]

EQUIPMENT = [
    ("BP001", "Bench Press Station", "Free weights area"),
    ("SR001", "Squat Rack", "Free weights area"),
    ("LP001", "Lat Pulldown Machine", "Machine area"),
    ("LEG001", "Leg Press Machine", "Machine area"),
    ("SP001", "Shoulder Press Machine", "Machine area"),
    ("CB001", "Cable Station", "Cable area"),
]

# (name, category, equipment, description)
EXERCISES = [
    ("Bench Press", "Chest", "Barbell", "Flat barbell press for chest, shoulders and triceps."),
    ("Incline Dumbbell Press", "Chest", "Dumbbells", "Press on an incline bench."),
    ("Lat Pulldown", "Back", "Machine", "Pull the bar to the upper chest."),
    ("Seated Cable Row", "Back", "Cable", "Row the handle to the torso."),
    ("Squat", "Legs", "Barbell", "Back squat to parallel or below."),
    ("Leg Press", "Legs", "Machine", "Push the platform away with both feet."),
    ("Shoulder Press", "Shoulders", "Machine", "Press the handles overhead."),
    ("Lateral Raise", "Shoulders", "Dumbbells", "Raise the arms to shoulder height."),
    ("Biceps Curl", "Arms", "Dumbbells", "Curl the weights toward the shoulders."),
    ("Triceps Pushdown", "Arms", "Cable", "Push the rope or bar down to full extension."),
    ("Cable Crunch", "Core", "Cable", "Kneeling crunch against cable resistance."),
]


async def seed_catalog(db: AsyncSession) -> dict[str, int]:
    """Insert whatever reference rows are missing. Safe to run repeatedly; returns counts added."""
    added = {"categories": 0, "equipment": 0, "exercises": 0}

    existing = await db.execute(select(Category))
    categories = {c.name: c for c in existing.scalars().all()}
    for name in CATEGORIES:
        if name not in categories:
            categories[name] = Category(name=name)
            db.add(categories[name])
            added["categories"] += 1
    await db.flush()

    known_equipment = set((await db.execute(select(Equipment.id))).scalars().all())
    for equipment_id, name, location in EQUIPMENT:
        if equipment_id not in known_equipment:
            db.add(Equipment(id=equipment_id, name=name, location=location))
            added["equipment"] += 1

    known_exercises = set((await db.execute(select(Exercise.name))).scalars().all())
    for name, category, equipment, description in EXERCISES:
        if name not in known_exercises:
            db.add(
                Exercise(
                    name=name,
                    category_id=categories[category].id,
                    equipment=equipment,
                    description=description,
                )
            )
            added["exercises"] += 1
    await db.flush()

    logger.info("Catalog seed added %s", added)
    return added
