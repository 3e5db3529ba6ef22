"""Load categories, equipment and starter exercises into the configured database.

Run from the repository root after ``alembic upgrade head``:

    python scripts/seed_catalog.py
"""

import asyncio
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

from gymtracker.core.config import get_settings  # noqa: E402
from gymtracker.core.logging_config import configure_logging  # noqa: E402
from gymtracker.db.seed import seed_catalog  # noqa: E402
from gymtracker.db.session import async_session_maker, engine  # noqa: E402


async def main():
    configure_logging(get_settings().log_level)
    async with async_session_maker() as session:
        async with session.begin():
            added = await seed_catalog(session)
    await engine.dispose()
    print(f"Seeded: {added}")


if __name__ == "__main__":
    asyncio.run(main())
