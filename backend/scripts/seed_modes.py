"""Replace the stored persona modes with the built-in catalog.

Safe to run repeatedly: every run leaves exactly the catalog's modes.

Usage:
    python -m scripts.seed_modes
    python -m scripts.seed_modes --create-tables   # local SQLite runs without migrations
"""
import argparse
import asyncio

from adaptive_chat.db.base import Base
from adaptive_chat.db.session import AsyncSessionLocal, engine
from adaptive_chat.services.personas import MODE_CATALOG, replace_all_modes


async def seed(create_tables: bool) -> int:
    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        count = await replace_all_modes(db)
    await engine.dispose()
    return count


def main():
    parser = argparse.ArgumentParser(description="Seed persona modes")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    args = parser.parse_args()

    count = asyncio.run(seed(args.create_tables))
    print(f"Seeded {count} modes: {', '.join(m.name.value for m in MODE_CATALOG)}")


if __name__ == "__main__":
    main()
