"""
Initialize the database: create all tables and load the demo data.
Run with: python -m scripts.init_db [--no-seed]
"""

import argparse
import asyncio
from ruralcare.database import engine, Base, async_session
from ruralcare.services.seed_service import seed_demo_data
import ruralcare.models  # noqa: F401


async def init(seed: bool):
    print("Creating database tables...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("All tables created successfully.")
    if seed:
        async with async_session() as session:
            inserted = await seed_demo_data(session)
        print(f"Demo data loaded: {inserted}")
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create tables and load demo data")
    parser.add_argument("--no-seed", action="store_true", help="only create tables")
    args = parser.parse_args()
    asyncio.run(init(seed=not args.no_seed))
