"""Initialize the database schema for the profile API.

Creates all tables from the models. Pass ``--drop`` to drop existing tables
first for a clean start. The API also creates missing tables on startup
unless DB_CREATE_TABLES is disabled.
"""

import argparse
import asyncio
import sys

from me_api.config import settings
from me_api.db import build_engine, create_tables
from me_api.models import Base


async def init_database(drop: bool = False):
    """Create all database tables."""
    print(f"Initializing database: {settings.db.url.split('@')[-1]}")
    engine = build_engine(settings.db)
    try:
        if drop:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
            print("✓ Dropped existing tables")

        await create_tables(engine)
        print("✓ Created all tables")
    finally:
        await engine.dispose()

    print("\n✅ Database initialization complete!")
    print(f"Tables: {', '.join(Base.metadata.tables.keys())}")


async def main(argv: list[str] | None = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="drop existing tables before creating them")
    args = parser.parse_args(argv)

    try:
        await init_database(drop=args.drop)
    except Exception as e:
        print(f"\n❌ Error initializing database: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
