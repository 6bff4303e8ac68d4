"""
Seed sample data

Usage:
    python scripts/seed.py            # seed an empty database
    python scripts/seed.py --force    # seed even if cards exist
    python scripts/seed.py --reset    # clear cards/counts, then seed
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import asyncio

from trender.core import ConfigError, Database
from trender.core.logging_config import setup_logging
from trender.services.migration_service import SeedService


async def main(force: bool, reset: bool) -> int:
    try:
        database = Database().init()
    except ConfigError as e:
        print(f"❌ {e}")
        return 1

    service = SeedService(database)
    try:
        if reset:
            print("🗑️  Resetting database data...")
            await service.reset()
            force = True

        applied = await service.seed(force=force)
        if not applied:
            print("💡 Nothing seeded. Use --force to seed anyway, or --reset to clear data first")
            return 0

        print(f"\n🎉 Successfully applied {len(applied)} seed files!")
        print("📊 Data Summary:")
        for table, count in (await service.summary()).items():
            print(f"   {table}: {count} rows")
        return 0
    except Exception as e:
        print(f"\n❌ Seeding failed: {e}")
        return 1
    finally:
        await database.shutdown()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed sample data")
    parser.add_argument("--force", action="store_true", help="Seed even if the database has data")
    parser.add_argument("--reset", action="store_true", help="Clear cards and counts before seeding")
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(main(args.force, args.reset)))
