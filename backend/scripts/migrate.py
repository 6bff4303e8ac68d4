"""
Apply database migrations

Usage:
    python scripts/migrate.py          # apply pending migrations
    python scripts/migrate.py up       # same
    python scripts/migrate.py status   # show applied/pending migrations
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import argparse
import asyncio

from trender.core import ConfigError, Database
from trender.core.logging_config import setup_logging
from trender.services.migration_service import MigrationService


async def run_up(service: MigrationService) -> None:
    pending = await service.pending()
    print(f"📋 Pending migrations: {len(pending)}")
    for migration in pending:
        print(f"   - {migration.filename}")

    applied = await service.migrate()
    if applied:
        print(f"\n🎉 Successfully applied {len(applied)} migrations!")
    else:
        print("✅ All migrations are up to date!")


async def run_status(service: MigrationService) -> None:
    status = await service.status()
    applied_count = sum(1 for _, applied in status if applied)

    print("📊 Migration Status\n")
    print(f"Total migration files: {len(status)}")
    print(f"Applied migrations: {applied_count}")
    print(f"Pending migrations: {len(status) - applied_count}\n")
    for migration, applied in status:
        print(f"  {migration.filename} - {'✅ Applied' if applied else '⏳ Pending'}")


async def main(command: str) -> int:
    try:
        database = Database().init()
    except ConfigError as e:
        print(f"❌ {e}")
        return 1

    service = MigrationService(database)
    try:
        if command == "status":
            await run_status(service)
        else:
            await run_up(service)
        return 0
    except Exception as e:
        print(f"\n❌ Migration failed: {e}")
        return 1
    finally:
        await database.shutdown()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Database migrations")
    parser.add_argument("command", nargs="?", default="up", choices=["up", "status"])
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(main(args.command)))
