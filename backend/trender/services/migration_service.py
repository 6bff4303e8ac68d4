"""
Migration and seed service

Applies the SQL files under db/migrations (tracked in schema_migrations)
and db/seeds. Each file runs in its own transaction; a failing file is
rolled back and stops the run.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.exc import ProgrammingError

from trender.core.database import Database

logger = logging.getLogger(__name__)

DB_DIR = Path(__file__).resolve().parents[2] / "db"
MIGRATIONS_DIR = DB_DIR / "migrations"
SEEDS_DIR = DB_DIR / "seeds"

# Child tables first
SEEDED_TABLES = ("counts", "cards")

CREATE_TRACKING_TABLE = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version VARCHAR(255) PRIMARY KEY,
    applied_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
)
"""

# SQLSTATE undefined_table
UNDEFINED_TABLE = "42P01"


@dataclass(frozen=True)
class SqlFile:
    filename: str
    path: Path

    @property
    def version(self) -> str:
        return self.path.stem

    def statements(self) -> List[str]:
        return split_sql_statements(self.path.read_text(encoding="utf-8"))


def discover_sql_files(directory: Path) -> List[SqlFile]:
    """
    *.sql files in a directory, sorted by name

    Raises:
        FileNotFoundError: the directory does not exist
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"SQL directory not found: {directory}")
    return [SqlFile(filename=path.name, path=path) for path in sorted(directory.glob("*.sql"))]


def split_sql_statements(sql: str) -> List[str]:
    """
    Split a script into statements

    Drops "--" comments and splits on semicolons outside single-quoted
    literals. Dollar-quoted bodies are not supported.
    """
    statements = []
    current = []
    in_quote = False
    i = 0
    while i < len(sql):
        ch = sql[i]
        if in_quote:
            current.append(ch)
            if ch == "'":
                in_quote = False
        elif ch == "'":
            in_quote = True
            current.append(ch)
        elif ch == "-" and sql.startswith("--", i):
            newline = sql.find("\n", i)
            i = len(sql) if newline == -1 else newline
            continue
        elif ch == ";":
            statements.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1
    statements.append("".join(current))
    return [stmt.strip() for stmt in statements if stmt.strip()]


def _sqlstate(exc: ProgrammingError) -> Optional[str]:
    # asyncpg errors surface the code as sqlstate, psycopg as pgcode
    return getattr(exc.orig, "sqlstate", None) or getattr(exc.orig, "pgcode", None)


async def _apply_sql_file(database: Database, sql_file: SqlFile, record_version: bool) -> None:
    async with database.transaction() as session:
        for statement in sql_file.statements():
            await session.execute(text(statement))
        if record_version:
            await session.execute(
                text("INSERT INTO schema_migrations (version) VALUES (:version) ON CONFLICT (version) DO NOTHING"),
                {"version": sql_file.version},
            )


class MigrationService:
    """Versioned schema migrations"""

    def __init__(self, database: Database, migrations_dir: Optional[Path] = None):
        self.database = database
        self.migrations_dir = migrations_dir or MIGRATIONS_DIR

    async def applied_versions(self) -> List[str]:
        """Recorded versions; read only, a missing tracking table means none"""
        try:
            rows = await self.database.fetch_all("SELECT version FROM schema_migrations ORDER BY version")
        except ProgrammingError as e:
            if _sqlstate(e) != UNDEFINED_TABLE:
                raise
            return []
        return [row["version"] for row in rows]

    async def status(self) -> List[Tuple[SqlFile, bool]]:
        """(migration, applied) for every migration file"""
        applied = set(await self.applied_versions())
        return [(migration, migration.version in applied) for migration in discover_sql_files(self.migrations_dir)]

    async def pending(self) -> List[SqlFile]:
        return [migration for migration, applied in await self.status() if not applied]

    async def migrate(self) -> List[SqlFile]:
        """
        Apply pending migrations in order

        Returns:
            migrations applied by this call

        Raises:
            Exception: the first failing migration, after its rollback
        """
        await self.database.execute(CREATE_TRACKING_TABLE)
        pending = await self.pending()
        if not pending:
            logger.info("✅ All migrations are up to date")
            return []

        applied = []
        for migration in pending:
            logger.info(f"🔄 Applying migration: {migration.filename}")
            try:
                await _apply_sql_file(self.database, migration, record_version=True)
            except Exception as e:
                last = applied[-1].filename if applied else "None"
                logger.error(f"❌ Failed to apply migration {migration.filename}: {e} (last successful: {last})")
                raise
            applied.append(migration)
            logger.info(f"✅ Applied migration: {migration.filename}")

        logger.info(f"🎉 Applied {len(applied)} migrations")
        return applied


class SeedService:
    """Sample data for local development"""

    def __init__(self, database: Database, seeds_dir: Optional[Path] = None):
        self.database = database
        self.seeds_dir = seeds_dir or SEEDS_DIR

    async def has_data(self) -> bool:
        rows = await self.database.fetch_all("SELECT COUNT(*) AS count FROM cards")
        return int(rows[0]["count"]) > 0

    async def seed(self, force: bool = False) -> List[SqlFile]:
        """
        Apply every seed file

        Args:
            force: seed even when cards already exist

        Returns:
            seed files applied ([] when skipped)
        """
        if not force and await self.has_data():
            logger.warning("⚠️ Database already contains data, use force to seed anyway")
            return []

        applied = []
        for seed in discover_sql_files(self.seeds_dir):
            logger.info(f"🌱 Applying seed: {seed.filename}")
            try:
                await _apply_sql_file(self.database, seed, record_version=False)
            except Exception as e:
                logger.error(f"❌ Failed to apply seed {seed.filename}: {e}")
                raise
            applied.append(seed)
        return applied

    async def reset(self) -> None:
        """Delete all rows from the seeded tables in one transaction"""
        async with self.database.transaction() as session:
            for table in SEEDED_TABLES:
                logger.info(f"🗑️ Clearing {table} table")
                await session.execute(text(f"DELETE FROM {table}"))

    async def summary(self) -> Dict[str, int]:
        """Row count per seeded table"""
        counts = {}
        for table in reversed(SEEDED_TABLES):
            rows = await self.database.fetch_all(f"SELECT COUNT(*) AS count FROM {table}")
            counts[table] = int(rows[0]["count"])
        return counts
