"""
Idempotent writes for the card and count tables

Both stores insert with ON CONFLICT DO NOTHING on a documented uniqueness
key: a repeated write is a silent no-op, never an overwrite.
"""
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import Table
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from trender.models import COUNT_UNIQUE_KEY, Card, Count

_INSERT_BUILDERS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def build_insert_ignore(
    table: Table,
    values: Dict[str, Any],
    conflict_key: Sequence[str],
    dialect_name: str = "postgresql",
):
    """
    INSERT ... ON CONFLICT (<conflict_key>) DO NOTHING RETURNING id

    Raises:
        ValueError: dialect without ON CONFLICT support
    """
    builder = _INSERT_BUILDERS.get(dialect_name)
    if builder is None:
        raise ValueError(f"Idempotent insert is not supported on '{dialect_name}'")
    return (
        builder(table)
        .values(**values)
        .on_conflict_do_nothing(index_elements=list(conflict_key))
        .returning(table.c.id)
    )


def _dialect_name(session: AsyncSession) -> str:
    return session.get_bind().dialect.name


class CardStore:
    """Card writes, unique on slug (first write wins)"""

    table = Card.__table__
    conflict_key = ("slug",)

    async def insert_if_absent(self, session: AsyncSession, values: Dict[str, Any]) -> Optional[int]:
        """
        Insert a card unless its slug already exists

        Returns:
            id of the new row, or None when the slug was taken
        """
        stmt = build_insert_ignore(self.table, values, self.conflict_key, _dialect_name(session))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


class CountStore:
    """Count writes, unique on (card_id, source, metric_name, bucket_start, bucket_end)"""

    table = Count.__table__
    conflict_key = COUNT_UNIQUE_KEY

    async def insert_if_absent(self, session: AsyncSession, values: Dict[str, Any]) -> bool:
        """
        Insert one observation unless the bucket already holds one

        Returns:
            True when a row was written
        """
        stmt = build_insert_ignore(self.table, values, self.conflict_key, _dialect_name(session))
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
