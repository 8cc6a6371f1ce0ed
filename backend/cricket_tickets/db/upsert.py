"""
Dialect-aware INSERT ... ON CONFLICT DO NOTHING.

PostgreSQL and SQLite both support the clause but expose it through their
own insert() constructs.
"""

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession


def _insert_for(db: AsyncSession, table):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert(table)
    if dialect == "sqlite":
        return sqlite.insert(table)
    raise NotImplementedError(f"ON CONFLICT is not supported for dialect {dialect!r}")


async def insert_if_absent(db: AsyncSession, model, values: dict, conflict_columns: list[str]) -> bool:
    """Insert one row unless the conflict key exists. Returns True if a row was inserted."""
    stmt = (
        _insert_for(db, model.__table__)
        .values(**values)
        .on_conflict_do_nothing(index_elements=conflict_columns)
    )
    result = await db.execute(stmt)
    return result.rowcount == 1
