"""Conditional insert (insert-if-absent) across supported dialects."""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase


async def insert_if_absent(
    session: AsyncSession,
    model: type[DeclarativeBase],
    **values: Any,
) -> bool:
    """Insert a row unless its primary key already exists.

    Returns True if this call inserted the row. A concurrent writer that
    gets there first makes this return False instead of raising.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        insert = postgresql.insert
    elif dialect == "sqlite":
        insert = sqlite.insert
    else:
        raise RuntimeError(f"Conditional insert not supported on dialect: {dialect}")

    pk = list(model.__table__.primary_key.columns)  # type: ignore[attr-defined]
    stmt = insert(model).values(**values).on_conflict_do_nothing().returning(pk[0])
    result = await session.execute(stmt)
    return result.first() is not None
