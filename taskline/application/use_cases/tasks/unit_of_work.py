"""One transaction per use case call."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from taskline.infrastructure.exceptions import StorageException


@asynccontextmanager
async def unit_of_work(db: AsyncSession, operation: str) -> AsyncIterator[None]:
    """Run the body atomically, wrapping store failures in StorageException.

    If the session is already in a transaction (the request-scoped
    get_db_transactional dependency, or a caller that has read through the
    session), the body runs in a SAVEPOINT: a failure rolls back every write
    the body made and leaves the caller's earlier work intact. Otherwise a
    transaction is begun here and committed on success.
    """
    try:
        if db.in_transaction():
            async with db.begin_nested():
                yield
        else:
            async with db.begin():
                yield
    except SQLAlchemyError as e:
        raise StorageException(operation, str(e.__class__.__name__)) from e
