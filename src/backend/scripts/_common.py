"""
Common utilities for backend scripts.

Provides a runner that opens the database, runs one coroutine and disposes
of the engine again.

Usage:
    from scripts._common import run_with_db
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from db.session import close_db, get_session_factory, init_db

T = TypeVar("T")


def run_with_db(func: Callable[[AsyncSession], Awaitable[T]]) -> T:
    """Run `func(session)` against the configured database and return its result."""

    async def _main() -> T:
        await init_db()
        try:
            async with get_session_factory()() as session:
                return await func(session)
        finally:
            await close_db()

    return asyncio.run(_main())
