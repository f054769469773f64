"""Dependency injection."""
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from pocketbooks.db.session import SessionLocal


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One database session per request. Handlers commit explicitly; anything
    left uncommitted is rolled back when the session closes.
    """
    async with SessionLocal() as session:
        yield session
