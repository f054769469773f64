import asyncio

from pocketbooks.db.session import engine
from pocketbooks.db.base import Base

# every model module must be imported before create_all
import pocketbooks.models  # noqa: F401


async def ensure_tables_exist(bind=None) -> None:
    """Create any missing tables (called at startup)."""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())
