"""Create the submissions table and print its current counters."""

import asyncio

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from src.config import settings
from src.models.base import Base
from src.repositories.submission import SubmissionRepository


async def init_db():
    """Create missing tables in the configured database."""
    engine = create_async_engine(settings.database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print(f"  + Tables: {', '.join(sorted(Base.metadata.tables))}")

    session_factory = async_sessionmaker(engine, class_=AsyncSession)

    async with session_factory() as session:
        stats = await SubmissionRepository(session).stats()
        print(
            f"  = Submissions: {stats.total} total, {stats.completed} completed, "
            f"{stats.today} today ({stats.completion_rate}%)"
        )

    await engine.dispose()
    print("\nDatabase ready!")


if __name__ == "__main__":
    asyncio.run(init_db())
