from contextlib import asynccontextmanager

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from core.database import Base, import_models


@asynccontextmanager
async def _memory_db():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    import_models()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.fixture
def memory_db():
    """Async context manager yielding a session factory bound to a fresh in-memory database."""
    return _memory_db
