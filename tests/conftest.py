import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from magic_ball.crud import CreateData


class FakeGenerator:
    """Stands in for PredictionGenerator and records every call."""

    def __init__(self, texts=None):
        self.texts = list(texts or ["Зорі кажуть: все вийде."])
        self.calls = []

    async def generate(self, first_name):
        self.calls.append(first_name)
        return self.texts[min(len(self.calls), len(self.texts)) - 1]


@pytest.fixture
async def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite3'}")
    await CreateData.create_table(engine)
    yield async_sessionmaker(autocommit=False, class_=AsyncSession, autoflush=True, bind=engine)
    await engine.dispose()


@pytest.fixture
async def empty_session_factory(tmp_path):
    """Session factory for a database without any tables."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.sqlite3'}")
    yield async_sessionmaker(autocommit=False, class_=AsyncSession, autoflush=True, bind=engine)
    await engine.dispose()


async def count_rows(session_factory, model) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model))
        return result.scalar_one()
