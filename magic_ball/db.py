import pathlib

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from magic_ball.load_secrets import db_name, host, password, port, user

SQLITE_PATH = pathlib.Path(__file__).parents[1] / "magic_ball.sqlite3"


def database_url() -> str:
    """PostgreSQL in deployment, a local SQLite file when no database host is configured."""
    if host:
        return f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"
    return f"sqlite+aiosqlite:///{SQLITE_PATH}"


def create_engine(url: str) -> AsyncEngine:
    if url.startswith("postgresql"):
        return create_async_engine(url, pool_size=20, max_overflow=20)
    return create_async_engine(url, echo=False)


engine = create_engine(database_url())

# Centralized session factory to avoid creating it in router modules.
Session = async_sessionmaker(
    autocommit=False,
    class_=AsyncSession,
    autoflush=True,
    bind=engine,
)
