import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.domain import Product, Quote, QuoteLineItem  # noqa: F401  registers the tables


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a temporary SQLite file"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'adapter.db'}", echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session
