import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.services.product_search_service import SqlAlchemyProductSearchService
from src.depends import EditorRegistry, get_editor_registry, get_session


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine on a temporary SQLite file"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'api.db'}", echo=False, future=True)

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


@pytest.fixture
def registry(session_factory):
    """Editor sessions without debounce or resync delay"""
    return EditorRegistry(
        SqlAlchemyProductSearchService(session_factory),
        resync_delay_seconds=0,
        debounce_seconds=0,
        webhook_url=None,
    )


@pytest_asyncio.fixture
async def client(session_factory, registry):
    """Create test client with database session and editor registry overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    # Each request gets its own session, as in production
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_editor_registry] = lambda: registry

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
