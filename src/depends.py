from dataclasses import dataclass
from typing import Dict, Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.notification_service import (
    BufferedNotificationService,
    create_notification_service,
)
from src.adapter.services.product_search_service import SqlAlchemyProductSearchService
from src.adapter.services.task_scheduler import AsyncioTaskScheduler
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.product_search_service import ProductSearchService
from src.app.use_cases.quote_lines.quote_line_editor import QuoteLineEditor

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


@dataclass
class EditorSession:
    """Editor of one quote plus the buffer its notifications collect in"""

    editor: QuoteLineEditor
    buffer: BufferedNotificationService


class EditorRegistry:
    """In-process editing sessions, one per quote"""

    def __init__(
        self,
        search_service: ProductSearchService,
        resync_delay_seconds: float = ApplicationConfig.DISCOUNT_RESYNC_DELAY_SECONDS,
        debounce_seconds: float = ApplicationConfig.SEARCH_DEBOUNCE_SECONDS,
        webhook_url: Optional[str] = ApplicationConfig.NOTIFICATION_WEBHOOK,
    ):
        self.search_service = search_service
        self.resync_delay_seconds = resync_delay_seconds
        self.debounce_seconds = debounce_seconds
        self.webhook_url = webhook_url
        self._sessions: Dict[str, EditorSession] = {}

    def get(self, quote_id: str) -> Optional[EditorSession]:
        return self._sessions.get(quote_id)

    def get_or_create(self, quote_id: str) -> EditorSession:
        session = self._sessions.get(quote_id)
        if session is None:
            buffer = BufferedNotificationService()
            editor = QuoteLineEditor(
                quote_id,
                notifications=create_notification_service(self.webhook_url, buffer=buffer),
                scheduler=AsyncioTaskScheduler(),
                search_service=self.search_service,
                resync_delay_seconds=self.resync_delay_seconds,
                debounce_seconds=self.debounce_seconds,
            )
            session = EditorSession(editor=editor, buffer=buffer)
            self._sessions[quote_id] = session
        return session

    def discard(self, quote_id: str) -> None:
        session = self._sessions.pop(quote_id, None)
        if session is not None:
            session.editor.discounts.cancel_pending_resync()
            session.editor.catalog.cancel_pending_query()


editor_registry = EditorRegistry(
    SqlAlchemyProductSearchService(
        AsyncSessionLocal, limit=ApplicationConfig.SEARCH_RESULT_LIMIT
    )
)


def get_editor_registry() -> EditorRegistry:
    return editor_registry
