from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    BufferedNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .task_scheduler import AsyncioTaskScheduler, AsyncioScheduledTask
from .product_search_service import SqlAlchemyProductSearchService

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "BufferedNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "AsyncioTaskScheduler",
    "AsyncioScheduledTask",
    "SqlAlchemyProductSearchService",
]
