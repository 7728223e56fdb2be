from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .product_search_service import ProductSearchService
from .task_scheduler import TaskScheduler, ScheduledTask

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "ProductSearchService",
    "TaskScheduler",
    "ScheduledTask",
]
