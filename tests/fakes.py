"""Deterministic stand-ins for the editor's deferred-work and notification ports"""

import inspect
from decimal import Decimal
from typing import Any, Callable, List, Optional

from src.app.services.notification_service import NotificationService
from src.app.services.task_scheduler import ScheduledTask, TaskScheduler
from src.app.use_cases.quote_lines.row_table import RowTable
from src.domain.notification import Notification, Severity
from src.domain.quote_line_row import (
    DISCOUNT_FAMILY,
    DISCOUNT_LOCATION,
    QuoteLineRow,
    RowKind,
    RowMode,
)


class ManualScheduledTask(ScheduledTask):
    def __init__(self, delay_seconds: float, callback: Callable[[], Any]):
        self.delay_seconds = delay_seconds
        self.callback = callback
        self.cancelled = False
        self.ran = False

    def cancel(self) -> None:
        self.cancelled = True

    def done(self) -> bool:
        return self.cancelled or self.ran


class ManualTaskScheduler(TaskScheduler):
    """Records scheduled work; nothing runs until run_pending is awaited"""

    def __init__(self):
        self.tasks: List[ManualScheduledTask] = []

    def schedule(self, delay_seconds: float, callback: Callable[[], Any]) -> ScheduledTask:
        task = ManualScheduledTask(delay_seconds, callback)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> List[ManualScheduledTask]:
        return [task for task in self.tasks if not task.done()]

    async def run_pending(self) -> int:
        """Run pending work in scheduling order, including work it schedules"""
        count = 0
        while self.pending:
            task = self.pending[0]
            task.ran = True
            result = task.callback()
            if inspect.isawaitable(result):
                await result
            count += 1
        return count


class RecordingNotificationService(NotificationService):
    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def messages(self, severity: Severity = None) -> List[str]:
        return [
            n.message for n in self.notifications
            if severity is None or n.severity == severity
        ]


def priced_row(
    table: RowTable,
    name: str,
    gross: Optional[str],
    external_id: Optional[str] = None,
    **fields,
) -> QuoteLineRow:
    """Read-mode product row whose gross is amount * 1.05"""
    values = {}
    if gross is not None:
        gross_amount = Decimal(gross)
        amount = (gross_amount / Decimal("1.05")).quantize(Decimal("0.01"))
        values = {
            "amount": amount,
            "tax_amount": gross_amount - amount,
            "gross_amount": gross_amount,
            "rate": amount,
            "unit_price": amount,
            "quantity": Decimal("1"),
        }
    values.update(fields)
    return QuoteLineRow(
        local_id=table.next_id(),
        external_id=external_id,
        product_name=name,
        mode=RowMode.READ,
        **values,
    )


def discount_row(
    table: RowTable,
    name: str = "10% Discount",
    external_id: Optional[str] = None,
    **fields,
) -> QuoteLineRow:
    return QuoteLineRow(
        local_id=table.next_id(),
        external_id=external_id,
        kind=RowKind.INDIVIDUAL_DISCOUNT,
        product_name=name,
        mode=RowMode.READ,
        **fields,
    )


def overall_row(table: RowTable, rate: str = "10", external_id: Optional[str] = None) -> QuoteLineRow:
    return QuoteLineRow(
        local_id=table.next_id(),
        external_id=external_id,
        kind=RowKind.OVERALL_DISCOUNT,
        product_name=f"Discount ({rate}%)",
        family=DISCOUNT_FAMILY,
        location=DISCOUNT_LOCATION,
        mode=RowMode.READ,
    )
