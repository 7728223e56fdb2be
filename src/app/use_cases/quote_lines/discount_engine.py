"""Discount engine

Keeps the overall discount row and every individual discount row in sync
with the product rows they are computed from.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

from src.app.services.notification_service import NotificationService
from src.app.services.task_scheduler import ScheduledTask, TaskScheduler
from src.domain.notification import Notification
from .discount_pricing import (
    DiscountBase,
    build_overall_discount_row,
    eligible_rows,
    format_percent,
    percent_in,
    price_individual_discount,
)
from .row_calculator import to_decimal
from .row_table import RowTable

logger = logging.getLogger(__name__)

DEFAULT_RESYNC_DELAY_SECONDS = 0.1


class DiscountEngine:
    """
    Overall and individual discount management

    Business Rules:
    1. The overall discount applies to the sum of product rows only
    2. A positive overall rate over an empty base is rejected
    3. An individual discount is priced from its target's current values
    4. Individual discounts are never consecutive
    5. Resync is idempotent; scheduling one supersedes the pending one
    """

    def __init__(
        self,
        table: RowTable,
        notifications: NotificationService,
        scheduler: TaskScheduler,
        resync_delay_seconds: float = DEFAULT_RESYNC_DELAY_SECONDS,
    ):
        self.table = table
        self.notifications = notifications
        self.scheduler = scheduler
        self.resync_delay_seconds = resync_delay_seconds
        self.overall_rate: Optional[Decimal] = None
        self._pending_resync: Optional[ScheduledTask] = None

    # ------------------------------------------------------------------
    # Overall discount
    # ------------------------------------------------------------------

    def set_overall_rate(self, rate: Any) -> bool:
        """
        Set the overall discount rate

        An empty or zero rate removes the overall discount row.

        Returns:
            True if the table reflects the requested rate
        """
        parsed = to_decimal(rate)
        if parsed is None or parsed <= 0:
            self.overall_rate = None
            self.remove_overall_row()
            return True

        if not self._rebuild_overall_row(parsed):
            self.notifications.notify(Notification.warning(
                "No items available to apply discount. Please add items first."
            ))
            return False

        self.overall_rate = parsed
        self.notifications.notify(Notification.success(
            f"{format_percent(parsed)}% overall discount applied successfully!"
        ))
        return True

    def clear_overall_rate(self) -> None:
        """Forget the rate without touching rows (the row was removed by the table)"""
        self.overall_rate = None

    def remove_overall_row(self) -> None:
        index = self.table.overall_discount_index()
        if index == -1:
            return
        row = self.table.rows[index]
        self.table.ledger_deletion(row.external_id)
        self.table.rows = [candidate for candidate in self.table.rows if not candidate.is_overall_discount]
        if self.table.selected_index >= len(self.table.rows):
            self.table.selected_index = -1

    def _rebuild_overall_row(self, rate: Decimal) -> bool:
        base = DiscountBase.of_rows(eligible_rows(self.table.rows))
        if base.gross_amount <= 0:
            return False

        index = self.table.overall_discount_index()
        previous = self.table.rows[index] if index != -1 else None
        row = build_overall_discount_row(
            local_id=previous.local_id if previous else self.table.next_id(),
            rate=rate,
            base=base,
            previous=previous,
        )
        remaining = [candidate for candidate in self.table.rows if not candidate.is_overall_discount]
        self.table.rows = remaining + [row]
        return True

    # ------------------------------------------------------------------
    # Individual discounts
    # ------------------------------------------------------------------

    def is_consecutive(self, index: int) -> bool:
        """True if a discount at index would touch another individual discount"""
        for neighbour in (self.table.row_at(index - 1), self.table.row_at(index + 1)):
            if neighbour is not None and neighbour.is_individual_discount:
                return True
        return False

    def apply_individual_discount(self, target_local_id: int, discount_local_id: int) -> bool:
        """
        Attach a discount row to the target row directly above it

        Returns:
            True if the discount was priced and linked
        """
        target_index = self.table.index_of(target_local_id)
        discount_index = self.table.index_of(discount_local_id)
        if target_index == -1 or discount_index == -1:
            logger.info(
                f"Discount attachment skipped: target {target_local_id} "
                f"or discount {discount_local_id} no longer in table"
            )
            return False

        target = self.table.rows[target_index]
        discount_row = self.table.rows[discount_index]
        if target.is_discount:
            self.notifications.notify(Notification.error("Cannot apply consecutive discounts."))
            return False

        percent = percent_in(discount_row.product_name)
        if percent is None:
            logger.warning(f"Row {discount_local_id} has no discount percentage in its name")
            return False

        priced = price_individual_discount(target, discount_row)
        self.table.rows[discount_index] = priced
        self.table.rows[target_index] = target.model_copy(update={
            "individual_discount_row_id": priced.local_id,
        })
        self.notifications.notify(Notification.success(
            f"{format_percent(percent)}% individual discount applied to {target.product_name}!"
        ))
        return True

    def _reprice_individual_discounts(self) -> None:
        for index, row in enumerate(self.table.rows):
            if not row.is_individual_discount or row.discount_applied_from_row_id is None:
                continue
            target = self.table.row_by_id(row.discount_applied_from_row_id)
            if target is None:
                logger.warning(f"Discount row {row.local_id} lost its target {row.discount_applied_from_row_id}")
                continue
            self.table.rows[index] = price_individual_discount(target, row)

    # ------------------------------------------------------------------
    # Resynchronisation
    # ------------------------------------------------------------------

    def resync(self) -> None:
        """
        Rebuild the overall discount, then every individual discount

        A base that dropped to zero removes the overall row but keeps the
        rate, so the row comes back once product rows are priced again.
        """
        if self.overall_rate is not None:
            if not self._rebuild_overall_row(self.overall_rate):
                logger.info("Overall discount base is empty; dropping the overall discount row")
                self.remove_overall_row()
        self._reprice_individual_discounts()

    def schedule_resync(self) -> ScheduledTask:
        """Coalesce rapid edits into one resync after a short delay"""
        self.cancel_pending_resync()
        self._pending_resync = self.scheduler.schedule(self.resync_delay_seconds, self.resync)
        return self._pending_resync

    def cancel_pending_resync(self) -> None:
        if self._pending_resync is not None and not self._pending_resync.done():
            self._pending_resync.cancel()
        self._pending_resync = None
