"""Catalog integration

Debounced product search and mapping of a selected product onto a row.
"""

import logging
from typing import Dict, List, Optional

from src.app.services.notification_service import NotificationService
from src.app.services.product_search_service import ProductSearchService
from src.app.services.task_scheduler import ScheduledTask, TaskScheduler
from src.domain.notification import Notification
from src.domain.catalog_product import CatalogProduct
from src.domain.quote_line_row import QuoteLineRow, RowKind, is_discount_product
from .discount_engine import DiscountEngine
from .row_calculator import RowField, apply_family_rules, recompute
from .row_table import RowTable

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class CatalogSearch:
    """
    Catalog search adapter

    Business Rules:
    1. A new query term cancels the pending (or in-flight) query
    2. An empty term clears the candidates without querying
    3. A failed query clears the candidates and notifies the user
    4. A discount product is attached to the row directly above it
    5. Only rows open for editing accept a product
    6. Overwriting an attached discount unlinks it from its target
    """

    def __init__(
        self,
        table: RowTable,
        discounts: DiscountEngine,
        search_service: ProductSearchService,
        notifications: NotificationService,
        scheduler: TaskScheduler,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        attach_delay_seconds: Optional[float] = None,
    ):
        self.table = table
        self.discounts = discounts
        self.search_service = search_service
        self.notifications = notifications
        self.scheduler = scheduler
        self.debounce_seconds = debounce_seconds
        self.attach_delay_seconds = (
            attach_delay_seconds if attach_delay_seconds is not None else discounts.resync_delay_seconds
        )
        self.candidates: List[CatalogProduct] = []
        self._pending_query: Optional[ScheduledTask] = None
        self._pending_attachments: Dict[int, ScheduledTask] = {}  # discount local_id -> task

    def on_query_change(self, term: str) -> Optional[ScheduledTask]:
        """
        React to the search text of a row changing

        Returns:
            Handle of the scheduled query, None if no query was scheduled
        """
        self.cancel_pending_query()
        if not term:
            self.candidates = []
            return None
        self._pending_query = self.scheduler.schedule(
            self.debounce_seconds, lambda: self.run_query(term)
        )
        return self._pending_query

    def cancel_pending_query(self) -> None:
        if self._pending_query is not None and not self._pending_query.done():
            self._pending_query.cancel()
        self._pending_query = None

    def cancel_pending_attachments(self) -> None:
        for task in self._pending_attachments.values():
            if not task.done():
                task.cancel()
        self._pending_attachments = {}

    async def run_query(self, term: str) -> List[CatalogProduct]:
        """Query the catalog and replace the candidate list"""
        try:
            self.candidates = list(await self.search_service.search(term))
        except Exception as e:
            logger.error(f"Product search for '{term}' failed: {e}")
            self.candidates = []
            self.notifications.notify(Notification.error("Failed to load product suggestions"))
        return self.candidates

    def find_candidate(self, product_id: str) -> Optional[CatalogProduct]:
        for candidate in self.candidates:
            if candidate.id == product_id:
                return candidate
        return None

    def on_select(self, row_index: int, candidate: CatalogProduct) -> bool:
        """
        Apply a selected product to the row at row_index

        A product row schedules a discount resync; a discount product
        schedules its attachment to the row above instead.

        Returns:
            True if the row was updated
        """
        row = self.table.row_at(row_index)
        if row is None or row.is_overall_discount:
            return False
        if row.product_name_disabled or not row.is_editing:
            self.notifications.notify(
                Notification.warning("Switch the row to edit mode before changing it.")
            )
            return False

        is_discount = is_discount_product(candidate.name)
        if is_discount:
            if self.discounts.is_consecutive(row_index):
                self.notifications.notify(Notification.error("Cannot apply consecutive discounts."))
                return False
            above = self.table.row_at(row_index - 1)
            if above is None or above.is_discount:
                self.notifications.notify(
                    Notification.error("Select a product above the discount first.")
                )
                return False

        self._unlink_from_target(row)
        updated = row.model_copy(update={
            "product_name": candidate.name,
            "product_id": candidate.id,
            "description": candidate.description or "",
            "units": candidate.unit_label or "",
            "width": candidate.width,
            "family": candidate.family or "",
            "unit_price": candidate.unit_price,
            "average_cost": candidate.average_cost,
            "cost_per_unit": candidate.cost_per_unit,
            "rate": candidate.unit_price,
            "kind": RowKind.INDIVIDUAL_DISCOUNT if is_discount else RowKind.PRODUCT,
            "discount_applied_from_row_id": None,
        })
        updated = recompute(apply_family_rules(updated), RowField.SELECTION)
        self.table.update_row(updated)
        self.table.hide_all_suggestions()
        self.candidates = []

        if is_discount:
            self._schedule_attachment(self.table.rows[row_index - 1].local_id, updated.local_id)
        else:
            self.discounts.schedule_resync()
        return True

    def _unlink_from_target(self, row: QuoteLineRow) -> None:
        """Drop the pairing of a row that is about to be overwritten"""
        pending = self._pending_attachments.pop(row.local_id, None)
        if pending is not None and not pending.done():
            pending.cancel()
        target = self.table.row_by_id(row.discount_applied_from_row_id)
        if target is not None and target.individual_discount_row_id == row.local_id:
            self.table.update_row(target.model_copy(update={"individual_discount_row_id": None}))

    def _schedule_attachment(self, target_id: int, discount_id: int) -> None:
        # the pair is captured by local_id so later index shifts do not matter
        def attach() -> bool:
            self._pending_attachments.pop(discount_id, None)
            return self.discounts.apply_individual_discount(target_id, discount_id)

        self._pending_attachments[discount_id] = self.scheduler.schedule(
            self.attach_delay_seconds, attach
        )
