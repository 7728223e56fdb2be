"""Quote line editor

Command surface of one quote's line table. Composes the row table, the
calculator, the discount engine and the catalog search, and turns use case
results into user notifications.
"""

import logging
from decimal import Decimal
from typing import Any, List, Optional

from src.app.services.notification_service import NotificationService
from src.app.services.product_search_service import ProductSearchService
from src.app.services.task_scheduler import ScheduledTask, TaskScheduler
from src.domain.notification import Notification
from src.domain.quote_line_row import QuoteLineRow
from .catalog_search import DEFAULT_DEBOUNCE_SECONDS, CatalogSearch
from .discount_engine import DEFAULT_RESYNC_DELAY_SECONDS, DiscountEngine
from .dtos import QuoteLinesStateDTO, SaveLineItemsCommandDTO
from .line_item_mapper import build_payload, overall_discount_amount, rows_from_records
from .load_line_items import LoadQuoteLineItems
from .row_calculator import (
    DISCOUNT_SENSITIVE_FIELDS,
    FIELD_ATTRIBUTES,
    RowField,
    apply_field_change,
    discount_inputs_changed,
)
from .row_table import RowTable
from .save_line_items import SaveQuoteLineItems

logger = logging.getLogger(__name__)


class QuoteLineEditor:
    """
    Editing session of one quote

    Business Rules:
    1. Only product rows in edit mode accept field edits
    2. Edits touching discount inputs and structural changes schedule a discount resync
    3. A failed load falls back to a single blank row
    4. A failed save leaves the rows and the deletion ledger untouched
    """

    def __init__(
        self,
        quote_id: str,
        notifications: NotificationService,
        scheduler: TaskScheduler,
        search_service: ProductSearchService,
        resync_delay_seconds: float = DEFAULT_RESYNC_DELAY_SECONDS,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ):
        self.quote_id = quote_id
        self.notifications = notifications
        self.search_service = search_service
        self.table = RowTable(notifications)
        self.discounts = DiscountEngine(
            self.table, notifications, scheduler, resync_delay_seconds=resync_delay_seconds
        )
        self.catalog = CatalogSearch(
            self.table,
            self.discounts,
            search_service,
            notifications,
            scheduler,
            debounce_seconds=debounce_seconds,
        )

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self, loader: LoadQuoteLineItems) -> bool:
        """
        Replace the table with the persisted lines of the quote

        Returns:
            True if the lines were loaded
        """
        self.discounts.cancel_pending_resync()
        self.catalog.cancel_pending_query()
        self.catalog.cancel_pending_attachments()
        self.catalog.candidates = []

        result = await loader.execute(self.quote_id)
        if result.is_err():
            logger.error(f"Loading lines of quote {self.quote_id} failed: {result.error.reason}")
            self.notifications.notify(Notification.error(result.error.message))
            self.table.reset([self.table.new_row()])
            self.table.clear_deletion_ledger()
            self.discounts.clear_overall_rate()
            return False

        loaded = rows_from_records(result.value.records, self.table.next_id)
        self.table.reset(loaded.rows)
        self.table.clear_deletion_ledger()
        for stale_id in loaded.stale_ids:
            self.table.ledger_deletion(stale_id)
        self.discounts.overall_rate = loaded.overall_rate
        logger.info(f"Loaded {len(result.value.records)} line(s) of quote {self.quote_id}")
        return True

    async def save(self, saver: SaveQuoteLineItems) -> bool:
        """
        Persist every row and apply the deletion ledger

        Pending discount work is flushed first so the payload is consistent.

        Returns:
            True if the save succeeded
        """
        self.discounts.cancel_pending_resync()
        self.discounts.resync()
        self.table.assign_row_numbers()

        command = SaveLineItemsCommandDTO(
            quote_id=self.quote_id,
            items=build_payload(self.table.rows, self.quote_id),
            discount_percent=self.discounts.overall_rate or Decimal("0"),
            discount_amount=overall_discount_amount(self.table.rows),
            deleted_ids=list(self.table.deleted_ids),
        )
        result = await saver.execute(command)
        if result.is_err():
            logger.error(f"Saving lines of quote {self.quote_id} failed: {result.error.reason}")
            self.notifications.notify(Notification.error(result.error.message))
            return False

        external_ids = result.value.external_ids
        self.table.rows = [
            row.model_copy(update={"external_id": external_ids[str(row.local_id)]})
            if str(row.local_id) in external_ids else row
            for row in self.table.rows
        ]
        self.table.clear_deletion_ledger()
        self.notifications.notify(Notification.success("Quote Line Items saved successfully!"))
        return True

    # ------------------------------------------------------------------
    # Table commands
    # ------------------------------------------------------------------

    @property
    def rows(self) -> List[QuoteLineRow]:
        return self.table.rows

    def select(self, index: int) -> bool:
        return self.table.select(index)

    def toggle_edit(self, index: Optional[int] = None) -> bool:
        toggled = self.table.toggle_edit(index)
        if toggled:
            self.discounts.schedule_resync()
        return toggled

    def cancel(self, index: Optional[int] = None) -> bool:
        cancelled = self.table.cancel(index)
        if cancelled:
            self.discounts.schedule_resync()
        return cancelled

    def insert(self, after_index: Optional[int] = None) -> Optional[QuoteLineRow]:
        inserted = self.table.insert(after_index)
        if inserted is not None:
            self.discounts.schedule_resync()
        return inserted

    def remove(self, index: Optional[int] = None) -> Optional[QuoteLineRow]:
        removed = self.table.remove(index)
        if removed is None:
            return None
        if removed.is_overall_discount:
            self.discounts.clear_overall_rate()
        self.discounts.schedule_resync()
        return removed

    def update_field(self, local_id: int, field: RowField, value: Any) -> bool:
        """
        Write a user-entered value into a row and recompute it

        Returns:
            True if the row was updated
        """
        field = RowField(field)
        if field not in FIELD_ATTRIBUTES:
            raise ValueError(f"Field '{field.value}' cannot be edited")

        row = self.table.row_by_id(local_id)
        if row is None:
            raise KeyError(f"Row {local_id} is not in the table")
        if row.is_discount or not row.is_editing:
            self.notifications.notify(
                Notification.warning("Switch the row to edit mode before changing it.")
            )
            return False

        updated = apply_field_change(row, field, value)
        self.table.update_row(updated)
        if field in DISCOUNT_SENSITIVE_FIELDS or discount_inputs_changed(row, updated):
            self.discounts.schedule_resync()
        return True

    def set_overall_discount(self, rate: Any) -> bool:
        return self.discounts.set_overall_rate(rate)

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def change_query(self, local_id: int, term: str) -> Optional[ScheduledTask]:
        """Write the search text into the row and debounce a catalog query"""
        row = self.table.row_by_id(local_id)
        if row is None:
            raise KeyError(f"Row {local_id} is not in the table")
        if row.product_name_disabled or not row.is_editing:
            self.notifications.notify(
                Notification.warning("Switch the row to edit mode before changing it.")
            )
            return None

        term = term or ""
        self.table.update_row(row.model_copy(update={
            "product_name": term,
            "suggestions_visible": bool(term),
        }))
        return self.catalog.on_query_change(term)

    async def select_product(self, index: int, product_id: str) -> bool:
        """Apply a catalog product, from the candidates or fetched by id, to a row"""
        candidate = self.catalog.find_candidate(product_id)
        if candidate is None:
            candidate = await self.search_service.get_product(product_id)
        if candidate is None:
            self.notifications.notify(Notification.error("Product not found."))
            return False
        return self.catalog.on_select(index, candidate)

    def set_suggestions_visible(self, local_id: int, visible: bool) -> None:
        self.table.set_suggestions_visible(local_id, visible)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def state(self, notifications: Optional[List[Notification]] = None) -> QuoteLinesStateDTO:
        return QuoteLinesStateDTO(
            quote_id=self.quote_id,
            rows=list(self.table.rows),
            selected_index=self.table.selected_index,
            overall_discount_rate=self.discounts.overall_rate,
            deleted_ids=list(self.table.deleted_ids),
            candidates=list(self.catalog.candidates),
            notifications=list(notifications or []),
        )
