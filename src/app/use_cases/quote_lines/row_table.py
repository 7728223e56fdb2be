"""Row table state machine

Ordered collection of quote line rows with a single selection, edit/read
modes, single-row cancel, and the ledger of persisted rows removed locally.
All operations are synchronous; resynchronising discounts afterwards is the
caller's job.
"""

import itertools
import logging
from typing import Iterable, List, Optional

from src.app.services.notification_service import NotificationService
from src.domain.notification import Notification
from src.domain.quote_line_row import OVERALL_DISCOUNT_ROW_NUMBER, QuoteLineRow, RowMode
from .discount_pricing import price_individual_discount

logger = logging.getLogger(__name__)


class RowTable:
    """
    Quote line table

    Business Rules:
    1. local ids come from a per-table sequence and are never reused
    2. The overall discount row is always last
    3. An individual discount row stays directly after its target
    4. A product with an attached discount cannot be removed before the discount
    5. Persisted ids of removed rows are ledgered until the next successful save
    """

    def __init__(self, notifications: NotificationService):
        self.notifications = notifications
        self.rows: List[QuoteLineRow] = []
        self.selected_index = -1
        self.snapshot: Optional[QuoteLineRow] = None
        self.deleted_ids: List[str] = []
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------
    # Identity and lookup
    # ------------------------------------------------------------------

    def next_id(self) -> int:
        return next(self._ids)

    def new_row(self) -> QuoteLineRow:
        """Blank row in edit mode"""
        return QuoteLineRow(local_id=self.next_id(), mode=RowMode.EDIT)

    def reset(self, rows: Iterable[QuoteLineRow]) -> None:
        """Replace the table contents, dropping selection and snapshot"""
        self.rows = [row.model_copy(update={"selected": False}) for row in rows]
        self.selected_index = -1
        self.snapshot = None

    def index_of(self, local_id: Optional[int]) -> int:
        if local_id is None:
            return -1
        for index, row in enumerate(self.rows):
            if row.local_id == local_id:
                return index
        return -1

    def row_by_id(self, local_id: Optional[int]) -> Optional[QuoteLineRow]:
        index = self.index_of(local_id)
        return self.rows[index] if index != -1 else None

    def row_at(self, index: int) -> Optional[QuoteLineRow]:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    def overall_discount_index(self) -> int:
        for index, row in enumerate(self.rows):
            if row.is_overall_discount:
                return index
        return -1

    def update_row(self, row: QuoteLineRow) -> None:
        """Replace the row carrying the same local_id"""
        index = self.index_of(row.local_id)
        if index == -1:
            raise KeyError(f"Row {row.local_id} is not in the table")
        self.rows[index] = row

    def _valid(self, index: int) -> bool:
        return 0 <= index < len(self.rows)

    def _resolve(self, index: Optional[int]) -> int:
        """Select index when given, then return the current selection"""
        if index is not None:
            self.select(index)
        return self.selected_index

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def select(self, index: int) -> bool:
        """Mark exactly one row selected; no-op if already selected"""
        if not self._valid(index):
            return False
        if index == self.selected_index and self.rows[index].selected:
            return False
        self.rows = [
            row.model_copy(update={"selected": position == index})
            if row.selected != (position == index) else row
            for position, row in enumerate(self.rows)
        ]
        self.selected_index = index
        return True

    def toggle_edit(self, index: Optional[int] = None) -> bool:
        """
        Flip the selected row between edit and read mode

        Entering edit mode snapshots the row for cancel and refreshes the
        individual discount attached directly below it.
        """
        index = self._resolve(index)
        if not self._valid(index):
            return False

        row = self.rows[index]
        if row.is_discount:
            self.notifications.notify(
                Notification.warning("Discount rows cannot be edited directly.")
            )
            return False

        entering_edit = not row.is_editing
        if entering_edit:
            self.snapshot = row.model_copy(deep=True)
            following = self.row_at(index + 1)
            if following is not None and following.is_individual_discount:
                self.rows[index + 1] = price_individual_discount(row, following)

        self.rows[index] = row.model_copy(update={
            "mode": RowMode.EDIT if entering_edit else RowMode.READ,
        })
        return True

    def cancel(self, index: Optional[int] = None) -> bool:
        """Restore the snapshotted row and force read mode"""
        index = self._resolve(index)
        if index == -1 or self.snapshot is None:
            return False

        position = self.index_of(self.snapshot.local_id)
        if position == -1:
            logger.debug(f"Snapshot row {self.snapshot.local_id} no longer in table")
            self.snapshot = None
            return False

        self.rows[position] = self.snapshot.model_copy(update={
            "mode": RowMode.READ,
            "selected": self.rows[position].selected,
        })
        self.snapshot = None
        return True

    def insert(self, after_index: Optional[int] = None) -> Optional[QuoteLineRow]:
        """
        Insert a blank edit-mode row after after_index (default: selection)

        The row never lands after the overall discount row nor between a
        product and its attached discount.
        """
        if after_index is None:
            after_index = self.selected_index
        if after_index < 0:
            if self.rows:
                return None
            after_index = -1

        insert_at = after_index + 1
        anchor = self.row_at(after_index)
        following = self.row_at(insert_at)
        if (
            anchor is not None
            and following is not None
            and following.is_individual_discount
            and following.discount_applied_from_row_id == anchor.local_id
        ):
            insert_at += 1

        overall_index = self.overall_discount_index()
        if overall_index != -1 and insert_at > overall_index:
            insert_at = overall_index
        insert_at = min(insert_at, len(self.rows))

        new_row = self.new_row()
        self.rows = (
            [row.model_copy(update={"selected": False}) for row in self.rows[:insert_at]]
            + [new_row.model_copy(update={"selected": True})]
            + [row.model_copy(update={"selected": False}) for row in self.rows[insert_at:]]
        )
        self.selected_index = insert_at
        self.snapshot = new_row.model_copy(deep=True)
        return self.rows[insert_at]

    def remove(self, index: Optional[int] = None) -> Optional[QuoteLineRow]:
        """
        Remove the selected row

        Returns:
            The removed row, or None if the removal was rejected
        """
        index = self._resolve(index)
        if len(self.rows) <= 1 or not self._valid(index):
            return None

        row = self.rows[index]
        following = self.row_at(index + 1)
        if following is not None and following.is_individual_discount and not row.is_discount:
            self.notifications.notify(
                Notification.error("Please remove the discount from this product first.")
            )
            return None

        removed_ids = {row.local_id}
        if row.individual_discount_row_id is not None:
            discount_row = self.row_by_id(row.individual_discount_row_id)
            if discount_row is not None:
                removed_ids.add(discount_row.local_id)
                self.ledger_deletion(discount_row.external_id)

        self.ledger_deletion(row.external_id)

        if row.is_individual_discount and row.discount_applied_from_row_id is not None:
            target = self.row_by_id(row.discount_applied_from_row_id)
            if target is not None and target.individual_discount_row_id == row.local_id:
                self.update_row(target.model_copy(update={"individual_discount_row_id": None}))

        removed_before = sum(
            1 for position, candidate in enumerate(self.rows)
            if position < index and candidate.local_id in removed_ids
        )
        self.rows = [candidate for candidate in self.rows if candidate.local_id not in removed_ids]
        if self.snapshot is not None and self.snapshot.local_id in removed_ids:
            self.snapshot = None

        self.selected_index = -1
        if self.rows:
            self.select(max(0, index - removed_before - 1))
        return row

    # ------------------------------------------------------------------
    # Suggestions, numbering and the deletion ledger
    # ------------------------------------------------------------------

    def set_suggestions_visible(self, local_id: int, visible: bool) -> None:
        row = self.row_by_id(local_id)
        if row is not None:
            self.update_row(row.model_copy(update={"suggestions_visible": visible}))

    def hide_all_suggestions(self) -> None:
        self.rows = [
            row.model_copy(update={"suggestions_visible": False}) if row.suggestions_visible else row
            for row in self.rows
        ]

    def assign_row_numbers(self) -> None:
        """Number non-overall rows densely from 1; the overall row gets the sentinel"""
        numbered = []
        counter = itertools.count(1)
        for row in self.rows:
            number = OVERALL_DISCOUNT_ROW_NUMBER if row.is_overall_discount else next(counter)
            numbered.append(row.model_copy(update={"row_number": number}))
        self.rows = numbered

    def ledger_deletion(self, external_id: Optional[str]) -> None:
        if external_id and external_id not in self.deleted_ids:
            self.deleted_ids.append(external_id)

    def clear_deletion_ledger(self) -> None:
        self.deleted_ids = []
