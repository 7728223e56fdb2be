"""Quote Line Item Repository Interface

Defines the contract for quote line item persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List
from src.domain.quote_line_item import QuoteLineItem


class QuoteLineItemRepository(ABC):
    """
    Repository interface for QuoteLineItem persistence

    Backs loading and batch-saving the lines of one quote.
    """

    @abstractmethod
    async def get_by_quote_id(self, quote_id: str) -> List[QuoteLineItem]:
        """
        Retrieve all line items of a quote ordered by row_number

        Args:
            quote_id: Parent quote identifier

        Returns:
            List of QuoteLineItem (empty if the quote has no lines)
        """
        pass

    @abstractmethod
    async def upsert_many(self, quote_id: str, items: List[QuoteLineItem]) -> List[QuoteLineItem]:
        """
        Insert new line items and update existing ones

        Items carrying an id that exists are updated in place; all others
        are inserted with a freshly generated id.

        Args:
            quote_id: Parent quote identifier
            items: Line items to persist

        Returns:
            Persisted line items in the order given
        """
        pass

    @abstractmethod
    async def delete_by_ids(self, item_ids: List[str]) -> int:
        """
        Delete line items by id

        Args:
            item_ids: Identifiers of the line items to delete

        Returns:
            Number of deleted line items
        """
        pass
