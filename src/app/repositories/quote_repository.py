"""Quote Repository Interface

Defines the contract for quote persistence operations.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from src.domain.quote import Quote


class QuoteRepository(ABC):
    """Repository interface for Quote persistence"""

    @abstractmethod
    async def get_by_id(self, quote_id: str) -> Optional[Quote]:
        """
        Retrieve quote by ID

        Args:
            quote_id: Quote identifier

        Returns:
            Quote if found, None otherwise
        """
        pass

    @abstractmethod
    async def update_discount(
        self, quote_id: str, discount_percent: Decimal, discount_amount: Decimal
    ) -> Quote:
        """
        Store the overall discount of a quote

        Creates the quote record if it does not exist yet.

        Args:
            quote_id: Quote identifier
            discount_percent: Overall discount percentage (0 = none)
            discount_amount: Absolute overall discount amount

        Returns:
            Updated Quote
        """
        pass
