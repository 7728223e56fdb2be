"""SQLAlchemy Quote Repository Implementation"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.quote_repository import QuoteRepository
from src.domain.quote import Quote


class SqlAlchemyQuoteRepository(QuoteRepository):
    """SQLAlchemy implementation of QuoteRepository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, quote_id: str) -> Optional[Quote]:
        return await self.session.get(Quote, quote_id)

    async def update_discount(
        self, quote_id: str, discount_percent: Decimal, discount_amount: Decimal
    ) -> Quote:
        """
        Store the overall discount of a quote, creating the quote if needed

        Args:
            quote_id: Quote identifier
            discount_percent: Overall discount percentage (0 = none)
            discount_amount: Absolute overall discount amount

        Returns:
            Updated Quote
        """
        quote = await self.get_by_id(quote_id)
        if quote is None:
            quote = Quote(id=quote_id)

        quote.discount_percent = discount_percent
        quote.discount_amount = discount_amount
        quote.updated_at = datetime.utcnow()

        self.session.add(quote)
        await self.session.flush()
        await self.session.refresh(quote)
        return quote
