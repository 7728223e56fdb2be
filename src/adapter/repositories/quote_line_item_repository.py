"""SQLAlchemy Quote Line Item Repository Implementation

Implements quote line item persistence using SQLAlchemy async session.
"""

from datetime import datetime
from typing import List
from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.quote_line_item_repository import QuoteLineItemRepository
from src.domain.quote_line_item import QuoteLineItem

# Never overwritten when an existing line is updated
_IMMUTABLE_FIELDS = {"id", "created_at"}


class SqlAlchemyQuoteLineItemRepository(QuoteLineItemRepository):
    """
    SQLAlchemy implementation of QuoteLineItemRepository

    Uses async session for database operations.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_quote_id(self, quote_id: str) -> List[QuoteLineItem]:
        """
        Retrieve all line items of a quote ordered by row_number

        Args:
            quote_id: Parent quote identifier

        Returns:
            List of QuoteLineItem
        """
        statement = (
            select(QuoteLineItem)
            .where(QuoteLineItem.quote_id == quote_id)
            .order_by(QuoteLineItem.row_number)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def upsert_many(self, quote_id: str, items: List[QuoteLineItem]) -> List[QuoteLineItem]:
        """
        Insert new line items and update existing ones

        Args:
            quote_id: Parent quote identifier
            items: Line items to persist

        Returns:
            Persisted line items in the order given
        """
        persisted = []
        for item in items:
            item.quote_id = quote_id
            existing = await self.session.get(QuoteLineItem, item.id)
            if existing is None:
                self.session.add(item)
                persisted.append(item)
                continue

            for name, value in item.model_dump(exclude=_IMMUTABLE_FIELDS).items():
                setattr(existing, name, value)
            existing.updated_at = datetime.utcnow()
            self.session.add(existing)
            persisted.append(existing)

        await self.session.flush()
        for item in persisted:
            await self.session.refresh(item)
        return persisted

    async def delete_by_ids(self, item_ids: List[str]) -> int:
        """
        Delete line items by id

        Args:
            item_ids: Identifiers of the line items to delete

        Returns:
            Number of deleted line items
        """
        if not item_ids:
            return 0
        statement = delete(QuoteLineItem).where(QuoteLineItem.id.in_(item_ids))
        result = await self.session.execute(statement)
        await self.session.flush()
        return result.rowcount
