"""SQLAlchemy Product Repository Implementation

Implements catalog lookups using SQLAlchemy async session.
"""

from typing import List, Optional
from sqlmodel import select, or_
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_repository import ProductRepository
from src.domain.product import Product


class SqlAlchemyProductRepository(ProductRepository):
    """
    SQLAlchemy implementation of ProductRepository

    Matching is a case-insensitive substring match on name or description.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def search(self, term: str, limit: int = 20) -> List[Product]:
        """
        Free-text search over active products

        Args:
            term: Search text
            limit: Maximum number of products to return

        Returns:
            Matching products ordered by name
        """
        pattern = f"%{term.strip()}%"
        statement = (
            select(Product)
            .where(Product.is_active.is_(True))
            .where(or_(Product.name.ilike(pattern), Product.description.ilike(pattern)))
            .order_by(Product.name)
            .limit(limit)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        statement = select(Product).where(Product.id == product_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()
