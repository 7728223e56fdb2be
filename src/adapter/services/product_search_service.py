"""SQLAlchemy Product Search Service

Catalog search backed by the product repository. Each query opens its own
session because searches run after the triggering request has returned.
"""

import logging
from typing import Callable, List, Optional
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.app.services.product_search_service import ProductSearchService
from src.domain.catalog_product import CatalogProduct
from src.domain.product import Product

logger = logging.getLogger(__name__)


class SqlAlchemyProductSearchService(ProductSearchService):
    """ProductSearchService over the products table"""

    def __init__(self, session_factory: Callable[[], AsyncSession], limit: int = 20):
        self.session_factory = session_factory
        self.limit = limit

    async def search(self, term: str) -> List[CatalogProduct]:
        async with self.session_factory() as session:
            products = await SqlAlchemyProductRepository(session).search(term, limit=self.limit)
        logger.debug(f"Catalog search '{term}' returned {len(products)} product(s)")
        return [self._to_candidate(product) for product in products]

    async def get_product(self, product_id: str) -> Optional[CatalogProduct]:
        async with self.session_factory() as session:
            product = await SqlAlchemyProductRepository(session).get_by_id(product_id)
        return self._to_candidate(product) if product else None

    def _to_candidate(self, product: Product) -> CatalogProduct:
        return CatalogProduct(
            id=product.id,
            name=product.name,
            description=product.description or "",
            unit_label=product.primary_sale_unit or "",
            width=product.width_m,
            family=product.family or "",
            unit_price=product.unit_price,
            average_cost=product.average_cost,
            cost_per_unit=product.cost_price_per_unit,
        )
