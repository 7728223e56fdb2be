"""Product Repository Interface

Defines the contract for catalog product lookups.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.product import Product


class ProductRepository(ABC):
    """Repository interface for the product catalog"""

    @abstractmethod
    async def search(self, term: str, limit: int = 20) -> List[Product]:
        """
        Free-text search over active products

        Args:
            term: Search text matched against name and description
            limit: Maximum number of products to return

        Returns:
            Matching products ordered by name
        """
        pass

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Optional[Product]:
        """
        Retrieve product by ID

        Args:
            product_id: Product identifier

        Returns:
            Product if found, None otherwise
        """
        pass
