"""Product Search Service Interface

Catalog search collaborator used by the debounced search. Unlike the
repositories it is not bound to a request session, because queries run
after the request that triggered them has returned.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from src.domain.catalog_product import CatalogProduct


class ProductSearchService(ABC):
    """Catalog search collaborator"""

    @abstractmethod
    async def search(self, term: str) -> List[CatalogProduct]:
        """
        Search the catalog

        Args:
            term: Free-text query

        Returns:
            Candidate products
        """
        pass

    @abstractmethod
    async def get_product(self, product_id: str) -> Optional[CatalogProduct]:
        """
        Fetch a single candidate by id

        Args:
            product_id: Catalog product identifier

        Returns:
            Candidate if found, None otherwise
        """
        pass
