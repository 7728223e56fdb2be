from .quote_line_item_repository import QuoteLineItemRepository
from .quote_repository import QuoteRepository
from .product_repository import ProductRepository

__all__ = [
    "QuoteLineItemRepository",
    "QuoteRepository",
    "ProductRepository",
]
