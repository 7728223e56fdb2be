from .quote_line_item_repository import SqlAlchemyQuoteLineItemRepository
from .quote_repository import SqlAlchemyQuoteRepository
from .product_repository import SqlAlchemyProductRepository

__all__ = [
    "SqlAlchemyQuoteLineItemRepository",
    "SqlAlchemyQuoteRepository",
    "SqlAlchemyProductRepository",
]
