from .base import BaseModel, generate_uuid
from .catalog_product import CatalogProduct
from .notification import Notification, Severity
from .product import Product
from .quote import Quote
from .quote_line_item import QuoteLineItem
from .quote_line_row import QuoteLineRow, RowKind, RowMode

__all__ = [
    "BaseModel",
    "generate_uuid",
    "CatalogProduct",
    "Notification",
    "Severity",
    "Product",
    "Quote",
    "QuoteLineItem",
    "QuoteLineRow",
    "RowKind",
    "RowMode",
]
