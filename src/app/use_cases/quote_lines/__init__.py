"""Quote line editing use cases"""
from .load_line_items import LoadQuoteLineItems
from .save_line_items import SaveQuoteLineItems
from .quote_line_editor import QuoteLineEditor
from .row_calculator import RowField, recompute, apply_field_change
from .row_table import RowTable
from .discount_engine import DiscountEngine
from .catalog_search import CatalogSearch
from .dtos import (
    LineItemRecordDTO,
    LoadedLineItemsDTO,
    LineItemPayloadDTO,
    SaveLineItemsCommandDTO,
    SaveResultDTO,
    QuoteLinesStateDTO,
)

__all__ = [
    "LoadQuoteLineItems",
    "SaveQuoteLineItems",
    "QuoteLineEditor",
    "RowField",
    "recompute",
    "apply_field_change",
    "RowTable",
    "DiscountEngine",
    "CatalogSearch",
    "LineItemRecordDTO",
    "LoadedLineItemsDTO",
    "LineItemPayloadDTO",
    "SaveLineItemsCommandDTO",
    "SaveResultDTO",
    "QuoteLinesStateDTO",
]
