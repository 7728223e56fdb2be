"""Data Transfer Objects for Quote Line Use Cases

Pydantic models for collaborator inputs and outputs of the quote line editor.
"""

from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from src.domain.catalog_product import CatalogProduct
from src.domain.notification import Notification
from src.domain.quote_line_row import QuoteLineRow


class LineItemRecordDTO(BaseModel):
    """Persisted line item as returned by the load collaborator"""

    external_id: str
    quote_id: str
    row_number: Optional[int] = None
    row_key: Optional[str] = None
    location: str = ""
    product_id: Optional[str] = None
    product_name: str = ""
    product_family: str = ""
    description: str = ""
    family: str = ""
    units: str = ""
    length: Optional[Decimal] = None
    width: Optional[Decimal] = None
    net_area: Optional[Decimal] = None
    wastage: Optional[Decimal] = None
    total_area: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    quantity_area: Optional[Decimal] = None
    rate: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    gross_amount: Optional[Decimal] = None
    estimated_cost: Optional[Decimal] = None
    average_cost: Optional[Decimal] = None
    cost_per_unit: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None
    is_individual_discount: bool = False
    discount_applied_from_row_key: Optional[str] = None
    individual_discount_row_key: Optional[str] = None


class LoadedLineItemsDTO(BaseModel):
    """Response DTO of LoadQuoteLineItems"""

    quote_id: str
    records: List[LineItemRecordDTO] = Field(default_factory=list)


class LineItemPayloadDTO(BaseModel):
    """
    One record of the save payload

    All numeric fields are coerced: absent values become 0 (quantity: 1).
    """

    external_id: Optional[str] = None
    quote_id: str
    row_key: str
    row_number: Optional[int] = None
    location: str = ""
    product_id: Optional[str] = None
    product_name: str = ""
    description: str = ""
    family: str = ""
    units: str = ""
    length: Decimal = Decimal("0")
    width: Decimal = Decimal("0")
    net_area: Decimal = Decimal("0")
    wastage: Decimal = Decimal("0")
    total_area: Decimal = Decimal("0")
    quantity: Decimal = Decimal("1")
    quantity_area: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    gross_amount: Decimal = Decimal("0")
    estimated_cost: Decimal = Decimal("0")
    average_cost: Decimal = Decimal("0")
    cost_per_unit: Decimal = Decimal("0")
    cost_price: Decimal = Decimal("0")
    is_individual_discount: bool = False
    is_overall_discount: bool = False
    discount_applied_from_row_key: Optional[str] = None
    individual_discount_row_key: Optional[str] = None


class SaveLineItemsCommandDTO(BaseModel):
    """Command DTO for SaveQuoteLineItems"""

    quote_id: str = Field(..., description="Parent quote identifier")
    items: List[LineItemPayloadDTO] = Field(default_factory=list)
    discount_percent: Decimal = Field(
        default=Decimal("0"), description="Overall discount percentage (0 = none)"
    )
    discount_amount: Decimal = Field(
        default=Decimal("0"), description="Absolute overall discount amount"
    )
    deleted_ids: List[str] = Field(
        default_factory=list, description="Persisted line ids removed since the last save"
    )


class SaveResultDTO(BaseModel):
    """Response DTO of SaveQuoteLineItems"""

    quote_id: str
    saved_count: int
    deleted_count: int
    external_ids: Dict[str, str] = Field(
        default_factory=dict, description="row_key -> persisted line id"
    )


class QuoteLinesStateDTO(BaseModel):
    """Snapshot of an editor session returned by every command"""

    quote_id: str
    rows: List[QuoteLineRow]
    selected_index: int
    overall_discount_rate: Optional[Decimal] = None
    deleted_ids: List[str] = Field(default_factory=list)
    candidates: List[CatalogProduct] = Field(default_factory=list)
    notifications: List[Notification] = Field(default_factory=list)
