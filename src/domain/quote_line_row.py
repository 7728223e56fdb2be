"""Quote Line Row Domain Entity

One entry of the quote line table: either a priced product line or a
system-generated discount line. Rows live in memory while a quote is being
edited and are only persisted through QuoteLineItem records.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


TAX_RATE = Decimal("0.05")
BASE_UNIT_LABEL = "SqM"
OVERALL_DISCOUNT_ROW_NUMBER = 9999
DISCOUNT_FAMILY = "Discount"
DISCOUNT_LOCATION = "Discount"
INDIVIDUAL_DISCOUNT_PRODUCTS = (
    "5% Discount",
    "10% Discount",
    "15% Discount",
    "20% Discount",
)

# Family groups driving field enablement
WALL_TO_WALL_FAMILIES = ("Wall to Wall", "F.SHEET-VINYL", "F.ARTIFICIAL GRASS")
DECKING_FAMILIES = ("F. DECKING", "Wood Flooring", "F.LVT")


class RowMode(str, Enum):
    """Row lifecycle state"""
    EDIT = "edit"
    READ = "read"


class RowKind(str, Enum):
    """
    Row variant

    The two discount variants are kept apart: the overall discount is computed
    from every product row, an individual discount from exactly one target.
    """
    PRODUCT = "product"
    OVERALL_DISCOUNT = "overall_discount"
    INDIVIDUAL_DISCOUNT = "individual_discount"

    @classmethod
    def classify(
        cls,
        family: Optional[str],
        location: Optional[str],
        product_name: Optional[str],
    ) -> "RowKind":
        if family == DISCOUNT_FAMILY and location == DISCOUNT_LOCATION:
            return cls.OVERALL_DISCOUNT
        if is_discount_product(product_name):
            return cls.INDIVIDUAL_DISCOUNT
        return cls.PRODUCT


def is_discount_product(name: Optional[str]) -> bool:
    """True if a catalog product name denotes an individual discount"""
    return name in INDIVIDUAL_DISCOUNT_PRODUCTS


class QuoteLineRow(BaseModel):
    """
    Quote Line Row - one line of the quote line table

    Domain Rules:
    - local_id is unique per table and never reused
    - At most one OVERALL_DISCOUNT row exists and it is always last
    - An INDIVIDUAL_DISCOUNT row sits directly after its target row
    - Discount rows are never the base of another discount
    """

    local_id: int = Field(..., description="Process-local row identifier")
    external_id: Optional[str] = Field(
        default=None, description="Persisted record id (None for new rows)"
    )
    row_number: Optional[int] = Field(default=None, description="Display/save ordering")
    kind: RowKind = Field(default=RowKind.PRODUCT)

    location: str = ""
    product_name: str = ""
    product_id: Optional[str] = None
    description: str = ""
    family: str = ""
    estimate_type: str = ""

    # Geometry
    length: Optional[Decimal] = None
    width: Optional[Decimal] = None
    net_area: Optional[Decimal] = None
    wastage_percent: Optional[Decimal] = None
    total_area: Optional[Decimal] = None

    # Commercial
    units: str = ""
    unit_price: Optional[Decimal] = None
    average_cost: Optional[Decimal] = None
    cost_per_unit: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    quantity_area: Optional[Decimal] = None
    rate: Optional[Decimal] = None
    amount: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    gross_amount: Optional[Decimal] = None
    estimated_cost: Optional[Decimal] = None
    cost_price: Optional[Decimal] = None

    # Discount pairing (one-to-one, by local_id)
    individual_discount_row_id: Optional[int] = None
    discount_applied_from_row_id: Optional[int] = None

    # UI / lifecycle flags
    mode: RowMode = RowMode.EDIT
    selected: bool = False
    suggestions_visible: bool = False
    net_area_disabled: bool = False
    length_disabled: bool = False
    wastage_disabled: bool = True
    product_name_disabled: bool = False

    @property
    def is_overall_discount(self) -> bool:
        return self.kind == RowKind.OVERALL_DISCOUNT

    @property
    def is_individual_discount(self) -> bool:
        return self.kind == RowKind.INDIVIDUAL_DISCOUNT

    @property
    def is_discount(self) -> bool:
        return self.kind != RowKind.PRODUCT

    @property
    def is_editing(self) -> bool:
        return self.mode == RowMode.EDIT
