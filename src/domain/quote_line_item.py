"""Quote Line Item Domain Entity

Persisted form of a quote line row.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel, generate_uuid


def _amount_column():
    return Column(Numeric(18, 6), nullable=False, default=0)


class QuoteLineItem(BaseModel, table=True):
    """
    Quote Line Item - one saved line of a quote

    Domain Rules:
    - row_number orders the lines; the overall discount line uses 9999
    - row_key is the editor row id at save time; discount pairs reference
      each other through it so they can be re-linked on load
    """

    __tablename__ = "quote_line_items"
    __table_args__ = (
        Index('ix_quote_line_items_quote_id', 'quote_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(64), primary_key=True),
        description="Line item identifier"
    )

    quote_id: str = Field(description="Parent quote")

    row_number: Optional[int] = Field(default=None, description="Line ordering")

    row_key: Optional[str] = Field(default=None, description="Editor row id at save time")

    location: str = Field(default="")
    product_id: Optional[str] = Field(default=None)
    product_name: str = Field(default="")
    product_family: str = Field(default="", description="Catalog family of the product")
    description: str = Field(default="")
    family: str = Field(default="", description="Line family ('Discount' for discount lines)")
    units: str = Field(default="")

    length: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 6), nullable=True))
    width: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(18, 6), nullable=True))

    net_area: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    wastage: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    total_area: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    quantity: Decimal = Field(default=Decimal("1"), sa_column=_amount_column())
    quantity_area: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    rate: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    unit_price: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    amount: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    tax_amount: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    gross_amount: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    estimated_cost: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    average_cost: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    cost_per_unit: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())
    cost_price: Decimal = Field(default=Decimal("0"), sa_column=_amount_column())

    is_individual_discount: bool = Field(default=False)
    discount_applied_from_row_key: Optional[str] = Field(default=None)
    individual_discount_row_key: Optional[str] = Field(default=None)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Line item creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
