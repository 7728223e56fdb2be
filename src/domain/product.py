"""Product Domain Entity

Catalog entry offered by the product search.
"""

from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel, generate_uuid


class Product(BaseModel, table=True):
    """
    Product - searchable catalog item

    Domain Rules:
    - primary_sale_unit encodes the unit factor (e.g. "2.5 SqM")
    - Products named like "10% Discount" act as individual discounts
    """

    __tablename__ = "products"
    __table_args__ = (
        Index('ix_products_name', 'name'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        sa_column=Column(String(64), primary_key=True),
        description="Catalog product identifier"
    )

    name: str = Field(description="Product name")

    description: str = Field(default="", description="Product description")

    primary_sale_unit: str = Field(
        default="",
        description="Sale unit label carrying the unit factor"
    )

    width_m: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 6), nullable=True),
        description="Roll/board width in metres"
    )

    family: str = Field(default="", description="Product family / category")

    unit_price: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 6), nullable=True),
        description="Sale price per unit"
    )

    average_cost: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 6), nullable=True),
        description="Average purchase cost"
    )

    cost_price_per_unit: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(18, 6), nullable=True),
        description="Cost price per unit"
    )

    is_active: bool = Field(default=True, description="Offered in search results")
