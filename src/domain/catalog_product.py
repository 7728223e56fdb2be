"""Catalog Product Value Object

Candidate product returned by the catalog search.
"""

from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class CatalogProduct(BaseModel):
    """
    Catalog Product - read-only view of a sellable product

    Carries everything a quote line row needs when the product is selected.
    """

    id: str = Field(..., description="Catalog product identifier")
    name: str = Field(..., description="Display name")
    description: str = Field(default="", description="Product description")
    unit_label: str = Field(default="", description="Sale unit label (e.g. '2.5 SqM')")
    width: Optional[Decimal] = Field(default=None, description="Numeric width factor")
    family: str = Field(default="", description="Product family / category")
    unit_price: Optional[Decimal] = Field(default=None, description="Price per unit")
    average_cost: Optional[Decimal] = Field(default=None, description="Average cost")
    cost_per_unit: Optional[Decimal] = Field(default=None, description="Cost price per unit")

    class Config:
        json_schema_extra = {
            "example": {
                "id": "01t000000000001",
                "name": "Berber Loop Carpet",
                "description": "Loop pile carpet, 4m roll",
                "unit_label": "4 SqM",
                "width": "4.00",
                "family": "Wall to Wall",
                "unit_price": "35.00",
                "average_cost": "21.50",
                "cost_per_unit": "19.00",
            }
        }
