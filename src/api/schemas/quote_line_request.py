"""Request schemas for Quote Line API

Pydantic models for validating incoming HTTP requests.
"""

from decimal import Decimal
from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator

from src.app.use_cases.quote_lines.row_calculator import FIELD_ATTRIBUTES, RowField


class RowIndexSchema(BaseModel):
    """
    Request schema addressing one row by position

    Used for select, toggle-edit, cancel and remove. Omitting the index
    targets the currently selected row.
    """

    index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Row position (defaults to the selected row)"
    )


class InsertRowSchema(BaseModel):
    """Request schema for POST .../lines/insert"""

    after_index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Insert after this position (defaults to the selected row)"
    )


class UpdateFieldSchema(BaseModel):
    """
    Request schema for editing one field of a row

    Used for PATCH .../lines/{local_id}. Numeric fields accept numbers or
    numeric strings; unparseable values clear the field.
    """

    field: RowField = Field(..., description="Field to change")

    value: Optional[Union[Decimal, str]] = Field(
        default=None,
        description="New raw value"
    )

    @field_validator('field')
    @classmethod
    def validate_field(cls, v):
        """Only user-editable fields are accepted"""
        if v not in FIELD_ATTRIBUTES:
            raise ValueError(f"Field '{v.value}' cannot be edited")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "field": "length",
                "value": "4"
            }
        }


class OverallDiscountSchema(BaseModel):
    """Request schema for PUT .../discount; empty or 0 removes the discount"""

    rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Overall discount percentage"
    )


class SearchSchema(BaseModel):
    """Request schema for POST .../lines/{local_id}/search"""

    term: str = Field(default="", description="Search text typed into the product field")


class SelectProductSchema(BaseModel):
    """Request schema for POST .../lines/select-product"""

    index: int = Field(..., ge=0, description="Row position receiving the product")

    product_id: str = Field(..., min_length=1, description="Catalog product identifier")


class SuggestionsSchema(BaseModel):
    """Request schema for PUT .../lines/{local_id}/suggestions"""

    visible: bool = Field(..., description="Show or hide the suggestion list")
