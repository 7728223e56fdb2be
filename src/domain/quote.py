"""Quote Domain Entity

Parent record of a set of quote line items. Holds the overall discount that
was in effect at the last save.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel


class Quote(BaseModel, table=True):
    """
    Quote - parent of quote line items

    Domain Rules:
    - discount_percent is the overall discount rate (0 = none)
    - discount_amount is the absolute value of the overall discount row gross
    """

    __tablename__ = "quotes"

    id: str = Field(
        sa_column=Column(String(64), primary_key=True),
        description="Quote identifier"
    )

    name: str = Field(
        default="",
        description="Display name of the quote"
    )

    discount_percent: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
        description="Overall discount percentage"
    )

    discount_amount: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False, default=0),
        description="Absolute overall discount amount"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Quote creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )
