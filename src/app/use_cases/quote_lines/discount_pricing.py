"""Discount row pricing

Pure builders for the two discount variants. Shared by the row table, which
refreshes an attached discount when its target enters edit mode, and by the
discount engine.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from src.domain.quote_line_row import (
    DISCOUNT_FAMILY,
    DISCOUNT_LOCATION,
    OVERALL_DISCOUNT_ROW_NUMBER,
    QuoteLineRow,
    RowKind,
    RowMode,
)
from .row_calculator import HUNDRED, round_money

_PERCENT = re.compile(r"(\d+(?:\.\d+)?)%")

DISCOUNTED_FIELDS = ("gross_amount", "rate", "unit_price", "amount", "tax_amount")


@dataclass(frozen=True)
class DiscountBase:
    """Column totals a discount is computed from"""

    gross_amount: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")
    unit_price: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")

    @classmethod
    def of_rows(cls, rows: Iterable[QuoteLineRow]) -> "DiscountBase":
        totals = {name: Decimal("0") for name in DISCOUNTED_FIELDS}
        for row in rows:
            for name in DISCOUNTED_FIELDS:
                totals[name] += getattr(row, name) or Decimal("0")
        return cls(**totals)


def percent_in(text: Optional[str]) -> Optional[Decimal]:
    """First "<n>%" in a label, e.g. "10% Discount" -> 10"""
    if not text:
        return None
    match = _PERCENT.search(text)
    return Decimal(match.group(1)) if match else None


def format_percent(rate: Decimal) -> str:
    """10 -> "10", 12.50 -> "12.5" """
    return format(rate.normalize(), "f")


def negated_share(value: Optional[Decimal], percent: Decimal) -> Decimal:
    return -round_money((value or Decimal("0")) * percent / HUNDRED)


def _discounted_values(base, percent: Decimal) -> dict:
    return {name: negated_share(getattr(base, name), percent) for name in DISCOUNTED_FIELDS}


def eligible_rows(rows: Iterable[QuoteLineRow]) -> list:
    """Rows a discount may be computed from: product rows only"""
    return [row for row in rows if not row.is_discount]


def build_overall_discount_row(
    local_id: int,
    rate: Decimal,
    base: DiscountBase,
    previous: Optional[QuoteLineRow] = None,
) -> QuoteLineRow:
    """
    Build the overall discount row for a rate

    Identity of a previous overall row (local_id, external_id, selection)
    carries over so a rebuild with unchanged inputs is a no-op.
    """
    label = format_percent(rate)
    return QuoteLineRow(
        local_id=previous.local_id if previous else local_id,
        external_id=previous.external_id if previous else None,
        selected=previous.selected if previous else False,
        kind=RowKind.OVERALL_DISCOUNT,
        row_number=OVERALL_DISCOUNT_ROW_NUMBER,
        location=DISCOUNT_LOCATION,
        product_name=f"Discount ({label}%)",
        description=f"{label}% discount on total amount",
        family=DISCOUNT_FAMILY,
        estimate_type=DISCOUNT_FAMILY,
        quantity=Decimal("1"),
        mode=RowMode.READ,
        net_area_disabled=True,
        length_disabled=True,
        wastage_disabled=True,
        product_name_disabled=True,
        **_discounted_values(base, rate),
    )


def price_individual_discount(target: QuoteLineRow, discount_row: QuoteLineRow) -> QuoteLineRow:
    """
    Price an individual discount row against its target's current values

    The discount row is returned unchanged if its name carries no percentage.
    """
    percent = percent_in(discount_row.product_name)
    if percent is None:
        return discount_row
    return discount_row.model_copy(update={
        "kind": RowKind.INDIVIDUAL_DISCOUNT,
        "quantity": Decimal("1"),
        "description": f"{format_percent(percent)}% discount applied to: {target.product_name}",
        "estimate_type": DISCOUNT_FAMILY,
        "mode": RowMode.READ,
        "net_area_disabled": True,
        "length_disabled": True,
        "product_name_disabled": True,
        "discount_applied_from_row_id": target.local_id,
        **_discounted_values(target, percent),
    })


def overall_rate_from_name(name: Optional[str]) -> Optional[Decimal]:
    """Rate encoded in an overall discount row name, e.g. "Discount (10%)" """
    return percent_in(name)
