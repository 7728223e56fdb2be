"""Derived-field calculator for quote line rows

Pure functions: every call returns a new row and never raises. Malformed
numeric input is coerced to a default instead of failing the recompute.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_CEILING, ROUND_HALF_UP
from enum import Enum
from typing import Any, Optional

from src.domain.quote_line_row import (
    BASE_UNIT_LABEL,
    DECKING_FAMILIES,
    TAX_RATE,
    WALL_TO_WALL_FAMILIES,
    QuoteLineRow,
)


class RowField(str, Enum):
    """Change tags accepted by recompute"""
    LOCATION = "location"
    DESCRIPTION = "description"
    LENGTH = "length"
    WIDTH = "width"
    NET_AREA = "net_area"
    WASTAGE = "wastage"
    UNITS = "units"
    UNIT_PRICE = "unit_price"
    QUANTITY = "quantity"
    RATE = "rate"
    AMOUNT = "amount"
    GROSS_AMOUNT = "gross_amount"
    AVERAGE_COST = "average_cost"
    COST_PER_UNIT = "cost_per_unit"
    SELECTION = "selection"


# Change tag -> QuoteLineRow attribute, for fields a user may type into
FIELD_ATTRIBUTES = {
    RowField.LOCATION: "location",
    RowField.DESCRIPTION: "description",
    RowField.LENGTH: "length",
    RowField.WIDTH: "width",
    RowField.NET_AREA: "net_area",
    RowField.WASTAGE: "wastage_percent",
    RowField.UNITS: "units",
    RowField.UNIT_PRICE: "unit_price",
    RowField.QUANTITY: "quantity",
    RowField.RATE: "rate",
    RowField.AMOUNT: "amount",
    RowField.GROSS_AMOUNT: "gross_amount",
    RowField.AVERAGE_COST: "average_cost",
    RowField.COST_PER_UNIT: "cost_per_unit",
}

TEXT_FIELDS = {RowField.LOCATION, RowField.DESCRIPTION, RowField.UNITS}

AREA_TRIGGERS = {RowField.NET_AREA, RowField.WASTAGE, RowField.LENGTH, RowField.WIDTH}
DIMENSION_TRIGGERS = {RowField.LENGTH, RowField.WIDTH}

# Edits to these values invalidate the discount rows
DISCOUNT_SENSITIVE_FIELDS = {
    RowField.AMOUNT,
    RowField.GROSS_AMOUNT,
    RowField.QUANTITY,
    RowField.RATE,
    RowField.UNIT_PRICE,
}

ROUNDED_FIELDS = (
    "total_area",
    "rate",
    "amount",
    "tax_amount",
    "gross_amount",
    "estimated_cost",
    "quantity_area",
)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ONE = Decimal("1")

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def to_decimal(value: Any, default: Optional[Decimal] = None) -> Optional[Decimal]:
    """
    Coerce user input to Decimal

    Empty, missing, non-numeric and non-finite values yield default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value if value.is_finite() else default
    text = str(value).strip()
    if not text:
        return default
    try:
        parsed = Decimal(text)
    except (InvalidOperation, ValueError):
        return default
    return parsed if parsed.is_finite() else default


def round_money(value: Decimal) -> Decimal:
    """Round to exactly two decimal places"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def unit_factor(units: Optional[str]) -> Decimal:
    """
    Leading numeric factor of a units label

    "2.5 units" -> 2.5; a label without a positive leading number -> 1.
    """
    if not units:
        return ONE
    match = _LEADING_NUMBER.match(str(units))
    if not match:
        return ONE
    factor = Decimal(match.group(1))
    return factor if factor > 0 else ONE


def _effective_factor(row: QuoteLineRow) -> Optional[Decimal]:
    # units take precedence; width substitutes only when units are empty
    if row.units:
        return unit_factor(row.units)
    if row.width is not None and row.width > 0:
        return row.width
    return None


def total_area_of(net_area: Optional[Decimal], wastage: Optional[Decimal]) -> Decimal:
    if net_area is None:
        return Decimal("0")
    waste = wastage or Decimal("0")
    return net_area + (net_area * waste / HUNDRED)


def _calculate_area(row: QuoteLineRow, changed: RowField) -> None:
    if changed in DIMENSION_TRIGGERS and row.length is not None and row.width is not None:
        row.net_area = row.length * row.width
    row.total_area = total_area_of(row.net_area, row.wastage_percent)


def _calculate_quantities(row: QuoteLineRow) -> None:
    factor = _effective_factor(row)
    if row.total_area and factor:
        row.quantity = (row.total_area / factor).to_integral_value(rounding=ROUND_CEILING)
        row.quantity_area = row.quantity * factor


def _calculate_pricing(row: QuoteLineRow) -> None:
    unit_price = row.unit_price or Decimal("0")
    if unit_price > 0:
        factor = _effective_factor(row)
        if factor:
            row.rate = unit_price * factor

    if row.quantity_area and unit_price:
        row.amount = round_money(row.quantity_area * unit_price)
    elif row.quantity and row.rate:
        row.amount = round_money(row.quantity * row.rate)

    if row.amount is not None:
        amount = round_money(row.amount)
        row.amount = amount
        row.tax_amount = amount * TAX_RATE
        row.gross_amount = amount * (ONE + TAX_RATE)


def _calculate_costs(row: QuoteLineRow) -> None:
    if row.average_cost and row.quantity:
        row.estimated_cost = row.average_cost * row.quantity

    if row.cost_per_unit:
        if row.width:
            row.cost_price = row.width * row.cost_per_unit
        elif row.units:
            row.cost_price = unit_factor(row.units) * row.cost_per_unit

    if row.rate and row.quantity:
        row.estimate_type = "Custom"


def _format_numbers(row: QuoteLineRow) -> None:
    for name in ROUNDED_FIELDS:
        value = getattr(row, name)
        if value is not None:
            setattr(row, name, round_money(value))


def _update_field_states(row: QuoteLineRow, changed: RowField) -> None:
    if changed == RowField.QUANTITY and not row.units:
        row.units = BASE_UNIT_LABEL

    if changed != RowField.LENGTH and row.total_area:
        row.wastage_disabled = False
    elif not row.total_area:
        row.wastage_disabled = True


def recompute(row: QuoteLineRow, changed_field: RowField) -> QuoteLineRow:
    """
    Recompute every field derived from the row's current inputs

    Args:
        row: Row whose inputs were just changed
        changed_field: Tag of the field that changed

    Returns:
        New row with derived fields, rounding and enablement flags updated
    """
    changed = RowField(changed_field)
    updated = row.model_copy(deep=True)

    if changed in AREA_TRIGGERS:
        _calculate_area(updated, changed)

    _calculate_quantities(updated)
    _calculate_pricing(updated)
    _calculate_costs(updated)
    _format_numbers(updated)
    _update_field_states(updated, changed)
    return updated


def apply_field_change(row: QuoteLineRow, field: RowField, raw_value: Any) -> QuoteLineRow:
    """
    Write a raw UI value into a row and recompute

    Text fields are stored as strings; numeric fields are coerced, with
    unparseable input clearing the field.
    """
    changed = RowField(field)
    attribute = FIELD_ATTRIBUTES[changed]
    if changed in TEXT_FIELDS:
        value = "" if raw_value is None else str(raw_value)
    else:
        value = to_decimal(raw_value)
    return recompute(row.model_copy(update={attribute: value}), changed)


def apply_family_rules(row: QuoteLineRow) -> QuoteLineRow:
    """Derive field-enablement flags from the row's product family"""
    return row.model_copy(update={
        "net_area_disabled": row.family in WALL_TO_WALL_FAMILIES,
        "length_disabled": row.family in DECKING_FAMILIES,
    })


def discount_inputs_changed(before: QuoteLineRow, after: QuoteLineRow) -> bool:
    """True if any value feeding a discount differs between two row versions"""
    for field in DISCOUNT_SENSITIVE_FIELDS:
        attribute = FIELD_ATTRIBUTES[field]
        if getattr(before, attribute) != getattr(after, attribute):
            return True
    return False
