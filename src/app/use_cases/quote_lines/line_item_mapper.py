"""Mapping between persisted line items and editor rows"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from src.domain.quote_line_row import (
    DECKING_FAMILIES,
    DISCOUNT_LOCATION,
    WALL_TO_WALL_FAMILIES,
    QuoteLineRow,
    RowKind,
    RowMode,
)
from .discount_pricing import overall_rate_from_name
from .dtos import LineItemPayloadDTO, LineItemRecordDTO

logger = logging.getLogger(__name__)


@dataclass
class LoadedRows:
    """Rows rebuilt from persisted records"""

    rows: List[QuoteLineRow]
    overall_rate: Optional[Decimal] = None
    stale_ids: List[str] = field(default_factory=list)


def row_from_record(record: LineItemRecordDTO, local_id: int) -> QuoteLineRow:
    """Map one persisted record to a read-mode row"""
    kind = RowKind.classify(record.family, record.location, record.product_name)
    if record.is_individual_discount and kind == RowKind.PRODUCT:
        kind = RowKind.INDIVIDUAL_DISCOUNT
    is_discount = kind != RowKind.PRODUCT

    return QuoteLineRow(
        local_id=local_id,
        external_id=record.external_id,
        row_number=record.row_number,
        kind=kind,
        location=record.location or "",
        product_name=record.product_name or "",
        product_id=record.product_id,
        description=record.description or "",
        family=record.family or "",
        estimate_type="Discount" if record.location == DISCOUNT_LOCATION or is_discount else "Custom",
        length=record.length,
        width=record.width,
        net_area=record.net_area,
        wastage_percent=record.wastage,
        total_area=record.total_area,
        units=record.units or "",
        unit_price=record.unit_price,
        average_cost=record.average_cost,
        cost_per_unit=record.cost_per_unit,
        quantity=record.quantity,
        quantity_area=record.quantity_area,
        rate=record.rate,
        amount=record.amount,
        tax_amount=record.tax_amount,
        gross_amount=record.gross_amount,
        estimated_cost=record.estimated_cost,
        cost_price=record.cost_price,
        mode=RowMode.READ,
        net_area_disabled=is_discount or record.product_family in WALL_TO_WALL_FAMILIES,
        length_disabled=is_discount or record.product_family in DECKING_FAMILIES,
        wastage_disabled=True,
        product_name_disabled=True,
    )


def rows_from_records(
    records: List[LineItemRecordDTO],
    next_id: Callable[[], int],
) -> LoadedRows:
    """
    Rebuild the editor table from persisted records

    Records are expected in row_number order. Discount pairs are re-linked
    through their persisted row keys, falling back to the row directly
    above. Paired discounts stay right after their targets; the overall
    discount and unpaired discounts move to the end. No records yields a
    single blank edit-mode row.
    """
    if not records:
        return LoadedRows(rows=[QuoteLineRow(local_id=next_id(), mode=RowMode.EDIT)])

    rows = [row_from_record(record, next_id()) for record in records]
    by_key: Dict[str, QuoteLineRow] = {}
    for record, row in zip(records, rows):
        if record.row_key:
            by_key[record.row_key] = row

    links: Dict[int, int] = {}  # target local_id -> discount local_id
    for position, (record, row) in enumerate(zip(records, rows)):
        if not row.is_individual_discount:
            continue
        target = by_key.get(record.discount_applied_from_row_key or "")
        if target is None and position > 0:
            target = rows[position - 1]
        if target is None or target.is_discount or target.local_id in links:
            continue
        links[target.local_id] = row.local_id

    linked_discounts = {discount_id: target_id for target_id, discount_id in links.items()}
    by_id = {row.local_id: row for row in rows}

    def _linked(row: QuoteLineRow) -> QuoteLineRow:
        if row.local_id in links:
            return row.model_copy(update={"individual_discount_row_id": links[row.local_id]})
        if row.local_id in linked_discounts:
            return row.model_copy(update={"discount_applied_from_row_id": linked_discounts[row.local_id]})
        return row

    ordered: List[QuoteLineRow] = []
    orphans: List[QuoteLineRow] = []
    overall: List[QuoteLineRow] = []
    for row in rows:
        if row.is_overall_discount:
            overall.append(row)
        elif row.is_individual_discount:
            if row.local_id not in linked_discounts:
                orphans.append(_linked(row))
        else:
            ordered.append(_linked(row))
            if row.local_id in links:
                ordered.append(_linked(by_id[links[row.local_id]]))

    stale_ids = []
    for extra in overall[1:]:
        logger.warning(f"Dropping duplicate overall discount line {extra.external_id}")
        if extra.external_id:
            stale_ids.append(extra.external_id)

    overall_rate = overall_rate_from_name(overall[0].product_name) if overall else None
    return LoadedRows(
        rows=ordered + orphans + overall[:1],
        overall_rate=overall_rate,
        stale_ids=stale_ids,
    )


def _number(value: Optional[Decimal], default: str = "0") -> Decimal:
    return value if value is not None else Decimal(default)


def _key(local_id: Optional[int]) -> Optional[str]:
    return str(local_id) if local_id is not None else None


def build_payload(rows: List[QuoteLineRow], quote_id: str) -> List[LineItemPayloadDTO]:
    """One save record per row, discount rows included"""
    return [
        LineItemPayloadDTO(
            external_id=row.external_id,
            quote_id=quote_id,
            row_key=str(row.local_id),
            row_number=row.row_number,
            location=row.location,
            product_id=row.product_id,
            product_name=row.product_name,
            description=row.description,
            family=row.family,
            units=row.units,
            length=_number(row.length),
            width=_number(row.width),
            net_area=_number(row.net_area),
            wastage=_number(row.wastage_percent),
            total_area=_number(row.total_area),
            quantity=_number(row.quantity, "1"),
            quantity_area=_number(row.quantity_area),
            rate=_number(row.rate),
            unit_price=_number(row.unit_price),
            amount=_number(row.amount),
            tax_amount=_number(row.tax_amount),
            gross_amount=_number(row.gross_amount),
            estimated_cost=_number(row.estimated_cost),
            average_cost=_number(row.average_cost),
            cost_per_unit=_number(row.cost_per_unit),
            cost_price=_number(row.cost_price),
            is_individual_discount=row.is_individual_discount,
            is_overall_discount=row.is_overall_discount,
            discount_applied_from_row_key=_key(row.discount_applied_from_row_id),
            individual_discount_row_key=_key(row.individual_discount_row_id),
        )
        for row in rows
    ]


def overall_discount_amount(rows: List[QuoteLineRow]) -> Decimal:
    """Sum of absolute gross amounts of overall discount rows"""
    total = Decimal("0")
    for row in rows:
        if row.is_overall_discount and row.gross_amount:
            total += abs(row.gross_amount)
    return total
