"""LoadQuoteLineItems Use Case

Loads the persisted line items of a quote for editing.
"""

from libs.result import Result, Return, Error
from src.app.repositories.quote_line_item_repository import QuoteLineItemRepository
from src.domain.quote_line_item import QuoteLineItem
from .dtos import LineItemRecordDTO, LoadedLineItemsDTO


class LoadQuoteLineItems:
    """
    Use Case: Load the line items of a quote

    Business Rules:
    1. Records are returned in row_number order (unnumbered lines last)
    2. A quote without lines is not an error; it yields no records
    """

    def __init__(self, line_item_repo: QuoteLineItemRepository):
        self.line_item_repo = line_item_repo

    async def execute(self, quote_id: str) -> Result[LoadedLineItemsDTO]:
        """
        Execute line item loading

        Args:
            quote_id: Parent quote identifier

        Returns:
            Result[LoadedLineItemsDTO]: Persisted records or error
        """
        try:
            items = await self.line_item_repo.get_by_quote_id(quote_id)
            ordered = sorted(
                items,
                key=lambda item: (item.row_number is None, item.row_number or 0),
            )
            return Return.ok(
                LoadedLineItemsDTO(
                    quote_id=quote_id,
                    records=[self._to_record_dto(item) for item in ordered],
                )
            )
        except Exception as e:
            return Return.err(
                Error(
                    code="LOAD_LINE_ITEMS_FAILED",
                    message="Failed to load items",
                    reason=str(e),
                )
            )

    def _to_record_dto(self, item: QuoteLineItem) -> LineItemRecordDTO:
        return LineItemRecordDTO(
            external_id=item.id,
            quote_id=item.quote_id,
            row_number=item.row_number,
            row_key=item.row_key,
            location=item.location,
            product_id=item.product_id,
            product_name=item.product_name,
            product_family=item.product_family,
            description=item.description,
            family=item.family,
            units=item.units,
            length=item.length,
            width=item.width,
            net_area=item.net_area,
            wastage=item.wastage,
            total_area=item.total_area,
            quantity=item.quantity,
            quantity_area=item.quantity_area,
            rate=item.rate,
            unit_price=item.unit_price,
            amount=item.amount,
            tax_amount=item.tax_amount,
            gross_amount=item.gross_amount,
            estimated_cost=item.estimated_cost,
            average_cost=item.average_cost,
            cost_per_unit=item.cost_per_unit,
            cost_price=item.cost_price,
            is_individual_discount=item.is_individual_discount,
            discount_applied_from_row_key=item.discount_applied_from_row_key,
            individual_discount_row_key=item.individual_discount_row_key,
        )
