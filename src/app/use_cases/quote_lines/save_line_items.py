"""SaveQuoteLineItems Use Case

Persists the editor table of a quote in one unit of work.
"""

from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.quote_line_item_repository import QuoteLineItemRepository
from src.app.repositories.quote_repository import QuoteRepository
from src.domain.quote_line_item import QuoteLineItem
from .dtos import LineItemPayloadDTO, SaveLineItemsCommandDTO, SaveResultDTO


class SaveQuoteLineItems:
    """
    Use Case: Save the line items of a quote

    Business Rules:
    1. Lines with an external id are updated, all others inserted
    2. Ledgered deletions are applied in the same transaction
    3. The quote stores the overall discount percent and absolute amount
    4. Any failure rolls back everything

    Flow:
    1. Upsert line items
    2. Delete ledgered line items
    3. Update quote discount
    4. Commit transaction
    5. Return row_key -> external id mapping
    """

    def __init__(
        self,
        uow: UnitOfWork,
        line_item_repo: QuoteLineItemRepository,
        quote_repo: QuoteRepository,
    ):
        self.uow = uow
        self.line_item_repo = line_item_repo
        self.quote_repo = quote_repo

    async def execute(self, command: SaveLineItemsCommandDTO) -> Result[SaveResultDTO]:
        """
        Execute line item save

        Args:
            command: SaveLineItemsCommandDTO with payload, discount and deletions

        Returns:
            Result[SaveResultDTO]: Saved counts and issued ids, or error
        """
        try:
            # Step 1: Upsert line items
            entities = [self._to_entity(item) for item in command.items]
            saved = await self.line_item_repo.upsert_many(command.quote_id, entities)

            # Step 2: Delete ledgered line items
            deleted_count = 0
            if command.deleted_ids:
                deleted_count = await self.line_item_repo.delete_by_ids(command.deleted_ids)

            # Step 3: Store overall discount on the quote
            await self.quote_repo.update_discount(
                command.quote_id,
                discount_percent=command.discount_percent,
                discount_amount=command.discount_amount,
            )

            # Step 4: Commit transaction
            await self.uow.commit()

            return Return.ok(
                SaveResultDTO(
                    quote_id=command.quote_id,
                    saved_count=len(saved),
                    deleted_count=deleted_count,
                    external_ids={item.row_key: item.id for item in saved if item.row_key},
                )
            )

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="SAVE_LINE_ITEMS_FAILED",
                    message="Failed to save items",
                    reason=str(e),
                )
            )

    def _to_entity(self, item: LineItemPayloadDTO) -> QuoteLineItem:
        values = item.model_dump(exclude={"external_id", "is_overall_discount"})
        is_discount = item.is_overall_discount or item.is_individual_discount
        values["product_family"] = "" if is_discount else item.family
        entity = QuoteLineItem(**values)
        if item.external_id:
            entity.id = item.external_id
        return entity
