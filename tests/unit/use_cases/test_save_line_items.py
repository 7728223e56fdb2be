"""Unit tests for SaveQuoteLineItems use case

Tests cover:
- Upsert, deletion and quote discount in one transaction
- Row key to persisted id mapping
- Rollback on failure
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.use_cases.quote_lines.dtos import LineItemPayloadDTO, SaveLineItemsCommandDTO
from src.app.use_cases.quote_lines.save_line_items import SaveQuoteLineItems


@pytest.fixture
def mock_line_item_repo():
    """Mock quote line item repository that echoes what it persists"""
    repo = MagicMock()

    async def upsert_many(quote_id, items):
        for item in items:
            if item.row_key == "2":
                item.id = "li-new"
        return items

    repo.upsert_many = AsyncMock(side_effect=upsert_many)
    repo.delete_by_ids = AsyncMock(return_value=1)
    return repo


@pytest.fixture
def mock_quote_repo():
    repo = MagicMock()
    repo.update_discount = AsyncMock()
    return repo


@pytest.fixture
def save_use_case(mock_uow, mock_line_item_repo, mock_quote_repo):
    return SaveQuoteLineItems(
        uow=mock_uow,
        line_item_repo=mock_line_item_repo,
        quote_repo=mock_quote_repo,
    )


@pytest.fixture
def sample_command():
    return SaveLineItemsCommandDTO(
        quote_id="q-1",
        items=[
            LineItemPayloadDTO(
                external_id="li-1", quote_id="q-1", row_key="1", row_number=1,
                product_name="Berber Loop", family="Wall to Wall", gross_amount=Decimal("105"),
            ),
            LineItemPayloadDTO(
                quote_id="q-1", row_key="2", row_number=9999, product_name="Discount (10%)",
                family="Discount", location="Discount", gross_amount=Decimal("-10.50"),
                is_overall_discount=True,
            ),
        ],
        discount_percent=Decimal("10"),
        discount_amount=Decimal("10.50"),
        deleted_ids=["li-old"],
    )


@pytest.mark.asyncio
class TestSaveQuoteLineItemsSuccess:
    """Test successful saves"""

    async def test_save_upserts_deletes_and_commits(
        self, save_use_case, mock_uow, mock_line_item_repo, mock_quote_repo, sample_command
    ):
        """
        Given: One persisted line, one new overall discount line and a ledgered deletion
        When: The save is executed
        Then: Lines are upserted, the deletion applied, the discount stored and committed
        """
        # Act
        result = await save_use_case.execute(sample_command)

        # Assert
        assert result.is_ok()
        assert result.value.saved_count == 2
        assert result.value.deleted_count == 1
        assert result.value.external_ids == {"1": "li-1", "2": "li-new"}

        quote_id, entities = mock_line_item_repo.upsert_many.await_args.args
        assert quote_id == "q-1"
        assert entities[0].id == "li-1"
        assert entities[0].product_family == "Wall to Wall"
        assert entities[1].product_family == ""
        mock_line_item_repo.delete_by_ids.assert_awaited_once_with(["li-old"])
        mock_quote_repo.update_discount.assert_awaited_once_with(
            "q-1", discount_percent=Decimal("10"), discount_amount=Decimal("10.50")
        )
        mock_uow.commit.assert_awaited_once()
        mock_uow.rollback.assert_not_awaited()

    async def test_nothing_to_delete(self, save_use_case, mock_line_item_repo, sample_command):
        command = sample_command.model_copy(update={"deleted_ids": []})

        result = await save_use_case.execute(command)

        assert result.is_ok()
        assert result.value.deleted_count == 0
        mock_line_item_repo.delete_by_ids.assert_not_awaited()


@pytest.mark.asyncio
class TestSaveQuoteLineItemsFailure:
    """Test failure handling"""

    async def test_failure_rolls_back(self, save_use_case, mock_uow, mock_quote_repo, sample_command):
        # Arrange
        mock_quote_repo.update_discount = AsyncMock(side_effect=Exception("disk full"))

        # Act
        result = await save_use_case.execute(sample_command)

        # Assert
        assert result.is_err()
        assert result.error.code == "SAVE_LINE_ITEMS_FAILED"
        assert result.error.message == "Failed to save items"
        assert result.error.reason == "disk full"
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_awaited()
