"""Unit tests for DiscountEngine

Tests cover:
- Overall discount creation, removal and the empty-base rejection
- Individual discount attachment and the consecutive-discount rule
- Resync idempotency and coalescing
"""

from decimal import Decimal

import pytest

from src.app.use_cases.quote_lines.discount_engine import DiscountEngine
from src.domain.notification import Severity
from src.domain.quote_line_row import QuoteLineRow
from tests.fakes import discount_row, priced_row


@pytest.fixture
def engine(table, notifications, scheduler):
    return DiscountEngine(table, notifications, scheduler, resync_delay_seconds=0.1)


def _three_rows(table):
    table.reset([
        priced_row(table, "A", "100"),
        priced_row(table, "B", "200"),
        priced_row(table, "C", "50"),
    ])


class TestOverallDiscount:
    """Test the overall discount rate"""

    def test_scenario_ten_percent_of_three_rows(self, engine, table, notifications):
        """
        Given: Product rows with gross 100, 200 and 50
        When: An overall rate of 10 is set
        Then: A single last discount row with gross -35.00 exists
        """
        # Arrange
        _three_rows(table)

        # Act
        applied = engine.set_overall_rate("10")

        # Assert
        assert applied is True
        overall = [row for row in table.rows if row.is_overall_discount]
        assert len(overall) == 1
        assert table.rows[-1].is_overall_discount
        assert overall[0].gross_amount == Decimal("-35.00")
        assert engine.overall_rate == Decimal("10")
        assert notifications.messages(Severity.SUCCESS) == ["10% overall discount applied successfully!"]

    def test_changing_rate_replaces_the_row(self, engine, table):
        _three_rows(table)
        engine.set_overall_rate(10)

        engine.set_overall_rate(20)

        overall = [row for row in table.rows if row.is_overall_discount]
        assert len(overall) == 1
        assert overall[0].gross_amount == Decimal("-70.00")
        assert overall[0].product_name == "Discount (20%)"

    def test_empty_base_is_rejected(self, engine, table, notifications):
        """
        Given: No row carries a gross amount
        When: An overall rate is set
        Then: A warning is sent and no discount row is created
        """
        # Arrange
        table.reset([QuoteLineRow(local_id=table.next_id())])

        # Act
        applied = engine.set_overall_rate("10")

        # Assert
        assert applied is False
        assert table.overall_discount_index() == -1
        assert engine.overall_rate is None
        assert notifications.messages(Severity.WARNING) == [
            "No items available to apply discount. Please add items first."
        ]

    @pytest.mark.parametrize("rate", ["", None, "0", 0])
    def test_clearing_the_rate_removes_the_row(self, engine, table, rate):
        _three_rows(table)
        engine.set_overall_rate(10)
        table.update_row(table.rows[-1].model_copy(update={"external_id": "li-overall"}))

        engine.set_overall_rate(rate)

        assert table.overall_discount_index() == -1
        assert engine.overall_rate is None
        assert table.deleted_ids == ["li-overall"]

    def test_empty_base_on_resync_drops_row_but_keeps_rate(self, engine, table):
        table.reset([priced_row(table, "A", "100")])
        engine.set_overall_rate(10)
        table.update_row(table.rows[0].model_copy(update={"gross_amount": None}))

        engine.resync()

        assert table.overall_discount_index() == -1
        assert engine.overall_rate == Decimal("10")


class TestIndividualDiscount:
    """Test attaching individual discounts"""

    def test_attach_prices_and_links_both_rows(self, engine, table, notifications):
        # Arrange
        product = priced_row(table, "Berber Loop", "105")
        discount = discount_row(table, "10% Discount")
        table.reset([product, discount])

        # Act
        attached = engine.apply_individual_discount(product.local_id, discount.local_id)

        # Assert
        assert attached is True
        assert table.rows[0].individual_discount_row_id == discount.local_id
        assert table.rows[1].discount_applied_from_row_id == product.local_id
        assert table.rows[1].gross_amount == Decimal("-10.50")
        assert notifications.messages(Severity.SUCCESS) == [
            "10% individual discount applied to Berber Loop!"
        ]

    def test_discount_target_is_rejected(self, engine, table, notifications):
        first = discount_row(table, "10% Discount")
        second = discount_row(table, "5% Discount")
        table.reset([first, second])
        before = list(table.rows)

        attached = engine.apply_individual_discount(first.local_id, second.local_id)

        assert attached is False
        assert table.rows == before
        assert notifications.messages(Severity.ERROR) == ["Cannot apply consecutive discounts."]

    def test_missing_rows_are_skipped(self, engine, table):
        table.reset([priced_row(table, "A", "105")])

        assert engine.apply_individual_discount(table.rows[0].local_id, 999) is False

    def test_is_consecutive(self, engine, table):
        product = priced_row(table, "A", "105")
        discount = discount_row(table, discount_applied_from_row_id=product.local_id)
        table.reset([product, discount, QuoteLineRow(local_id=table.next_id())])

        assert engine.is_consecutive(2)
        assert engine.is_consecutive(0)


class TestResync:
    """Test resynchronisation"""

    def test_resync_is_idempotent(self, engine, table):
        # Arrange
        product = priced_row(table, "A", "105")
        discount = discount_row(table, "10% Discount")
        table.reset([product, discount, priced_row(table, "B", "210")])
        engine.apply_individual_discount(product.local_id, discount.local_id)
        engine.set_overall_rate(10)

        # Act
        engine.resync()
        first = list(table.rows)
        engine.resync()

        # Assert
        assert table.rows == first

    def test_overall_base_excludes_individual_discounts(self, engine, table):
        product = priced_row(table, "A", "105")
        discount = discount_row(table, "10% Discount")
        table.reset([product, discount])
        engine.apply_individual_discount(product.local_id, discount.local_id)

        engine.set_overall_rate(10)

        assert table.rows[-1].gross_amount == Decimal("-10.50")

    def test_resync_follows_target_changes(self, engine, table):
        product = priced_row(table, "A", "105")
        discount = discount_row(table, "10% Discount")
        table.reset([product, discount])
        engine.apply_individual_discount(product.local_id, discount.local_id)
        engine.set_overall_rate(10)
        table.update_row(table.rows[0].model_copy(update={
            "amount": Decimal("200.00"),
            "tax_amount": Decimal("10.00"),
            "gross_amount": Decimal("210.00"),
        }))

        engine.resync()

        assert table.rows[1].gross_amount == Decimal("-21.00")
        assert table.rows[-1].gross_amount == Decimal("-21.00")

    @pytest.mark.asyncio
    async def test_schedule_resync_coalesces(self, engine, table, scheduler):
        _three_rows(table)
        engine.overall_rate = Decimal("10")

        engine.schedule_resync()
        engine.schedule_resync()
        ran = await scheduler.run_pending()

        assert ran == 1
        assert scheduler.tasks[0].cancelled
        assert scheduler.tasks[1].delay_seconds == 0.1
        assert table.rows[-1].gross_amount == Decimal("-35.00")
