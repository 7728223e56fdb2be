"""Unit tests for the row calculator

Tests cover:
- Area, quantity and pricing derivation
- Two-decimal rounding and the 5% tax
- Coercion of malformed input
- Family-driven field enablement
"""

from decimal import Decimal

import pytest

from src.app.use_cases.quote_lines.row_calculator import (
    RowField,
    apply_family_rules,
    apply_field_change,
    discount_inputs_changed,
    recompute,
    round_money,
    to_decimal,
    unit_factor,
)
from src.domain.quote_line_row import QuoteLineRow


class TestUnitFactor:
    """Test parsing of the leading factor of a units label"""

    @pytest.mark.parametrize(
        "units, expected",
        [
            ("2.5 units", Decimal("2.5")),
            ("2 sqm", Decimal("2")),
            ("4SqM", Decimal("4")),
            ("SqM", Decimal("1")),
            ("", Decimal("1")),
            (None, Decimal("1")),
            ("0 sqm", Decimal("1")),
        ],
    )
    def test_unit_factor(self, units, expected):
        assert unit_factor(units) == expected


class TestToDecimal:
    """Test coercion of raw values"""

    def test_parses_numeric_strings(self):
        assert to_decimal(" 1.5 ") == Decimal("1.5")
        assert to_decimal(3) == Decimal("3")

    def test_malformed_values_yield_default(self):
        assert to_decimal("abc") is None
        assert to_decimal("") is None
        assert to_decimal("NaN") is None
        assert to_decimal("Infinity", Decimal("0")) == Decimal("0")
        assert to_decimal(True) is None


class TestAreaAndQuantity:
    """Test area and quantity derivation"""

    def test_dimensions_wastage_and_units_scenario(self):
        """
        Given: length 4, wastage 10% and units "2 sqm"
        When: width 2.5 is entered
        Then: net area 10, total area 11, quantity 6 and quantity area 12
        """
        # Arrange
        row = QuoteLineRow(
            local_id=1,
            length=Decimal("4"),
            wastage_percent=Decimal("10"),
            units="2 sqm",
        )

        # Act
        updated = apply_field_change(row, RowField.WIDTH, "2.5")

        # Assert
        assert updated.net_area == Decimal("10")
        assert updated.total_area == Decimal("11")
        assert updated.quantity == Decimal("6")
        assert updated.quantity_area == Decimal("12")
        assert not updated.wastage_disabled

    def test_net_area_change_does_not_recalculate_from_dimensions(self):
        row = QuoteLineRow(local_id=1, length=Decimal("4"), width=Decimal("2"))

        updated = apply_field_change(row, RowField.NET_AREA, "5")

        assert updated.net_area == Decimal("5")
        assert updated.total_area == Decimal("5")

    def test_width_substitutes_for_missing_units(self):
        row = QuoteLineRow(local_id=1, width=Decimal("4"))

        updated = apply_field_change(row, RowField.NET_AREA, "10")

        assert updated.quantity == Decimal("3")
        assert updated.quantity_area == Decimal("12")

    def test_recompute_returns_new_row(self):
        row = QuoteLineRow(local_id=1, length=Decimal("2"), width=Decimal("2"))

        updated = recompute(row, RowField.LENGTH)

        assert updated is not row
        assert row.net_area is None
        assert updated.net_area == Decimal("4")


class TestPricing:
    """Test rate, amount, tax and gross derivation"""

    def test_unit_price_with_area_scenario(self):
        """
        Given: units "2.5 SqM" and unit price 10
        When: net area 10 is entered
        Then: quantity 4, rate 25, amount 100.00, tax 5.00, gross 105.00
        """
        # Arrange
        row = QuoteLineRow(local_id=1, units="2.5 SqM", unit_price=Decimal("10"))

        # Act
        updated = apply_field_change(row, RowField.NET_AREA, "10")

        # Assert
        assert updated.quantity == Decimal("4")
        assert updated.rate == Decimal("25.00")
        assert updated.amount == Decimal("100.00")
        assert updated.tax_amount == Decimal("5.00")
        assert updated.gross_amount == Decimal("105.00")
        assert updated.estimate_type == "Custom"

    def test_gross_and_tax_are_rounded_from_amount(self):
        row = QuoteLineRow(local_id=1, rate=Decimal("33.33"))

        updated = apply_field_change(row, RowField.QUANTITY, "3")

        assert updated.amount == Decimal("99.99")
        assert updated.tax_amount == round_money(updated.amount * Decimal("0.05"))
        assert updated.gross_amount == round_money(updated.amount * Decimal("1.05"))
        assert updated.gross_amount == Decimal("104.99")

    def test_quantity_change_defaults_units(self):
        row = QuoteLineRow(local_id=1)

        updated = apply_field_change(row, RowField.QUANTITY, "2")

        assert updated.units == "SqM"

    def test_costs(self):
        row = QuoteLineRow(
            local_id=1,
            units="2 SqM",
            average_cost=Decimal("7"),
            cost_per_unit=Decimal("3"),
        )

        updated = apply_field_change(row, RowField.QUANTITY, "5")

        assert updated.estimated_cost == Decimal("35.00")
        assert updated.cost_price == Decimal("6")


class TestMalformedInput:
    """The calculator never raises on bad input"""

    def test_unparseable_number_clears_the_field(self):
        row = QuoteLineRow(local_id=1, length=Decimal("4"), width=Decimal("2"))

        updated = apply_field_change(row, RowField.LENGTH, "four")

        assert updated.length is None
        assert updated.total_area == Decimal("0")

    def test_text_fields_are_kept_as_text(self):
        row = QuoteLineRow(local_id=1)

        updated = apply_field_change(row, RowField.LOCATION, 12)

        assert updated.location == "12"


class TestFamilyRules:
    """Test family-driven field enablement"""

    def test_wall_to_wall_disables_net_area(self):
        row = apply_family_rules(QuoteLineRow(local_id=1, family="Wall to Wall"))

        assert row.net_area_disabled
        assert not row.length_disabled

    def test_decking_disables_length(self):
        row = apply_family_rules(QuoteLineRow(local_id=1, family="F. DECKING"))

        assert row.length_disabled
        assert not row.net_area_disabled


class TestDiscountInputsChanged:
    def test_detects_amount_changes(self):
        before = QuoteLineRow(local_id=1, amount=Decimal("10"))
        after = before.model_copy(update={"amount": Decimal("11")})

        assert discount_inputs_changed(before, after)

    def test_ignores_geometry_only_changes(self):
        before = QuoteLineRow(local_id=1)
        after = before.model_copy(update={"location": "Hall"})

        assert not discount_inputs_changed(before, after)
