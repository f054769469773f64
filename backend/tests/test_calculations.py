"""Tests for the money, stock and payment arithmetic."""
from decimal import Decimal

import pytest

from pocketbooks.services.calculations import (
    bill_of_materials_cost,
    depreciation,
    format_quantity,
    money,
    payment_status,
    procurement_totals,
    profit_margin,
    remaining_amount,
    reverse_weighted_average_cost,
    sale_status,
    sale_totals,
    weighted_average_cost,
)


class TestMoney:
    """Rounding to two decimal places"""

    def test_rounds_half_up(self):
        assert money("2.345") == Decimal("2.35")
        assert money(0.125) == Decimal("0.13")

    def test_remaining_never_negative(self):
        assert remaining_amount(100, 150) == Decimal("0.00")
        assert remaining_amount(100, 40) == Decimal("60.00")


class TestPaymentStatus:
    @pytest.mark.parametrize(
        "paid,total,expected",
        [
            (0, 100, "unpaid"),
            (40, 100, "partially_paid"),
            (100, 100, "fully_paid"),
            (120, 100, "fully_paid"),
        ],
    )
    def test_status_follows_paid_amount(self, paid, total, expected):
        assert payment_status(paid, total) == expected

    def test_sale_status(self):
        assert sale_status("pending", 0, 100) == "pending"
        assert sale_status("pending", 30, 100) == "partially_paid"
        assert sale_status("partially_paid", 100, 100) == "completed"

    def test_cancelled_sale_stays_cancelled(self):
        assert sale_status("cancelled", 100, 100) == "cancelled"


class TestTotals:
    def test_procurement_totals(self):
        totals = procurement_totals([(10, 7), (2, 5.5)], 10)
        assert totals.total_amount == Decimal("81.00")
        assert totals.gst_amount == Decimal("8.10")
        assert totals.grand_total == Decimal("89.10")

    def test_sale_gst_is_charged_after_discount(self):
        totals = sale_totals([(3, 100)], 50, 18)
        assert totals.subtotal == Decimal("300.00")
        assert totals.gst_amount == Decimal("45.00")
        assert totals.grand_total == Decimal("295.00")

    def test_bill_of_materials_cost(self):
        assert bill_of_materials_cost([(2, 5), (0.5, 12)]) == Decimal("16.00")


class TestWeightedAverageCost:
    def test_blends_old_and_new_cost(self):
        assert weighted_average_cost(10, 5, 10, 7) == Decimal("6")

    def test_empty_stock_takes_new_price(self):
        assert weighted_average_cost(0, 0, 5, 9) == Decimal("9")

    def test_reverse_restores_previous_cost(self):
        stock, cost = reverse_weighted_average_cost(20, 6, 10, 7)
        assert stock == Decimal("10")
        assert cost == Decimal("5")

    def test_reverse_to_empty_stock_keeps_cost(self):
        stock, cost = reverse_weighted_average_cost(10, 7, 10, 7)
        assert stock == 0
        assert cost == Decimal("7")


class TestMargins:
    def test_profit_margin(self):
        assert profit_margin(100, 125) == 25.0
        assert profit_margin(0, 125) == 0

    def test_depreciation_never_negative(self):
        assert depreciation(1000, 800) == Decimal("200")
        assert depreciation(1000, 1200) == 0


class TestFormatQuantity:
    def test_trailing_zeros_dropped_without_exponent(self):
        assert format_quantity(Decimal("10.000")) == "10"
        assert format_quantity(Decimal("2.500")) == "2.5"
        assert format_quantity(11.0) == "11"
