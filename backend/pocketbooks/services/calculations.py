"""
Bookkeeping arithmetic.

Pure functions on Decimal values, no database access. Callers convert
request floats with ``to_decimal`` before doing any arithmetic.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, NamedTuple, Tuple

from pocketbooks.models.enums import PaymentStatus, SaleStatus

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def money(value) -> Decimal:
    """Round to two places, half up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_quantity(value) -> str:
    """10.000 -> '10', 2.500 -> '2.5'"""
    return f"{to_decimal(value).normalize():f}"


def payment_status(total_paid, total) -> str:
    """unpaid / partially_paid / fully_paid of ``total_paid`` against ``total``"""
    paid = to_decimal(total_paid)
    if paid <= ZERO:
        return PaymentStatus.UNPAID.value
    if paid >= to_decimal(total):
        return PaymentStatus.FULLY_PAID.value
    return PaymentStatus.PARTIALLY_PAID.value


def remaining_amount(total, total_paid) -> Decimal:
    return max(ZERO, money(to_decimal(total) - to_decimal(total_paid)))


class ProcurementTotals(NamedTuple):
    total_amount: Decimal
    gst_amount: Decimal
    grand_total: Decimal


def line_amount(quantity, unit_price) -> Decimal:
    return money(to_decimal(quantity) * to_decimal(unit_price))


def procurement_totals(lines: Iterable[Tuple], gst_percentage) -> ProcurementTotals:
    """
    Totals for procurement lines given as ``(quantity, unit_price)`` pairs.

    gst_amount = total * gst% / 100, grand_total = total + gst_amount
    """
    total = sum((line_amount(q, p) for q, p in lines), ZERO)
    gst = money(total * to_decimal(gst_percentage) / HUNDRED)
    return ProcurementTotals(money(total), gst, money(total + gst))


class SaleTotals(NamedTuple):
    subtotal: Decimal
    gst_amount: Decimal
    grand_total: Decimal


def sale_totals(lines: Iterable[Tuple], discount, gst_percentage) -> SaleTotals:
    """
    Totals for sale lines given as ``(quantity, unit_price)`` pairs.

    GST is charged on the discounted amount:
    gst_amount = (subtotal - discount) * gst% / 100
    grand_total = subtotal - discount + gst_amount
    """
    subtotal = sum((line_amount(q, p) for q, p in lines), ZERO)
    taxable = max(ZERO, subtotal - to_decimal(discount))
    gst = money(taxable * to_decimal(gst_percentage) / HUNDRED)
    return SaleTotals(money(subtotal), gst, money(taxable + gst))


def sale_status(current_status: str, total_paid, grand_total) -> str:
    """Sale status follows its payments unless the sale is cancelled."""
    if current_status == SaleStatus.CANCELLED.value:
        return current_status
    status = payment_status(total_paid, grand_total)
    if status == PaymentStatus.FULLY_PAID.value:
        return SaleStatus.COMPLETED.value
    if status == PaymentStatus.PARTIALLY_PAID.value:
        return SaleStatus.PARTIALLY_PAID.value
    return SaleStatus.PENDING.value


def weighted_average_cost(current_stock, current_cost, quantity, unit_price) -> Decimal:
    """
    Cost per unit after receiving ``quantity`` at ``unit_price``:
    (stock * cost + qty * unit_price) / (stock + qty)
    """
    stock = to_decimal(current_stock)
    qty = to_decimal(quantity)
    total_qty = stock + qty
    if total_qty <= ZERO:
        return to_decimal(unit_price)
    return (stock * to_decimal(current_cost) + qty * to_decimal(unit_price)) / total_qty


def reverse_weighted_average_cost(current_stock, current_cost, quantity, unit_price):
    """
    Undo ``weighted_average_cost`` for a receipt being taken back out.

    Returns ``(previous_stock, previous_cost)``. Stock is floored at zero;
    the cost is only restored when the previous stock stays positive and the
    recovered cost is positive, otherwise the current cost is kept.
    """
    stock = to_decimal(current_stock)
    cost = to_decimal(current_cost)
    qty = to_decimal(quantity)
    previous_stock = stock - qty
    if previous_stock <= ZERO:
        return ZERO, cost
    previous_cost = (cost * stock - qty * to_decimal(unit_price)) / previous_stock
    if previous_cost <= ZERO:
        return previous_stock, cost
    return previous_stock, previous_cost


def profit_margin(cost_price, selling_price) -> float:
    """(selling - cost) / cost * 100, 0 when cost is 0"""
    cost = to_decimal(cost_price)
    if cost <= ZERO:
        return 0.0
    return float(round((to_decimal(selling_price) - cost) / cost * HUNDRED, 2))


def depreciation(purchase_price, current_value) -> Decimal:
    return max(ZERO, to_decimal(purchase_price) - to_decimal(current_value))


def bill_of_materials_cost(components: Iterable[Tuple]) -> Decimal:
    """Sum of ``quantity_required * cost_price`` over ``(quantity, cost)`` pairs"""
    return sum((to_decimal(q) * to_decimal(c) for q, c in components), ZERO)
