"""Recommended selling prices and marketplace fee/profit figures.

All money is handled as Decimal and only rounded when a breakdown is
produced for display.
"""
from decimal import Decimal
from src.numeric import to_decimal, money
from user.exceptions import ValidationException

ADMIN_FEE_RATE = Decimal('0.13')
PACKAGING_FEE_RATE = Decimal('0.04')
TOTAL_FEE_RATE = ADMIN_FEE_RATE + PACKAGING_FEE_RATE

# Up to this markup the margin formula applies, above it cost-plus.
# The two formulas disagree at the boundary (99% -> x100, 99.5% -> x1.995).
MARGIN_MARKUP_LIMIT = Decimal('99')

DEFAULT_MARKUPS = [10, 20, 30, 40, 50, 60, 70, 80, 90]

HUNDRED = Decimal('100')


def _buying_price(value):
    try:
        price = to_decimal(value)
    except ValueError:
        raise ValidationException("buying_price must be a number")
    if price <= 0:
        raise ValidationException("buying_price must be positive")
    return price


def _markup(value):
    try:
        markup = to_decimal(value)
    except ValueError:
        raise ValidationException("markup_percent must be a number")
    if markup < 0:
        raise ValidationException("markup_percent must not be negative")
    return markup


def recommended_price(buying_price, markup_percent):
    buying_price = _buying_price(buying_price)
    markup = _markup(markup_percent)
    if markup <= MARGIN_MARKUP_LIMIT:
        return buying_price / (1 - markup / HUNDRED)
    return buying_price * (1 + markup / HUNDRED)


def admin_fee(price):
    return to_decimal(price) * ADMIN_FEE_RATE


def packaging_fee(price):
    return to_decimal(price) * PACKAGING_FEE_RATE


def calculate_profit(selling_price, buying_price):
    selling_price = to_decimal(selling_price)
    buying_price = to_decimal(buying_price)
    return selling_price - buying_price - admin_fee(selling_price) - packaging_fee(selling_price)


def price_breakdown(buying_price, markup_percent):
    """Everything the markup calculator shows for one base price and markup."""
    final_price = recommended_price(buying_price, markup_percent)
    buying_price = to_decimal(buying_price)
    markup = to_decimal(markup_percent)
    return {
        "base_price": money(buying_price),
        "markup_percent": markup,
        "markup_amount": money(buying_price * markup / HUNDRED),
        "final_price": money(final_price),
        "admin_fee": money(admin_fee(final_price)),
        "packaging_fee": money(packaging_fee(final_price)),
        "profit": money(calculate_profit(final_price, buying_price)),
    }


def analyze_price(price):
    """Fees taken from a selling price and what is left after them."""
    try:
        price = to_decimal(price)
    except ValueError:
        raise ValidationException("price must be a number")
    fee_admin = admin_fee(price)
    fee_packaging = packaging_fee(price)
    return {
        "price": money(price),
        "admin_fee": money(fee_admin),
        "packaging_fee": money(fee_packaging),
        "final_price": money(price - fee_admin - fee_packaging),
    }


def normalize_markups(markups):
    """Distinct, sorted, non-negative markups; invalid entries raise."""
    if not isinstance(markups, (list, tuple)):
        raise ValidationException("markups must be a list")
    result = set()
    for value in markups:
        markup = _markup(value)
        result.add(int(markup) if markup == markup.to_integral_value() else float(markup))
    return sorted(result)


def markup_table(buying_price, markups):
    rows = []
    for markup in markups:
        final_price = recommended_price(buying_price, markup)
        rows.append({
            "markup_percent": markup,
            "recommended_price": money(final_price),
            "profit": money(calculate_profit(final_price, buying_price)),
        })
    return rows
