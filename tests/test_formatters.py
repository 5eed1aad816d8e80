from decimal import Decimal

from storefront.utils.formatters import format_price


def test_indian_grouping():
    assert format_price(999) == "₹999"
    assert format_price(29999) == "₹29,999"
    assert format_price(Decimal("129999.40")) == "₹1,29,999"
    assert format_price(12345678) == "₹1,23,45,678"


def test_other_currency():
    assert format_price(1234567, "USD") == "USD 1,234,567"
