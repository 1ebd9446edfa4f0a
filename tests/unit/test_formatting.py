from datetime import datetime

import pytest

from py_ledger.formatting import NOT_SET, format_currency, format_date, format_number, format_price, format_quantity


@pytest.mark.parametrize("value, currency, expected", [
    (1234567.891, "INR", "12,34,567.89"),
    (123.4, "INR", "123.40"),
    (1000, "INR", "1,000.00"),
    (100000, "INR", "1,00,000.00"),
    (1234567.891, "USD", "1,234,567.89"),
    (-2500.5, "INR", "-2,500.50"),
])
def test_format_number(value, currency, expected):
    assert format_number(value, currency) == expected


def test_format_currency():
    assert format_currency(2012.4, "INR") == "₹2,012.40"
    assert format_currency(-387.6, "USD") == "-$387.60"
    assert format_currency(5, "EUR") == "EUR 5.00"


def test_format_price_unset():
    assert format_price(0.0) == NOT_SET
    assert format_price(160.0, "USD") == "$160.00"


def test_format_quantity_and_date():
    assert format_quantity(15.0) == "15"
    assert format_quantity(2.5) == "2.5"
    assert format_quantity(1.00004) == "1"
    assert format_quantity(2.00001) == "2"
    assert format_quantity(1234.56789) == "1,234.5679"
    assert format_date(datetime(2023, 1, 15)) == "15/01/2023"
    assert format_date(None) == ""
