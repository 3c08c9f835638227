"""Tests for the currency helpers."""

import math

import pytest

from finance_tracker.currency import (
    format_currency,
    get_currency_symbol,
    get_supported_currencies,
    is_valid_currency,
    parse_currency_string,
    safe_amount,
)


def test_format_currency_groups_thousands():
    assert format_currency(1234.5) == "₨ 1,234.50"
    assert format_currency(18200000) == "₨ 18,200,000.00"


def test_format_currency_without_symbol():
    assert format_currency(1234.5, show_symbol=False) == "1,234.50"
    assert format_currency(1234.5, fraction_digits=0) == "₨ 1,234"


@pytest.mark.parametrize("value", [None, math.nan, "abc", "12.5", object()])
def test_format_currency_treats_junk_as_zero(value):
    assert format_currency(value) == "₨ 0.00"


def test_safe_amount():
    assert safe_amount(12.5) == 12.5
    assert safe_amount("12.5") == 0.0
    assert safe_amount(None) == 0.0
    assert safe_amount(float("inf")) == 0.0
    assert safe_amount(True) == 0.0


def test_parse_currency_string():
    assert parse_currency_string("₨ 1,234.50") == 1234.5
    assert parse_currency_string("-₨ 50") == -50.0
    assert parse_currency_string("n/a") == 0.0
    assert parse_currency_string("") == 0.0


def test_supported_currencies():
    assert get_currency_symbol() == "₨"
    assert is_valid_currency("PKR")
    assert not is_valid_currency("USD")
    assert get_supported_currencies() == ["PKR"]
