"""
🧪 test_currency_converter.py: unit-тести для CurrencyConverter

Перевіряє:
- Форматування з символом, роздільниками тисяч і округленням half-up
- Конвертацію з базової валюти (невідома валюта → курс 1)
- Крос-конвертацію та помилку на відсутній/нульовий курс
"""

from decimal import Decimal

import pytest

from homego.domain.currency.entities import STATIC_CURRENCIES, CurrencyInfo
from homego.errors.custom_errors import UnknownCurrencyError
from homego.infrastructure.currency.currency_converter import CurrencyConverter, to_decimal


@pytest.fixture
def converter():
    return CurrencyConverter(STATIC_CURRENCIES)


def test_format_base_currency(converter):
    assert converter.format(100, "USD") == "$100.00"


def test_format_thousands_separator(converter):
    assert converter.format(100000, "USD") == "$100,000.00"


def test_format_converts_before_formatting(converter):
    assert converter.format(100, "EUR") == "€92.00"
    assert converter.format(1, "INR") == "₹83.12"


def test_format_rounds_half_up(converter):
    assert converter.format(Decimal("0.005"), "USD") == "$0.01"
    assert converter.format(Decimal("2.675"), "USD") == "$2.68"


def test_format_with_code_and_custom_decimals(converter):
    assert converter.format(10, "EUR", show_code=True) == "€9.20 EUR"
    assert converter.format(1234.5, "USD", decimals=0) == "$1,235"


def test_format_negative_amount_puts_sign_first(converter):
    assert converter.format(-5, "USD") == "-$5.00"


def test_format_rejects_negative_decimals(converter):
    with pytest.raises(ValueError):
        converter.format(1, "USD", decimals=-1)


def test_convert_unknown_currency_uses_rate_one(converter):
    assert converter.get_rate("JPY") == Decimal("1")
    assert converter.convert(50, "JPY") == Decimal("50")
    assert converter.get_symbol("JPY") == "$"


def test_convert_from_base(converter):
    assert converter.convert(100, "eur") == Decimal("92")


def test_convert_between_via_base(converter):
    assert converter.convert_between(92, "EUR", "USD") == Decimal("100")
    assert converter.convert_between(79, "GBP", "EUR") == Decimal("92")


def test_convert_between_same_currency_is_identity(converter):
    assert converter.convert_between(Decimal("5.55"), "GBP", "GBP") == Decimal("5.55")


def test_convert_between_unknown_currency_raises(converter):
    with pytest.raises(UnknownCurrencyError) as exc_info:
        converter.convert_between(1, "USD", "XYZ")
    assert exc_info.value.currency == "XYZ"
    assert isinstance(exc_info.value, KeyError)


def test_convert_between_zero_rate_raises():
    table = list(STATIC_CURRENCIES) + [CurrencyInfo("ZZZ", Decimal("0"), "Z", "Zero")]
    converter = CurrencyConverter(table)
    with pytest.raises(UnknownCurrencyError):
        converter.convert_between(1, "ZZZ", "USD")


def test_base_rate_is_always_one():
    table = [CurrencyInfo("USD", Decimal("3"), "$", "US Dollar")]
    converter = CurrencyConverter(table)
    assert converter.get_rate("USD") == Decimal("1")


def test_snapshot_is_read_only(converter):
    with pytest.raises(TypeError):
        converter.currencies["EUR"] = CurrencyInfo("EUR", Decimal("2"), "€", "Euro")  # type: ignore[index]
    assert "eur" in converter


def test_to_decimal_rejects_bool_and_garbage():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(" 2.50 ") == Decimal("2.50")
    with pytest.raises(ValueError):
        to_decimal(True)
    with pytest.raises(ValueError):
        to_decimal("abc")


@pytest.mark.parametrize("raw", ["1,000", "1,5"])
def test_to_decimal_rejects_comma_strings(raw):
    with pytest.raises(ValueError):
        to_decimal(raw)


@pytest.mark.parametrize("raw", ["NaN", "Infinity", "-inf", float("nan"), Decimal("Infinity")])
def test_to_decimal_rejects_non_finite(raw):
    with pytest.raises(ValueError):
        to_decimal(raw)


def test_format_rejects_ambiguous_amount(converter):
    with pytest.raises(ValueError):
        converter.format("1,000", "USD")
    with pytest.raises(ValueError):
        converter.format("NaN", "USD")
