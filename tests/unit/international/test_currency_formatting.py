"""Test locale-aware display of amounts and dates."""
from datetime import date
from expense_parsing.international.currency_formatting import (
    format_currency, format_date_for_locale, resolve_currency_code,
)


def _plain(text: str) -> str:
    # CLDR uses non-breaking spaces between number and symbol
    return text.replace("\xa0", " ").replace("\u202f", " ")


class TestFormatCurrency:
    def test_us_dollars(self):
        assert format_currency(5000, "en-US", "USD") == "$50.00"

    def test_german_euros(self):
        assert _plain(format_currency(2550, "de-DE", "EUR")) == "25,50 €"

    def test_grouping(self):
        assert format_currency(123456, "en-US", "USD") == "$1,234.56"

    def test_unknown_currency_uses_dollars(self):
        assert format_currency(5000, "en-US", "ZZZ") == "$50.00"

    def test_lowercase_code(self):
        assert resolve_currency_code("eur") == "EUR"

    def test_empty_code(self):
        assert resolve_currency_code(None) == "USD"


class TestFormatDate:
    def test_iso_for_us(self):
        assert format_date_for_locale(date(2026, 10, 18), "en-US") == "2026-10-18"

    def test_german(self):
        assert format_date_for_locale(date(2026, 3, 7), "de-DE") == "07.03.2026"

    def test_chinese(self):
        assert format_date_for_locale(date(2026, 10, 18), "zh-CN") == "2026年10月18日"


class TestDocumentedExamples:
    def test_us_contains_decimal_point(self):
        assert "25.50" in format_currency(2550, "en-US", "USD")

    def test_german_contains_decimal_comma(self):
        assert "25,50" in format_currency(2550, "de-DE", "EUR")

    def test_french_contains_decimal_comma(self):
        assert "25,50" in format_currency(2550, "fr-FR", "EUR")

    def test_invalid_code_uses_dollar(self):
        assert "$" in format_currency(2550, "en-US", "INVALID")
