"""Render minor-unit amounts and dates for display in a given locale."""
from __future__ import annotations

from datetime import date
from decimal import Decimal

import structlog
from babel.numbers import format_currency as babel_format_currency
from babel.numbers import is_currency

from .currency_patterns import DEFAULT_LOCALE, get_currency_pattern

logger = structlog.get_logger(__name__)

DEFAULT_CURRENCY = "USD"


def resolve_currency_code(currency_code: str | None) -> str:
    """Return *currency_code* upper-cased when CLDR knows it, else ``USD``."""
    code = (currency_code or "").strip().upper()
    if code and is_currency(code):
        return code
    logger.debug("unknown_currency_code", currency=currency_code, fallback=DEFAULT_CURRENCY)
    return DEFAULT_CURRENCY


def format_currency(
    amount_cents: int,
    locale: str = DEFAULT_LOCALE,
    currency_code: str = DEFAULT_CURRENCY,
) -> str:
    """Format *amount_cents* as money using the locale's CLDR conventions.

    ``format_currency(2550, "de-DE", "EUR")`` gives ``"25,50 €"``. An unknown
    currency code is replaced by US dollars instead of failing.
    """
    pattern = get_currency_pattern(locale)
    code = resolve_currency_code(currency_code)
    amount = Decimal(amount_cents) / 100
    return babel_format_currency(amount, code, locale=pattern.babel_locale)


def format_date_for_locale(value: date, locale: str = DEFAULT_LOCALE) -> str:
    """Render *value* with the locale's display pattern (``DD.MM.YYYY``, ``YYYY年MM月DD日`` ...)."""
    date_format = get_currency_pattern(locale).date_format
    return (
        date_format
        .replace("YYYY", f"{value.year:04d}")
        .replace("MM", f"{value.month:02d}")
        .replace("DD", f"{value.day:02d}")
    )
