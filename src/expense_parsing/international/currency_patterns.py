"""Per-locale currency symbols, separators and date display formats.

The table is built once at import time and exposed read-only. Lookups for an
unknown locale tag return the ``en-US`` entry instead of failing.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..models.locale import CurrencyPattern

DEFAULT_LOCALE = "en-US"

_COMMA_DECIMAL_DOT_GROUP = {"decimal_separator": ",", "thousands_separator": ".", "number_format": "1.234,56"}
_COMMA_DECIMAL_SPACE_GROUP = {"decimal_separator": ",", "thousands_separator": " ", "number_format": "1 234,56"}
_DOT_DECIMAL_COMMA_GROUP = {"decimal_separator": ".", "thousands_separator": ",", "number_format": "1,234.56"}

CURRENCY_PATTERNS: Mapping[str, CurrencyPattern] = MappingProxyType({
    "en-US": CurrencyPattern(
        symbols=("$", "USD"), currency_code="USD", date_format="YYYY-MM-DD",
        babel_locale="en_US", **_DOT_DECIMAL_COMMA_GROUP,
    ),
    "es": CurrencyPattern(
        symbols=("€", "EUR"), currency_code="EUR", date_format="DD/MM/YYYY",
        babel_locale="es_ES", **_COMMA_DECIMAL_DOT_GROUP,
    ),
    "fr-FR": CurrencyPattern(
        symbols=("€", "EUR"), currency_code="EUR", date_format="DD/MM/YYYY",
        babel_locale="fr_FR", **_COMMA_DECIMAL_SPACE_GROUP,
    ),
    "de-DE": CurrencyPattern(
        symbols=("€", "EUR"), currency_code="EUR", date_format="DD.MM.YYYY",
        babel_locale="de_DE", **_COMMA_DECIMAL_DOT_GROUP,
    ),
    "zh-CN": CurrencyPattern(
        symbols=("￥", "¥", "CNY", "元"), currency_code="CNY", date_format="YYYY年MM月DD日",
        babel_locale="zh_Hans_CN", **_DOT_DECIMAL_COMMA_GROUP,
    ),
    "zh-TW": CurrencyPattern(
        symbols=("NT$", "TWD", "元"), currency_code="TWD", date_format="YYYY年MM月DD日",
        babel_locale="zh_Hant_TW", **_DOT_DECIMAL_COMMA_GROUP,
    ),
    "pl-PL": CurrencyPattern(
        symbols=("zł", "PLN"), currency_code="PLN", date_format="DD.MM.YYYY",
        babel_locale="pl_PL", **_COMMA_DECIMAL_SPACE_GROUP,
    ),
    "ru-RU": CurrencyPattern(
        symbols=("₽", "RUB"), currency_code="RUB", date_format="DD.MM.YYYY",
        babel_locale="ru_RU", **_COMMA_DECIMAL_SPACE_GROUP,
    ),
    "it-IT": CurrencyPattern(
        symbols=("€", "EUR"), currency_code="EUR", date_format="DD/MM/YYYY",
        babel_locale="it_IT", **_COMMA_DECIMAL_DOT_GROUP,
    ),
    "ua-UA": CurrencyPattern(
        symbols=("₴", "UAH"), currency_code="UAH", date_format="DD.MM.YYYY",
        babel_locale="uk_UA", **_COMMA_DECIMAL_SPACE_GROUP,
    ),
    "ro": CurrencyPattern(
        symbols=("lei", "RON", "L"), currency_code="RON", date_format="DD.MM.YYYY",
        babel_locale="ro_RO", **_COMMA_DECIMAL_DOT_GROUP,
    ),
    "tr-TR": CurrencyPattern(
        symbols=("₺", "TRY"), currency_code="TRY", date_format="DD.MM.YYYY",
        babel_locale="tr_TR", **_COMMA_DECIMAL_DOT_GROUP,
    ),
    "pt-BR": CurrencyPattern(
        symbols=("R$", "BRL"), currency_code="BRL", date_format="DD/MM/YYYY",
        babel_locale="pt_BR", **_COMMA_DECIMAL_DOT_GROUP,
    ),
    "nl-NL": CurrencyPattern(
        symbols=("€", "EUR"), currency_code="EUR", date_format="DD-MM-YYYY",
        babel_locale="nl_NL", **_COMMA_DECIMAL_DOT_GROUP,
    ),
    "fi": CurrencyPattern(
        symbols=("€", "EUR"), currency_code="EUR", date_format="DD.MM.YYYY",
        babel_locale="fi_FI", **_COMMA_DECIMAL_SPACE_GROUP,
    ),
})

SUPPORTED_LOCALES: tuple[str, ...] = tuple(CURRENCY_PATTERNS)


def get_currency_pattern(locale: str | None) -> CurrencyPattern:
    """Return the pattern for *locale*, or the ``en-US`` entry when unknown."""
    return CURRENCY_PATTERNS.get(locale or DEFAULT_LOCALE, CURRENCY_PATTERNS[DEFAULT_LOCALE])


def all_currency_symbols() -> tuple[str, ...]:
    """Every symbol from every locale, deduplicated, longest first.

    Longest-first ordering lets regex alternations prefer ``NT$`` and ``R$``
    over a bare ``$``.
    """
    seen: dict[str, None] = {}
    for pattern in CURRENCY_PATTERNS.values():
        for symbol in pattern.symbols:
            seen.setdefault(symbol, None)
    return tuple(sorted(seen, key=len, reverse=True))
