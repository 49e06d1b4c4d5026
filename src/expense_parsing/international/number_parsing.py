"""Locale-aware amount parsing for free-text expense messages.

All amounts are returned as integer minor units (cents). Every currency is
normalised to a two-decimal minor unit, so ``¥1000`` becomes ``100000`` even
though the yen has no subunit in everyday display.
"""
from __future__ import annotations

import re

from ..models.locale import AmountCandidate
from .currency_patterns import DEFAULT_LOCALE, all_currency_symbols, get_currency_pattern

GLOBAL_SYMBOLS: tuple[str, ...] = ("$", "€", "£", "¥", "￥", "₹", "₽", "₴", "₺")

ISO_CODES: tuple[str, ...] = (
    "USD", "EUR", "GBP", "JPY", "CNY", "TWD", "PLN", "RUB", "UAH",
    "RON", "TRY", "BRL", "CAD", "AUD", "INR", "KRW",
)

SYMBOL_TO_CURRENCY: dict[str, str] = {
    "$": "USD",
    "€": "EUR",
    "£": "GBP",
    "¥": "JPY",
    "￥": "CNY",
    "₹": "INR",
    "₽": "RUB",
    "₴": "UAH",
    "₺": "TRY",
    "zł": "PLN",
    "lei": "RON",
    "L": "RON",
    "R$": "BRL",
    "NT$": "TWD",
}

EXPENSE_CONTEXT_WORDS: tuple[str, ...] = (
    "paid", "spent", "cost", "bill", "total", "price", "dinner", "lunch", "coffee",
)

MAX_AMOUNT_CENTS = 10_000_000_00

# Longer digit runs are never amounts (and would overflow int()'s str-conversion limit).
MAX_NUMERAL_DIGITS = 15

# A digit run with optional "." / "," separated groups: 25, 25.50, 1,234.56, 1.234,56
_NUMERAL = r"\d+(?:[.,]\d+)*"

_AMOUNT_KEYWORDS = r"(?:paid|spent|cost|costs|bill|total|amount|price)"

# dd/mm/yyyy-like shapes; context-free numerals inside them are not amounts
_DATE_SHAPE = re.compile(r"\d{1,4}[/.\-]\d{1,2}[/.\-]\d{2,4}")


def _symbol_alternation(symbols) -> str:
    """Regex alternation for *symbols*, longest first.

    Symbols made of ASCII letters (``USD``, ``lei``, ``L``) must not touch
    other letters, so ``L`` never matches inside ``Lunch``.
    """
    parts = []
    for symbol in sorted(set(symbols), key=lambda s: (-len(s), s)):
        escaped = re.escape(symbol)
        if symbol[0].isascii() and symbol[0].isalpha():
            escaped = r"(?<![^\W\d_])" + escaped
        if symbol[-1].isascii() and symbol[-1].isalpha():
            escaped = escaped + r"(?![^\W\d_])"
        parts.append(escaped)
    return "|".join(parts)


_ALL_SYMBOLS = _symbol_alternation(all_currency_symbols() + GLOBAL_SYMBOLS + ISO_CODES)

# Symbol before the number ("$25.50") or after it ("25,50€"). A trailing
# symbol that is itself followed by digits belongs to the next number.
_MONEY_TOKEN = re.compile(
    rf"(?P<lead_sym>{_ALL_SYMBOLS})\s*(?P<lead_num>{_NUMERAL})"
    rf"|(?<![\d.,])(?P<trail_num>{_NUMERAL})\s*(?P<trail_sym>{_ALL_SYMBOLS})(?!\s*\d)"
)

_KEYWORD_AMOUNT = re.compile(
    rf"\b{_AMOUNT_KEYWORDS}\s*:?\s*(?P<num>{_NUMERAL})(?![\d/])",
    re.IGNORECASE,
)

_BARE_NUMERAL = re.compile(rf"(?<![\d.,])(?P<num>{_NUMERAL})(?![\d])")

# Currency words written after (or before) the number, per locale.
_SPACED_GROUPS = r"\d{1,3}(?:[ \u00a0\u202f]\d{3})+(?:,\d+)?"
_LANGUAGE_AMOUNT_PATTERNS: dict[str, list[re.Pattern[str]]] = {
    "es": [
        re.compile(rf"(?P<num>{_NUMERAL})\s*euros?\b", re.IGNORECASE),
        re.compile(rf"\beuros?\s*(?P<num>{_NUMERAL})", re.IGNORECASE),
    ],
    "fr-FR": [
        re.compile(rf"(?P<num>{_SPACED_GROUPS}|{_NUMERAL})\s*(?:euros?\b|€)", re.IGNORECASE),
        re.compile(rf"\beuros?\s*(?P<num>{_SPACED_GROUPS}|{_NUMERAL})", re.IGNORECASE),
    ],
    "de-DE": [
        re.compile(rf"(?P<num>{_NUMERAL})\s*Euro\b", re.IGNORECASE),
        re.compile(rf"\bEuro\s*(?P<num>{_NUMERAL})", re.IGNORECASE),
    ],
    "zh-CN": [
        re.compile(rf"(?P<num>{_NUMERAL})\s*(?:[元块]|人民币)"),
    ],
    "zh-TW": [
        re.compile(rf"(?P<num>{_NUMERAL})\s*(?:[元塊]|新台幣)"),
        re.compile(rf"台幣\s*(?P<num>{_NUMERAL})"),
    ],
    "pl-PL": [
        re.compile(rf"(?P<num>{_SPACED_GROUPS}|{_NUMERAL})\s*z[łl](?:ot\w*)?\b", re.IGNORECASE),
    ],
    "ru-RU": [
        re.compile(rf"(?P<num>{_SPACED_GROUPS}|{_NUMERAL})\s*(?:руб\w*|₽)", re.IGNORECASE),
    ],
}


def _to_cents_default(numeral: str) -> int | None:
    """Resolve separators without a locale.

    The last separator followed by exactly three digits is a thousands
    separator; otherwise it is the decimal separator and every earlier
    separator is grouping. ``1.234`` is therefore read as 1234, which is
    wrong for three-digit minor units; the heuristic is kept deliberately
    narrow.
    """
    if sum(ch.isdigit() for ch in numeral) > MAX_NUMERAL_DIGITS:
        return None
    last = max(numeral.rfind("."), numeral.rfind(","))
    if last == -1:
        return int(numeral) * 100

    tail = numeral[last + 1:]
    if len(tail) == 3:
        return int(re.sub(r"[.,]", "", numeral)) * 100

    whole = re.sub(r"[.,]", "", numeral[:last]) or "0"
    fraction = (tail + "00")[:2]
    return int(whole) * 100 + int(fraction)


def extract_amount(text: str) -> int | None:
    """Return the first monetary amount in *text* in cents, or ``None``.

    Recognises a currency symbol or ISO code next to a numeral in either
    order. Falls back to a bare numeral right after an expense keyword
    ("paid 40"). Never raises.
    """
    if not text:
        return None

    match = _MONEY_TOKEN.search(text)
    if match:
        numeral = match.group("lead_num") or match.group("trail_num")
        return _to_cents_default(numeral)

    keyword_match = _KEYWORD_AMOUNT.search(text)
    if keyword_match:
        return _to_cents_default(keyword_match.group("num"))

    return None


def parse_amount(raw_string: str, locale: str = DEFAULT_LOCALE) -> int | None:
    """Parse a monetary string using *locale*'s separator conventions.

    Handles:
    - EU style for ``de-DE``: "1.234,56" -> 123456
    - US style for ``en-US``: "1,234.56" -> 123456
    - Locale symbols before or after: "€25,50", "25,50€"
    - Space grouping for ``fr-FR``/``pl-PL``: "1 234,56"

    Returns ``None`` for empty strings, strings without digits, numerals
    with more than ``MAX_NUMERAL_DIGITS`` integer digits, and strings with
    characters outside the locale's numeral grammar.
    """
    if not raw_string or not raw_string.strip():
        return None

    pattern = get_currency_pattern(locale)
    cleaned = raw_string
    for symbol in sorted(pattern.symbols, key=len, reverse=True):
        cleaned = cleaned.replace(symbol, "")

    cleaned = re.sub(r"\s+", "", cleaned)
    if pattern.thousands_separator.strip():
        cleaned = cleaned.replace(pattern.thousands_separator, "")

    decimal = re.escape(pattern.decimal_separator)
    if not re.fullmatch(rf"\d*(?:{decimal}\d*)?", cleaned) or not any(ch.isdigit() for ch in cleaned):
        return None

    whole, _, fraction = cleaned.partition(pattern.decimal_separator)
    if len(whole) > MAX_NUMERAL_DIGITS:
        return None
    return int(whole or "0") * 100 + int((fraction + "00")[:2])


def _matches_locale_grammar(numeral: str, locale: str) -> bool:
    pattern = get_currency_pattern(locale)
    decimal = re.escape(pattern.decimal_separator)
    group = re.escape(pattern.thousands_separator)
    grouped = rf"\d{{1,3}}(?:{group}\d{{3}})+(?:{decimal}\d+)?"
    plain = rf"\d+(?:{decimal}\d+)?"
    return re.fullmatch(rf"{grouped}|{plain}", numeral) is not None


def _numeral_to_cents(numeral: str, locale: str) -> int | None:
    """Use the locale grammar when the numeral fits it, otherwise the default heuristic."""
    if _matches_locale_grammar(numeral, locale):
        return parse_amount(numeral, locale)
    compact = re.sub(r"\s+", "", numeral)
    if not re.fullmatch(_NUMERAL, compact):
        return None
    return _to_cents_default(compact)


def normalize_currency_symbol(symbol: str, default_currency: str | None = "USD") -> str | None:
    """Map a currency symbol or code to an ISO 4217 code."""
    if symbol in SYMBOL_TO_CURRENCY:
        return SYMBOL_TO_CURRENCY[symbol]
    if len(symbol) == 3 and symbol.isascii() and symbol.isalpha():
        return symbol.upper()
    return default_currency


def _currency_for_symbol(symbol: str, locale_symbols: tuple[str, ...], locale_currency: str, default_currency: str) -> str | None:
    """A symbol the locale itself uses means that locale's currency (``¥`` in ``zh-CN`` is CNY)."""
    if symbol in locale_symbols:
        return locale_currency
    return normalize_currency_symbol(symbol, default_currency)


def _has_context_word(text: str, start: int, end: int) -> bool:
    window = text[max(0, start - 20):min(len(text), end + 20)].lower()
    return any(word in window for word in EXPENSE_CONTEXT_WORDS)


def extract_amount_candidates(
    text: str,
    locale: str = DEFAULT_LOCALE,
    currency: str = "USD",
) -> list[AmountCandidate]:
    """Find every plausible amount in *text*, ranked by confidence.

    Symbol-bearing tokens start at 0.9, locale currency words at 0.7,
    keyword-led numerals at 0.6 and context-free numerals at 0.5. Matching the
    group currency and nearby expense words each add 0.2. Candidates within
    one major unit of a better-ranked candidate are dropped.
    """
    pattern = get_currency_pattern(locale)
    date_spans = [m.span() for m in _DATE_SHAPE.finditer(text)]
    raw: list[tuple[str, float, str, int, int]] = []  # numeral, base confidence, currency, start, end

    for match in _MONEY_TOKEN.finditer(text):
        symbol = match.group("lead_sym") or match.group("trail_sym")
        numeral = match.group("lead_num") or match.group("trail_num")
        detected = _currency_for_symbol(symbol, pattern.symbols, pattern.currency_code, currency)
        raw.append((numeral, 0.9, detected, match.start(), match.end()))

    for word_pattern in _LANGUAGE_AMOUNT_PATTERNS.get(locale, []):
        for match in word_pattern.finditer(text):
            raw.append((match.group("num"), 0.7, pattern.currency_code, match.start(), match.end()))

    for match in _KEYWORD_AMOUNT.finditer(text):
        raw.append((match.group("num"), 0.6, currency, match.start(), match.end()))

    for match in _BARE_NUMERAL.finditer(text):
        start, end = match.span("num")
        if any(d_start <= start and end <= d_end for d_start, d_end in date_spans):
            continue
        raw.append((match.group("num"), 0.5, currency, start, end))

    candidates: list[AmountCandidate] = []
    for numeral, confidence, detected, start, end in raw:
        amount = _numeral_to_cents(numeral, locale)
        if amount is None or amount <= 0 or amount > MAX_AMOUNT_CENTS:
            continue
        if detected == currency or detected in pattern.symbols:
            confidence += 0.2
        if _has_context_word(text, start, end):
            confidence += 0.2
        candidates.append(AmountCandidate(
            amount=amount,
            confidence=min(round(confidence, 2), 1.0),
            currency=detected,
            pattern=text[start:end],
        ))

    candidates.sort(key=lambda c: c.confidence, reverse=True)
    ranked: list[AmountCandidate] = []
    for candidate in candidates:
        if all(abs(kept.amount - candidate.amount) >= 100 for kept in ranked):
            ranked.append(candidate)
    return ranked
