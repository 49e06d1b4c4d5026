"""Relative and absolute date parsing for expense messages."""
from __future__ import annotations
from datetime import date, timedelta
import re

from ..models.locale import DateCandidate
from .currency_patterns import DEFAULT_LOCALE, get_currency_pattern

# (pattern, days before today, confidence)
RELATIVE_DATE_PATTERNS: dict[str, list[tuple[re.Pattern[str], int, float]]] = {
    'en-US': [
        (re.compile(r'\b(?:today|now)\b', re.IGNORECASE), 0, 0.9),
        (re.compile(r'\byesterday\b', re.IGNORECASE), 1, 0.9),
        (re.compile(r'\b(?:last week|a week ago)\b', re.IGNORECASE), 7, 0.8),
    ],
    'es': [
        (re.compile(r'\b(?:hoy|ahora)\b', re.IGNORECASE), 0, 0.9),
        (re.compile(r'\bayer\b', re.IGNORECASE), 1, 0.9),
        (re.compile(r'\b(?:la semana pasada|hace una semana)\b', re.IGNORECASE), 7, 0.8),
    ],
    'fr-FR': [
        (re.compile(r"\b(?:aujourd'hui|maintenant)\b", re.IGNORECASE), 0, 0.9),
        (re.compile(r'\bhier\b', re.IGNORECASE), 1, 0.9),
        (re.compile(r'\b(?:la semaine dernière|il y a une semaine)\b', re.IGNORECASE), 7, 0.8),
    ],
    'de-DE': [
        (re.compile(r'\b(?:heute|jetzt)\b', re.IGNORECASE), 0, 0.9),
        (re.compile(r'\bgestern\b', re.IGNORECASE), 1, 0.9),
        (re.compile(r'\b(?:letzte woche|vor einer woche)\b', re.IGNORECASE), 7, 0.8),
    ],
}

# Month first, as written in the US.
_US_ABSOLUTE_DATE = re.compile(r'(?<!\d)(\d{1,2})[/-](\d{1,2})[/-](\d{4})(?!\d)')

_KEYWORD_DAYS_BACK = {'today': 0, 'yesterday': 1, 'last week': 7}
_RELATIVE_KEYWORD = re.compile(r'\b(today|yesterday|last week)\b', re.IGNORECASE)

# Extra formats tried for a locale on top of its display format and ISO.
_EXTRA_FORMATS: dict[str, tuple[str, ...]] = {
    'en-US': ('MM/DD/YYYY', 'MM-DD-YYYY'),
}

ISO_FORMAT = 'YYYY-MM-DD'


def _format_to_regex(date_format: str) -> str:
    """Turn a display pattern such as ``DD.MM.YYYY`` into a regex with named groups."""
    pattern = re.escape(date_format)
    pattern = pattern.replace('YYYY', r'(?P<year>\d{4})')
    pattern = pattern.replace('MM', r'(?P<month>\d{1,2})')
    pattern = pattern.replace('DD', r'(?P<day>\d{1,2})')
    return pattern


def _shift_years(value: date, years: int) -> date:
    try:
        return value.replace(year=value.year + years)
    except ValueError:
        # 29 February in a non-leap target year
        return value.replace(year=value.year + years, day=28)


def extract_date(text: str, today: date | None = None) -> date | None:
    """Find the date an expense message refers to.

    An explicit ``MM/DD/YYYY`` (or ``MM-DD-YYYY``) date wins over relative
    words. ``today``, ``yesterday`` and ``last week`` are resolved against
    *today*, which defaults to the current date at call time. Impossible
    dates such as month 13 are skipped. Returns ``None`` when no cue is found.
    """
    if not text:
        return None
    today = today or date.today()

    for match in _US_ABSOLUTE_DATE.finditer(text):
        month, day, year = int(match.group(1)), int(match.group(2)), int(match.group(3))
        try:
            return date(year, month, day)
        except ValueError:
            continue

    keyword = _RELATIVE_KEYWORD.search(text)
    if keyword:
        return today - timedelta(days=_KEYWORD_DAYS_BACK[keyword.group(1).lower()])

    return None


def parse_date(raw_string: str, date_format: str = 'MM/DD/YYYY') -> date:
    """Parse a single date string written in *date_format* (ISO is always accepted)."""
    s = raw_string.strip()

    for fmt in (ISO_FORMAT, date_format):
        match = re.fullmatch(_format_to_regex(fmt), s)
        if match:
            return date(int(match.group('year')), int(match.group('month')), int(match.group('day')))

    raise ValueError(f"Cannot parse date: {raw_string} with format {date_format}")


def is_valid_expense_date(value: date, today: date | None = None) -> bool:
    """An expense date must fall within one year either side of *today*."""
    today = today or date.today()
    return _shift_years(today, -1) <= value <= _shift_years(today, 1)


def extract_date_candidates(
    text: str,
    locale: str = DEFAULT_LOCALE,
    today: date | None = None,
) -> list[DateCandidate]:
    """Collect every date cue in *text*, highest confidence first.

    Relative words come from the locale's language (English when there is no
    table for it). Absolute dates are read with the locale's display format,
    ISO, and for ``en-US`` the month-first US forms; only dates within a year
    of *today* are kept.
    """
    today = today or date.today()
    candidates: list[DateCandidate] = []

    # Absolute dates go first; the sort below is stable.
    formats = [get_currency_pattern(locale).date_format, *_EXTRA_FORMATS.get(locale, ()), ISO_FORMAT]
    seen_spans: set[tuple[int, int]] = set()
    for fmt in dict.fromkeys(formats):
        regex = re.compile(r'(?<!\d)' + _format_to_regex(fmt) + r'(?!\d)')
        for match in regex.finditer(text):
            if match.span() in seen_spans:
                continue
            try:
                value = date(int(match.group('year')), int(match.group('month')), int(match.group('day')))
            except ValueError:
                continue
            if is_valid_expense_date(value, today):
                seen_spans.add(match.span())
                candidates.append(DateCandidate(value=value, confidence=0.9, pattern=match.group(0)))

    for pattern, days_back, confidence in RELATIVE_DATE_PATTERNS.get(locale, RELATIVE_DATE_PATTERNS['en-US']):
        match = pattern.search(text)
        if match:
            candidates.append(DateCandidate(
                value=today - timedelta(days=days_back),
                confidence=confidence,
                pattern=match.group(0),
            ))

    candidates.sort(key=lambda c: c.confidence, reverse=True)
    return candidates
