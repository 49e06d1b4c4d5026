"""Locale-aware data types for expense text parsing.

``CurrencyPattern`` describes how one locale writes money and dates. The
candidate models carry a parsed value together with the confidence and the
matched substring so callers can rank competing interpretations.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CurrencyPattern(BaseModel):
    """Money and date conventions for a single locale tag."""

    model_config = ConfigDict(frozen=True)

    symbols: tuple[str, ...]
    currency_code: str
    date_format: str
    number_format: str = "1,234.56"
    decimal_separator: str = "."
    thousands_separator: str = ","
    babel_locale: str = "en_US"

    @field_validator("symbols")
    @classmethod
    def _symbols_not_empty(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            raise ValueError("a currency pattern needs at least one symbol")
        return value

    @field_validator("date_format")
    @classmethod
    def _date_format_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("date_format must not be empty")
        return value


class AmountCandidate(BaseModel):
    """One monetary interpretation found in free text."""

    amount: int = Field(ge=0)
    confidence: float = Field(ge=0.0, le=1.0)
    currency: str | None = None
    pattern: str


class DateCandidate(BaseModel):
    """One date interpretation found in free text."""

    value: date
    confidence: float = Field(ge=0.0, le=1.0)
    pattern: str
