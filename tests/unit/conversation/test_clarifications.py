"""Test localised clarification messages."""
from expense_parsing.conversation.clarifications import (
    AMBIGUOUS_INTENT_PROMPTS, ambiguous_intent_prompt, error_message, low_confidence_message, missing_amount_message,
)
from expense_parsing.international.currency_patterns import SUPPORTED_LOCALES
from expense_parsing.models.expense import FallbackReason


class TestClarifications:
    def test_ambiguous_prompt_for_every_locale(self):
        assert set(AMBIGUOUS_INTENT_PROMPTS) == set(SUPPORTED_LOCALES)

    def test_ambiguous_prompt_fallback(self):
        assert ambiguous_intent_prompt("xx-XX") == ambiguous_intent_prompt("en-US")

    def test_error_message_by_reason(self):
        assert "too long" in error_message(FallbackReason.TIMEOUT, "en-US")
        assert error_message(FallbackReason.TIMEOUT, "es").startswith("El servicio de IA")

    def test_unknown_reason_generic(self):
        assert error_message(FallbackReason.UNKNOWN, "en-US") == error_message(None, "en-US")

    def test_error_message_locale_fallback(self):
        assert error_message(FallbackReason.RATE_LIMIT, "pl-PL") == error_message(FallbackReason.RATE_LIMIT, "en-US")

    def test_missing_amount(self):
        assert "amount" in missing_amount_message("en-US")
        assert missing_amount_message("it-IT") == missing_amount_message("en-US")

    def test_low_confidence_german(self):
        assert low_confidence_message("de-DE").startswith("Ich brauche")
