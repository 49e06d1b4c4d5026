"""Test the regex-based local extraction pass."""
from datetime import date
from expense_parsing.models.expense import Category
from expense_parsing.passes.local_extraction import (
    detect_category, extract_title, infer_payer, run_local_extraction,
)
from tests.factories import TODAY, make_group, make_request


class TestRunLocalExtraction:
    def test_full_message(self):
        local = run_local_extraction(make_request(), TODAY)
        candidate = local.candidate
        assert candidate.amount == 5000
        assert candidate.date == date(2026, 10, 18)
        assert candidate.participants == ["John", "Jane"]
        assert candidate.title == "Dinner"
        assert candidate.currency == "USD"
        assert local.missing_names == []

    def test_german_message(self):
        group = make_group(("Anna", "Lukas"), currency="EUR")
        request = make_request("Essen 25,50€ mit Anna gestern", locale="de-DE", group=group)
        candidate = run_local_extraction(request, TODAY).candidate
        assert candidate.amount == 2550
        assert candidate.currency == "EUR"
        assert candidate.date == date(2026, 10, 18)
        assert candidate.participants == ["Anna"]

    def test_everyone(self):
        candidate = run_local_extraction(make_request("Pizza $30 for everyone"), TODAY).candidate
        assert candidate.participants == ["John", "Jane", "Bob"]

    def test_no_amount(self):
        candidate = run_local_extraction(make_request("dinner with John"), TODAY).candidate
        assert candidate.amount is None
        assert "amount" in candidate.missing_fields()

    def test_unmatched_name_reported(self):
        local = run_local_extraction(make_request("paid $20 with Bobby"), TODAY)
        assert local.candidate.participants is None
        assert local.missing_names == ["Bobby"]


class TestExtractTitle:
    def test_strips_amount_date_and_names(self):
        assert extract_title("I paid $50 for dinner with John and Jane yesterday", ["John", "Jane"]) == "Dinner"

    def test_multi_word(self):
        assert extract_title("Uber ride to the airport $32", []) == "Uber ride to airport"

    def test_nothing_left(self):
        assert extract_title("$50", []) is None


class TestDetectCategory:
    CATEGORIES = [Category(id=1, name="Food & Drinks"), Category(id=2, name="Transport")]

    def test_keyword_group(self):
        assert detect_category("dinner at Luigi's", self.CATEGORIES) == "Food & Drinks"

    def test_named_category(self):
        assert detect_category("transport for the trip", self.CATEGORIES) == "Transport"

    def test_no_categories(self):
        assert detect_category("dinner", []) is None


class TestInferPayer:
    def test_named_payer(self):
        assert infer_payer("Jane paid $40 for gas", make_group()) == "p2"

    def test_speaker_paid(self):
        group = make_group(active_participant_id="p3")
        assert infer_payer("I paid $40 for gas", group) == "p3"

    def test_unknown(self):
        assert infer_payer("Gas $40", make_group()) is None
