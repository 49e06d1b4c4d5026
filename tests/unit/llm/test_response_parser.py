"""Test JSON extraction from LLM responses."""
import pytest
from expense_parsing.llm.base import LLMResponse
from expense_parsing.llm.response_parser import extract_json_from_response


class TestExtractJSON:
    def test_direct_json(self):
        result = extract_json_from_response('{"amount": 5000, "title": "Dinner"}')
        assert result == {"amount": 5000, "title": "Dinner"}

    def test_json_block(self):
        text = 'Here is the expense:\n```json\n{"amount": 5000}\n```\nDone.'
        assert extract_json_from_response(text) == {"amount": 5000}

    def test_unlabelled_block(self):
        text = '```\n{"intent": "balance_query"}\n```'
        assert extract_json_from_response(text) == {"intent": "balance_query"}

    def test_json_with_surrounding_text(self):
        text = 'Sure! {"participants": ["John", "Jane"]} Let me know.'
        assert extract_json_from_response(text) == {"participants": ["John", "Jane"]}

    def test_malformed_raises(self):
        with pytest.raises(ValueError):
            extract_json_from_response("This is not JSON at all")

    def test_array_is_not_an_object(self):
        with pytest.raises(ValueError):
            extract_json_from_response('[{"amount": 5000}]')

    def test_bare_number_raises(self):
        with pytest.raises(ValueError, match="Expected a JSON object"):
            extract_json_from_response("5000")

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            extract_json_from_response(None)

    def test_whitespace_handling(self):
        result = extract_json_from_response('  \n  {"key": "value"}  \n  ')
        assert result == {"key": "value"}


class TestLLMResponse:
    def test_total_tokens(self):
        assert LLMResponse(content="{}", model="m", input_tokens=120, output_tokens=40).total_tokens == 160
