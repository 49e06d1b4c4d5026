"""Test prompt template loading and rendering."""
import pytest
from expense_parsing.prompts.registry import PromptRegistry


class TestPromptRegistry:
    def test_render_fills_placeholders(self, prompt_registry):
        prompt = prompt_registry.render("intent_classification", {
            "locale": "fr-FR",
            "participants": '["John", "Jane"]',
            "currency": "EUR",
        })
        assert "Message locale: fr-FR" in prompt
        assert "Group currency: EUR" in prompt
        assert "{locale}" not in prompt

    def test_literal_json_survives(self, prompt_registry):
        prompt = prompt_registry.render("expense_extraction", {"today": "2026-10-19"})
        assert "Today's date: 2026-10-19" in prompt
        assert '"intent": "expense_creation"' in prompt
        # no value given, left as is
        assert "{currency}" in prompt

    def test_missing_template(self, prompt_registry):
        with pytest.raises(FileNotFoundError):
            prompt_registry.load_template("does_not_exist")

    def test_version_is_stable(self, prompt_registry):
        version = prompt_registry.get_version("expense_extraction")
        assert version.startswith("expense_extraction@")
        assert len(version.split("@")[1]) == 12
        assert version == PromptRegistry().get_version("expense_extraction")

    def test_custom_directory(self, tmp_path):
        (tmp_path / "greeting.md").write_text("Hello {name}, {missing}", encoding="utf-8")
        registry = PromptRegistry(templates_dir=tmp_path)
        assert registry.render("greeting", {"name": "Ana"}) == "Hello Ana, {missing}"
