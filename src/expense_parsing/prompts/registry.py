"""Prompt template registry with variable injection and versioning."""
from __future__ import annotations
from pathlib import Path
import hashlib
import re

TEMPLATES_DIR = Path(__file__).parent / "templates"

_PLACEHOLDER = re.compile(r"\{([a-z_]+)\}")


class PromptRegistry:
    """Loads prompt templates from ``templates/*.md`` and fills in variables."""

    def __init__(self, templates_dir: Path = TEMPLATES_DIR):
        self._templates_dir = templates_dir
        self._cache: dict[str, str] = {}
        self._versions: dict[str, str] = {}

    def load_template(self, name: str) -> str:
        """Load a prompt template by name (e.g., 'expense_extraction')."""
        if name not in self._cache:
            path = self._templates_dir / f"{name}.md"
            if not path.exists():
                raise FileNotFoundError(f"Prompt template not found: {path}")
            self._cache[name] = path.read_text(encoding="utf-8")
        return self._cache[name]

    def render(self, template_name: str, variables: dict | None = None) -> str:
        """Render a prompt template with ``{placeholder}`` substitution.

        Placeholders without a value are left as they are, so literal JSON
        braces in a template survive rendering.
        """
        template = self.load_template(template_name)
        values = {key: str(value) for key, value in (variables or {}).items()}
        return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)

    def get_version(self, template_name: str) -> str:
        """Return ``<name>@<sha256 prefix>`` so stored results can be traced to the exact prompt text."""
        if template_name not in self._versions:
            digest = hashlib.sha256(self.load_template(template_name).encode("utf-8")).hexdigest()
            self._versions[template_name] = f"{template_name}@{digest[:12]}"
        return self._versions[template_name]
