"""Prompt template loading.

Templates live in ``advisor/prompts/*.txt`` and are read once per process.
Placeholders are ``{name}`` markers filled by plain string replacement, so
templates can embed literal JSON examples without escaping braces.
"""

from __future__ import annotations

from pathlib import Path

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "prompts"

_template_cache: dict[str, str] = {}


def load_prompt(name: str) -> str:
    """Return the raw template text for ``name`` (without the .txt suffix)."""
    if name not in _template_cache:
        _template_cache[name] = (PROMPTS_DIR / f"{name}.txt").read_text()
    return _template_cache[name]


def render_prompt(name: str, **values: object) -> str:
    prompt = load_prompt(name)
    for key, value in values.items():
        prompt = prompt.replace("{" + key + "}", str(value))
    return prompt
