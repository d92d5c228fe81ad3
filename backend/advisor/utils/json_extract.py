"""Pull JSON out of free-form model text.

Model responses are never assumed to be pure JSON. The helpers here handle
the three shapes models actually produce:
1. Pure JSON: '[{"question": ...}]'
2. Code-fenced JSON: '```json\\n[...]\\n```'
3. JSON with preamble/postamble: 'Here you go:\\n[...]\\nHope that helps'

Results are tagged (``Parsed`` / ``ParseFailed``) so every caller handles the
failure branch explicitly.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from advisor.errors import ParseError


@dataclass(frozen=True)
class Parsed:
    value: Any


@dataclass(frozen=True)
class ParseFailed:
    raw_text: str
    reason: str

    def to_error(self) -> ParseError:
        return ParseError(self.reason, self.raw_text)


ParseResult = Parsed | ParseFailed


def strip_code_fence(text: str) -> str:
    """Remove markdown code fences (```json ... ``` or ```[...]```)."""
    text = text.strip()
    if not text.startswith("```"):
        return text
    text = text.removeprefix("```")
    for lang in ("json", "JSON"):
        text = text.removeprefix(lang)
    text = text.lstrip("\n")
    return text.rsplit("```", 1)[0].strip()


def find_balanced(text: str, open_char: str, close_char: str) -> str | None:
    """Return the first balanced ``open_char ... close_char`` span, or None.

    Brackets inside JSON strings (and escaped quotes) are ignored.
    """
    start = text.find(open_char)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape_next = False
    for i in range(start, len(text)):
        ch = text[i]
        if escape_next:
            escape_next = False
            continue
        if in_string:
            if ch == "\\":
                escape_next = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def _extract(text: str, expected: type, open_char: str, close_char: str) -> ParseResult:
    raw = text or ""
    cleaned = strip_code_fence(raw)
    if not cleaned:
        return ParseFailed(raw, "empty response")

    # Fast path: already clean JSON
    try:
        value = json.loads(cleaned)
        if isinstance(value, expected):
            return Parsed(value)
    except ValueError:
        pass

    span = find_balanced(cleaned, open_char, close_char)
    if span is None:
        return ParseFailed(raw, f"no balanced {open_char}{close_char} found")
    try:
        value = json.loads(span)
    except json.JSONDecodeError as exc:
        return ParseFailed(raw, f"malformed JSON: {exc.msg}")
    except ValueError as exc:
        # int() digit limit on oversized numbers
        return ParseFailed(raw, f"malformed JSON: {exc}")
    if not isinstance(value, expected):
        return ParseFailed(raw, f"expected {expected.__name__}, got {type(value).__name__}")
    return Parsed(value)


def extract_json_array(text: str) -> ParseResult:
    return _extract(text, list, "[", "]")


def extract_json_object(text: str) -> ParseResult:
    return _extract(text, dict, "{", "}")
