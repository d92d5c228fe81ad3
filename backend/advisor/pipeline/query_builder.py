"""Query optimisation from clarifying answers.

Two independent decisions are made from the same requirement pairs:
1. Term extraction: salient tokens (brands, sizes, features, category jargon)
   are appended to the user's query, at most MAX_TERMS of them.
2. Sort strategy: price-sensitive > quality-focused > budget set > relevance.
"""

from __future__ import annotations

import re
from collections.abc import Callable

import structlog

from advisor.errors import ValidationError
from advisor.models.contracts import OptimizedQuery, RequirementSet, SortOrder, SortStrategy

log = structlog.get_logger("query_builder")

MAX_TERMS = 3
MIN_ANSWER_LENGTH = 3
SKIP_ANSWERS = frozenset({"yes", "no", "maybe", "not sure"})
LOW_BUDGET_THRESHOLD = 100

_BRAND_RE = re.compile(r"\b[A-Z][a-zA-Z]*\b")
_SIZE_RE = re.compile(
    r"\d+(?:\.\d+)?(?:\s*(?:inch(?:es)?|cm|mm|ft|qt|oz|cups?)\b|[\"”])?",
    re.IGNORECASE,
)
_FEATURE_SPLIT_RE = re.compile(r",|\sand\s")
_RAM_RE = re.compile(r"\d+\s*gb", re.IGNORECASE)

_PRICE_QUESTION_WORDS = ("budget", "price", "cost")
_PRICE_ANSWER_WORDS = ("important", "concerned", "low", "cheap")
_QUALITY_QUESTION_WORDS = ("quality", "important")
_QUALITY_ANSWER_WORDS = ("high quality", "best", "premium", "reliable")


def _mentions(text: str, words: tuple[str, ...]) -> bool:
    return any(w in text for w in words)


def carries_signal(answer: str) -> bool:
    """Short or non-committal answers contribute no search terms."""
    return len(answer) >= MIN_ANSWER_LENGTH and answer.lower() not in SKIP_ANSWERS


# === Category-agnostic rules (keyed on the question) ===


def _generic_terms(question: str, answer: str) -> list[str]:
    q = question.lower()
    terms: list[str] = []
    if _mentions(q, ("brand", "manufacturer")):
        terms.extend(_BRAND_RE.findall(answer))
    if _mentions(q, ("size", "inch", "dimension")):
        terms.extend(m.strip() for m in _SIZE_RE.findall(answer))
    if _mentions(q, ("feature", "important")):
        for clause in _FEATURE_SPLIT_RE.split(answer):
            clause = clause.strip()
            if len(clause) > 3:
                terms.append(clause)
    return terms


# === Category-specific rules (keyed on the original query) ===


def _laptop_terms(question: str, answer: str) -> list[str]:
    q, a = question.lower(), answer.lower()
    terms: list[str] = []
    if _mentions(q, ("gaming", "use", "purpose")):
        if "gaming" in a or ("gaming" in q and "yes" in a):
            terms.append("gaming")
    if _mentions(q, ("memory", "ram")):
        terms.extend(_RAM_RE.findall(answer))
    if _mentions(q, ("processor", "cpu")):
        if _mentions(a, ("intel", "i5", "i7", "i9")):
            terms.append("Intel")
            terms.extend(tier for tier in ("i5", "i7", "i9") if tier in a)
        if _mentions(a, ("amd", "ryzen")):
            terms.append("AMD")
            if "ryzen" in a:
                terms.append("Ryzen")
    return terms


def _headphone_terms(question: str, answer: str) -> list[str]:
    q, a = question.lower(), answer.lower()
    terms: list[str] = []
    if _mentions(q, ("wireless", "bluetooth")) and _mentions(a, ("yes", "wireless", "bluetooth")):
        terms.extend(["wireless", "bluetooth"])
    if _mentions(q, ("noise", "cancel")) and _mentions(a, ("yes", "noise", "cancel")):
        terms.append("noise cancelling")
    return terms


def _phone_terms(question: str, answer: str) -> list[str]:
    q, a = question.lower(), answer.lower()
    terms: list[str] = []
    if _mentions(q, ("android", "ios", "operating system")):
        if "android" in a:
            terms.append("Android")
        if _mentions(a, ("ios", "iphone", "apple")):
            terms.append("iPhone")
    if "5g" in q and _mentions(a, ("yes", "5g")):
        terms.append("5G")
    return terms


def _coffee_terms(question: str, answer: str) -> list[str]:
    q, a = question.lower(), answer.lower()
    terms: list[str] = []
    if "type" in q:
        if "espresso" in a:
            terms.append("espresso")
        if "drip" in a:
            terms.append("drip")
        if _mentions(a, ("pod", "single", "k-cup")):
            terms.append("single serve")
        if "french press" in a:
            terms.append("french press")
    if "programmable" in q and _mentions(a, ("yes", "programmable")):
        terms.append("programmable")
    return terms


def _category_rules(query: str) -> list[Callable[[str, str], list[str]]]:
    q = query.lower()
    rules: list[Callable[[str, str], list[str]]] = []
    if "laptop" in q:
        rules.append(_laptop_terms)
    if "headphone" in q:
        rules.append(_headphone_terms)
    elif "phone" in q:
        rules.append(_phone_terms)
    if _mentions(q, ("coffee", "espresso")):
        rules.append(_coffee_terms)
    return rules


def extract_terms(query: str, requirements: RequirementSet) -> list[str]:
    """Deduplicated terms in first-seen order, capped at MAX_TERMS."""
    rules = _category_rules(query)
    candidates: list[str] = []
    for question, answer in requirements:
        if not carries_signal(answer):
            continue
        candidates.extend(_generic_terms(question, answer))
        for rule in rules:
            candidates.extend(rule(question, answer))

    selected: list[str] = []
    for term in candidates:
        if term and term not in selected:
            selected.append(term)
        if len(selected) == MAX_TERMS:
            break
    return selected


def choose_sort_strategy(
    budget: float,
    requirements: RequirementSet,
) -> tuple[SortStrategy, SortOrder | None]:
    price_sensitive = False
    quality_focused = False
    for question, answer in requirements:
        q, a = question.lower(), answer.lower()
        if _mentions(q, _PRICE_QUESTION_WORDS) and _mentions(a, _PRICE_ANSWER_WORDS):
            price_sensitive = True
        if _mentions(q, _QUALITY_QUESTION_WORDS) and _mentions(a, _QUALITY_ANSWER_WORDS):
            quality_focused = True

    has_budget = budget > 0
    if price_sensitive or (has_budget and budget < LOW_BUDGET_THRESHOLD):
        return "price", "ascending"
    if quality_focused:
        return "customerRating", None
    if has_budget:
        return "bestseller", None
    return "relevance", None


def optimize(
    query: str,
    requirements: RequirementSet,
    budget: float = 0,
) -> OptimizedQuery:
    original = query.strip()
    if not original:
        raise ValidationError("A search query is required", field="query")

    terms = extract_terms(original, requirements)
    augmented = f"{original} {' '.join(terms)}" if terms else original
    sort, order = choose_sort_strategy(budget, requirements)

    log.info(
        "query_optimized",
        original=original,
        augmented=augmented,
        terms=terms,
        sort=sort,
        order=order,
    )
    return OptimizedQuery(
        original_query=original,
        augmented_query=augmented,
        terms=terms,
        sort=sort,
        order=order,
    )
