"""Intake: query analysis, clarifying questions, budget check and advisor chat.

Question generation has two paths. The heuristic path infers a category from
the query and asks fixed questions for whatever the query leaves open. The
model path asks the text model for a JSON array of questions. Model failures
never block the flow: they degrade to an empty question list, a REALISTIC
budget verdict, or the heuristic answer.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

import pydantic
import structlog

from advisor.errors import UpstreamError, ValidationError
from advisor.models.contracts import (
    BudgetVerdict,
    ChatMessage,
    ClarifyingQuestion,
    QueryAnalysis,
)
from advisor.utils.json_extract import ParseFailed, extract_json_array
from advisor.utils.llm import TextModel
from advisor.utils.prompts import load_prompt, render_prompt

log = structlog.get_logger("intake")

MAX_MODEL_QUESTIONS = 3
DEFAULT_PRICE_MAX = 2000

REALISTIC = "REALISTIC"
_LOW_VERDICT_RE = re.compile(r"^LOW \$(\d+)$")
_RAM_RE = re.compile(r"(\d+)\s?GB RAM", re.IGNORECASE)
_STORAGE_RE = re.compile(r"(\d+)\s?(GB|TB) (SSD|HDD)", re.IGNORECASE)
_RAM_WORD_RE = re.compile(r"\bram\b", re.IGNORECASE)

# (minimum, maximum) price estimates by product kind, used when no budget is given
_PRICE_RANGES: dict[str, tuple[int, int]] = {
    "gaming_computer": (800, 2500),
    "business_computer": (500, 1500),
    "computer": (300, 2000),
    "phone": (200, 1200),
    "espresso": (200, 800),
    "single_serve": (50, 200),
    "coffee": (30, 300),
}


def _require_query(query: str) -> str:
    query = (query or "").strip()
    if not query:
        raise ValidationError("A product query is required", field="query")
    return query


def _format_dollars(amount: float) -> str:
    return f"{amount:,.0f}" if float(amount).is_integer() else f"{amount:,.2f}"


# === Query analysis ===


def _is_phone(q: str) -> bool:
    return "phone" in q and "headphone" not in q


def _infer_category(q: str) -> str:
    if "laptop" in q or "computer" in q:
        return "Computers"
    if "phone" in q or "smartphone" in q:
        return "Electronics"
    if "coffee" in q or "espresso" in q:
        return "Home & Kitchen"
    if "smart" in q or "alexa" in q or "speaker" in q:
        return "Smart Home"
    return "Electronics"


def _specific_requirements(query: str) -> dict[str, str]:
    q = query.lower()
    found: dict[str, str] = {}
    is_computer = "laptop" in q or "computer" in q
    if is_computer and "gaming" in q:
        found["Use Case"] = "Gaming"
        found["Graphics"] = "Dedicated"
    if is_computer and "business" in q:
        found["Use Case"] = "Business"

    if ram := _RAM_RE.search(query):
        found["RAM"] = f"{ram.group(1)}GB"
    if storage := _STORAGE_RE.search(query):
        amount, unit, kind = storage.groups()
        found["Storage"] = f"{amount}{unit.upper()} {kind.upper()}"

    if "espresso" in q:
        found["Type"] = "Espresso Machine"
    elif "drip" in q:
        found["Type"] = "Drip Coffee Maker"
    elif "single" in q or "k-cup" in q or "pod" in q:
        found["Type"] = "Single Serve"
    return found


def _estimate_price_range(category: str, q: str, found: dict[str, str]) -> tuple[int, int]:
    if category == "Computers":
        use_case = found.get("Use Case")
        if use_case == "Gaming":
            return _PRICE_RANGES["gaming_computer"]
        if use_case == "Business":
            return _PRICE_RANGES["business_computer"]
        return _PRICE_RANGES["computer"]
    if category == "Electronics" and _is_phone(q):
        return _PRICE_RANGES["phone"]
    if category == "Home & Kitchen" and "coffee" in q:
        kind = found.get("Type")
        if kind == "Espresso Machine":
            return _PRICE_RANGES["espresso"]
        if kind == "Single Serve":
            return _PRICE_RANGES["single_serve"]
        return _PRICE_RANGES["coffee"]
    return 0, DEFAULT_PRICE_MAX


def _suggest_questions(category: str, q: str, found: dict[str, str]) -> list[str]:
    questions: list[str] = []
    if category == "Computers":
        if "Use Case" not in found:
            questions.append("What will you primarily use this computer for?")
        if "RAM" not in found:
            questions.append("How much RAM do you need?")
        if "Storage" not in found:
            questions.append("How much storage space do you require?")
    elif category == "Electronics" and _is_phone(q):
        questions.append("Do you prefer Android or iOS?")
        questions.append("How important is camera quality to you?")
        questions.append("Do you need 5G connectivity?")
    elif category == "Home & Kitchen" and "coffee" in q:
        if "Type" not in found:
            questions.append("What type of coffee maker are you looking for?")
        questions.append("How many cups do you typically brew at once?")
        questions.append("Do you prefer programmable features?")
    return questions


def analyze_query(query: str, budget: float = 0) -> QueryAnalysis:
    """Infer category, keywords, stated requirements and a price range.

    A positive budget replaces the estimated range with ``0..budget``.
    """
    q = query.lower()
    category = _infer_category(q)
    keywords = [w for w in re.sub(r"[^\w\s]", "", q).split() if len(w) > 2]
    found = _specific_requirements(query)

    price_min, price_max = _estimate_price_range(category, q, found)
    if budget > 0:
        price_min, price_max = 0, budget

    return QueryAnalysis(
        category=category,
        keywords=keywords,
        specific_requirements=found,
        suggested_questions=_suggest_questions(category, q, found),
        price_min=price_min,
        price_max=price_max,
    )


# === Clarifying questions ===


def options_for_question(question: str, category: str) -> list[str]:
    """Canned answer options for the heuristic questions; [] when none fit."""
    q = question.lower()
    if "use" in q or "purpose" in q:
        if category == "Computers":
            return [
                "Everyday browsing and office work",
                "Gaming",
                "Video/photo editing",
                "Programming/development",
                "Business/professional use",
            ]
        if category == "Electronics" and "phone" in q:
            return [
                "Social media and communication",
                "Photography and video",
                "Gaming",
                "Business/professional use",
                "Basic usage (calls, texts, light apps)",
            ]

    if "coffee" in q:
        if "type" in q:
            return [
                "Drip coffee maker",
                "Espresso machine",
                "Single-serve pod machine",
                "French press",
                "Pour-over system",
            ]
        if "cups" in q or "brew" in q:
            return [
                "Just for myself (1-2 cups)",
                "Small household (3-4 cups)",
                "Family size (5-10 cups)",
                "Large quantity (10+ cups)",
            ]

    if category == "Computers":
        if "storage" in q:
            return ["256GB SSD", "512GB SSD", "1TB SSD", "1TB HDD", "Combination of SSD and HDD"]
        if _RAM_WORD_RE.search(question):
            return ["4GB", "8GB", "16GB", "32GB or more"]

    if "how important" in q:
        return ["Very important", "Somewhat important", "Not important"]
    return []


def to_clarifying_question(question: str, category: str) -> ClarifyingQuestion:
    q = question.lower()
    if "how much" in q or "how many" in q:
        return ClarifyingQuestion(question=question, type="open_ended")
    if "do you" in q or "are you" in q or "would you" in q:
        return ClarifyingQuestion(question=question, type="boolean")
    options = options_for_question(question, category)
    if not options:
        return ClarifyingQuestion(question=question, type="open_ended")
    return ClarifyingQuestion(question=question, type="multiple_choice", options=options)


def parse_model_questions(entries: list) -> list[ClarifyingQuestion]:
    questions: list[ClarifyingQuestion] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        try:
            questions.append(ClarifyingQuestion.model_validate(entry))
        except pydantic.ValidationError:
            log.debug("question_entry_rejected", entry=str(entry)[:120])
            continue
        if len(questions) == MAX_MODEL_QUESTIONS:
            break
    return questions


async def _model_questions(model: TextModel, query: str, budget: float) -> list[ClarifyingQuestion]:
    budget_text = f"${_format_dollars(budget)}" if budget > 0 else "not specified"
    prompt = render_prompt("question_generation", query=query, budget=budget_text)
    try:
        text = await model.complete(prompt)
    except UpstreamError as e:
        log.warning("question_generation_failed", error=str(e))
        return []

    result = extract_json_array(text)
    if isinstance(result, ParseFailed):
        log.warning(
            "question_generation_unparseable",
            reason=result.reason,
            response_preview=result.raw_text[:200],
        )
        return []
    return parse_model_questions(result.value)


async def generate_questions(
    query: str,
    budget: float = 0,
    model: TextModel | None = None,
    use_model: bool = False,
) -> list[ClarifyingQuestion]:
    """Clarifying questions for ``query``.

    Heuristic questions are preferred unless ``use_model`` is set. The model
    is consulted when heuristics yield nothing or when asked for explicitly;
    without a model the heuristic result (possibly empty) is returned.
    """
    query = _require_query(query)
    analysis = analyze_query(query, budget)

    if not use_model and analysis.suggested_questions:
        questions = [
            to_clarifying_question(q, analysis.category) for q in analysis.suggested_questions
        ]
        log.info("questions_generated", source="heuristic", count=len(questions))
        return questions

    if model is None:
        questions = [
            to_clarifying_question(q, analysis.category) for q in analysis.suggested_questions
        ]
        log.info("questions_generated", source="heuristic", count=len(questions), model=False)
        return questions

    questions = await _model_questions(model, query, budget)
    log.info("questions_generated", source="model", count=len(questions))
    return questions


# === Budget validation ===


def parse_budget_verdict(text: str | None) -> BudgetVerdict:
    """Read a ``REALISTIC`` / ``LOW $<n>`` sentinel. Anything else is REALISTIC."""
    match = _LOW_VERDICT_RE.match((text or "").strip())
    if match is None:
        return BudgetVerdict(verdict=REALISTIC, realistic=True)
    minimum = int(match.group(1))
    return BudgetVerdict(verdict=f"LOW ${minimum}", realistic=False, suggested_minimum=minimum)


def local_budget_verdict(query: str, budget: float) -> str:
    estimated_min, _ = _estimate_price_range(
        _infer_category(query.lower()),
        query.lower(),
        _specific_requirements(query),
    )
    if budget < estimated_min:
        return f"LOW ${estimated_min}"
    return REALISTIC


async def check_budget(
    query: str,
    budget: float,
    model: TextModel | None = None,
) -> BudgetVerdict:
    """Judge whether ``budget`` is realistic for ``query``.

    Uses the model when one is given, the local price estimate otherwise or
    when the model call fails. A budget of zero or less is always realistic.
    """
    query = _require_query(query)
    if budget <= 0:
        return BudgetVerdict(verdict=REALISTIC, realistic=True)

    if model is not None:
        prompt = render_prompt("budget_check", query=query, budget=_format_dollars(budget))
        try:
            verdict = parse_budget_verdict(await model.complete(prompt))
            log.info("budget_checked", source="model", verdict=verdict.verdict)
            return verdict
        except UpstreamError as e:
            log.warning("budget_check_model_failed", error=str(e))

    verdict = parse_budget_verdict(local_budget_verdict(query, budget))
    log.info("budget_checked", source="estimate", verdict=verdict.verdict)
    return verdict


def budget_message(verdict: BudgetVerdict, query: str, budget: float) -> str:
    if verdict.realistic:
        return "Your budget is realistic for this product category."
    return (
        f"Your budget of ${_format_dollars(budget)} is lower than typical for {query}. "
        f"Most {query} start around ${verdict.suggested_minimum}."
    )


# === Advisor chat ===


def opening_message(query: str, budget: float | None) -> ChatMessage:
    text = f"I'm looking for {query}."
    if budget:
        text += f" My budget is ${_format_dollars(budget)}."
    text += " What should I consider?"
    return ChatMessage(role="user", content=text)


async def advise(
    model: TextModel,
    query: str | None = None,
    budget: float | None = None,
    messages: Sequence[ChatMessage] = (),
) -> str:
    """One advisor turn over the conversation so far.

    The history must end with a user turn. When only ``query`` is given the
    conversation is opened on the shopper's behalf.
    """
    history = list(messages)
    if not history:
        if not query or not query.strip():
            raise ValidationError("A query or a message history is required", field="messages")
        history = [opening_message(query.strip(), budget)]
    if history[-1].role != "user":
        raise ValidationError("The last message must come from the user", field="messages")

    reply = await model.chat(history, system=load_prompt("advisor_system"))
    log.info("advisor_reply", turns=len(history), reply_chars=len(reply))
    return reply.strip()
