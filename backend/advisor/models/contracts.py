"""Advisor contract models.

Pipeline stages exchange these models; the HTTP layer serialises them as-is.
Records are frozen: a search result is never mutated after deserialisation.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from advisor.errors import ValidationError

SortStrategy = Literal["relevance", "price", "customerRating", "bestseller"]
SortOrder = Literal["ascending", "descending"]
QuestionType = Literal["multiple_choice", "open_ended", "boolean"]

# === Catalog ===


class ProductRecord(BaseModel):
    """One catalog entry. ``original_price >= sale_price`` is not guaranteed."""

    model_config = {"frozen": True}

    id: str
    name: str
    brand: str = "Unknown"
    sale_price: float = Field(ge=0)
    original_price: float | None = None
    rating: float = Field(ge=0, le=5, default=0.0)
    review_count: int = Field(ge=0, default=0)
    short_description: str = ""
    long_description: str = ""
    features: list[str] = []
    specifications: dict[str, str] = {}
    category_path: str = ""
    image_url: str | None = None
    product_url: str = ""
    in_stock: bool = True
    # Merchandising badges, only populated by the mock catalog
    editors_choice: bool = False
    best_seller: bool = False


class SearchRequest(BaseModel):
    query: str = Field(min_length=1)
    category_id: str | None = None
    sort: SortStrategy | None = None
    order: SortOrder | None = None
    start: int | None = Field(default=None, ge=0)
    num_items: int | None = Field(default=None, ge=1, le=25)

    @model_validator(mode="after")
    def _order_only_with_price(self) -> SearchRequest:
        if self.order is not None and self.sort != "price":
            raise ValueError("order is only meaningful when sort is 'price'")
        return self


class SearchResult(BaseModel):
    records: list[ProductRecord] = []
    total_count: int = Field(ge=0, default=0)


class TaxonomyCategory(BaseModel):
    id: str
    name: str
    children: list[TaxonomyCategory] = []


# === Requirements ===


def normalize_question(text: str) -> str:
    """Trim and collapse internal whitespace."""
    return " ".join(text.split())


@dataclass(frozen=True)
class RequirementSet:
    """Ordered question → answer pairs gathered during clarification.

    Keys are normalised once here; everything downstream iterates pairs in the
    order the questions were asked.
    """

    pairs: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str] | None) -> RequirementSet:
        if not mapping:
            return cls()
        seen: set[str] = set()
        pairs: list[tuple[str, str]] = []
        for question, answer in mapping.items():
            key = normalize_question(question)
            if not key:
                raise ValidationError("Requirement questions must not be blank", field="requirements")
            if key in seen:
                raise ValidationError(
                    f"Duplicate requirement question: {key!r}", field="requirements"
                )
            seen.add(key)
            pairs.append((key, str(answer).strip()))
        return cls(tuple(pairs))

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def as_dict(self) -> dict[str, str]:
        return dict(self.pairs)


# === Pipeline outputs ===


class OptimizedQuery(BaseModel):
    original_query: str
    augmented_query: str
    terms: list[str] = []
    sort: SortStrategy = "relevance"
    order: SortOrder | None = None


class RankedRecommendation(BaseModel):
    record: ProductRecord
    score: float = Field(ge=0, le=100)
    reasons: list[str] = Field(min_length=1, max_length=3)


class ClarifyingQuestion(BaseModel):
    question: str = Field(min_length=1)
    type: QuestionType
    options: list[str] = []

    @model_validator(mode="after")
    def _options_match_type(self) -> ClarifyingQuestion:
        if self.type == "multiple_choice":
            if not [o for o in self.options if o.strip()]:
                raise ValueError("multiple_choice questions need at least one option")
        elif self.options:
            self.options = []
        return self


class QueryAnalysis(BaseModel):
    category: str
    keywords: list[str] = []
    specific_requirements: dict[str, str] = {}
    suggested_questions: list[str] = []
    price_min: float = 0
    price_max: float = 2000


class BudgetVerdict(BaseModel):
    verdict: str
    realistic: bool
    suggested_minimum: int | None = None


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class RecommendationResult(BaseModel):
    optimized: OptimizedQuery
    category_id: str | None = None
    total_count: int = 0
    candidates_considered: int = 0
    budget_fallback_applied: bool = False
    recommendations: list[RankedRecommendation] = []


# === API ===


class ErrorResponse(BaseModel):
    error: str
    message: str
    retryable: bool
    detail: str | None = None


class BudgetCheckRequest(BaseModel):
    query: str
    budget: float = Field(ge=0, default=0)
    use_model: bool = False


class BudgetCheckResponse(BaseModel):
    verdict: str
    realistic: bool
    suggested_minimum: int | None = None
    message: str


class QuestionsRequest(BaseModel):
    query: str
    budget: float = Field(ge=0, default=0)
    use_model: bool = False


class QuestionsResponse(BaseModel):
    questions: list[ClarifyingQuestion] = []


class RecommendationRequest(BaseModel):
    query: str
    budget: float = Field(ge=0, default=0)
    requirements: dict[str, str] = {}
    max_results: int | None = Field(default=None, ge=1, le=25)


class RecommendationResponse(BaseModel):
    original_query: str
    augmented_query: str
    extracted_terms: list[str] = []
    sort: SortStrategy
    order: SortOrder | None = None
    category_id: str | None = None
    total_count: int = 0
    budget_fallback_applied: bool = False
    recommendations: list[RankedRecommendation] = []


class ChatRequest(BaseModel):
    query: str | None = None
    budget: float | None = Field(default=None, ge=0)
    messages: list[ChatMessage] = []


class ChatResponse(BaseModel):
    response: str
