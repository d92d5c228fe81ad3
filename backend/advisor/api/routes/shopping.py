"""Advisor API endpoints: a thin HTTP layer over the pipeline.

The catalog and text model are built once in the app lifespan and stored on
``app.state``; routes reach them through ``get_catalog`` / ``get_model`` so
tests can swap either with ``app.dependency_overrides``.

Pipeline errors are not caught here. ``ValidationError`` and
``UpstreamError`` are rendered by the handlers in ``advisor.main``.
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from advisor.config import settings
from advisor.models.contracts import (
    BudgetCheckRequest,
    BudgetCheckResponse,
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    QuestionsRequest,
    QuestionsResponse,
    RecommendationRequest,
    RecommendationResponse,
    RequirementSet,
    SearchRequest,
    SearchResult,
    SortOrder,
    SortStrategy,
)
from advisor.pipeline import intake
from advisor.pipeline.catalog import Catalog
from advisor.pipeline.recommend import recommend
from advisor.utils.llm import TextModel

logger = structlog.get_logger("api.shopping")

router = APIRouter(tags=["shopping"])

_UPSTREAM_RESPONSES = {422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}}


def get_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_model(request: Request) -> TextModel | None:
    return getattr(request.app.state, "model", None)


CatalogDep = Annotated[Catalog, Depends(get_catalog)]
ModelDep = Annotated[TextModel | None, Depends(get_model)]


def _error(status: int, code: str, message: str, *, retryable: bool = False) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(error=code, message=message, retryable=retryable).model_dump(),
    )


@router.post(
    "/budget-check",
    response_model=BudgetCheckResponse,
    responses={422: {"model": ErrorResponse}},
)
async def budget_check(body: BudgetCheckRequest, model: ModelDep) -> BudgetCheckResponse:
    """Is the budget realistic for the query? Never fails on model errors."""
    verdict = await intake.check_budget(
        body.query,
        body.budget,
        model if body.use_model else None,
    )
    return BudgetCheckResponse(
        verdict=verdict.verdict,
        realistic=verdict.realistic,
        suggested_minimum=verdict.suggested_minimum,
        message=intake.budget_message(verdict, body.query.strip(), body.budget),
    )


@router.post(
    "/questions",
    response_model=QuestionsResponse,
    responses={422: {"model": ErrorResponse}},
)
async def clarifying_questions(body: QuestionsRequest, model: ModelDep) -> QuestionsResponse:
    questions = await intake.generate_questions(
        body.query,
        body.budget,
        model=model,
        use_model=body.use_model,
    )
    return QuestionsResponse(questions=questions)


@router.post(
    "/recommendations",
    response_model=RecommendationResponse,
    responses=_UPSTREAM_RESPONSES,
)
async def recommendations(
    body: RecommendationRequest,
    catalog: CatalogDep,
    model: ModelDep,
) -> RecommendationResponse:
    """Optimize the query, search the catalog, filter by budget and rank."""
    result = await recommend(
        body.query,
        body.budget,
        RequirementSet.from_mapping(body.requirements),
        catalog,
        model,
        max_results=body.max_results or settings.max_results,
        page_size=settings.catalog_page_size,
    )
    optimized = result.optimized
    return RecommendationResponse(
        original_query=optimized.original_query,
        augmented_query=optimized.augmented_query,
        extracted_terms=optimized.terms,
        sort=optimized.sort,
        order=optimized.order,
        category_id=result.category_id,
        total_count=result.total_count,
        budget_fallback_applied=result.budget_fallback_applied,
        recommendations=result.recommendations,
    )


@router.get(
    "/products/search",
    response_model=SearchResult,
    responses=_UPSTREAM_RESPONSES,
)
async def search_products(
    catalog: CatalogDep,
    query: Annotated[str, Query(min_length=1)],
    category_id: str | None = None,
    sort: SortStrategy | None = None,
    order: SortOrder | None = None,
    start: Annotated[int | None, Query(ge=0)] = None,
    num_items: Annotated[int | None, Query(ge=1, le=25)] = None,
) -> SearchResult:
    """Raw catalog search, passed straight through to the configured catalog."""
    request = SearchRequest(
        query=query,
        category_id=category_id,
        sort=sort,
        order=order if sort == "price" else None,
        start=start,
        num_items=num_items,
    )
    return await catalog.search(request)


@router.get(
    "/products/trending",
    response_model=SearchResult,
    responses={502: {"model": ErrorResponse}},
)
async def trending_products(catalog: CatalogDep) -> SearchResult:
    return await catalog.trending()


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def chat(body: ChatRequest, model: ModelDep) -> ChatResponse | JSONResponse:
    """One advisor turn. Requires a configured text model."""
    if model is None:
        logger.warning("chat_model_unavailable", provider=settings.llm_provider)
        return _error(503, "model_unavailable", "The shopping advisor is not available right now")
    reply = await intake.advise(model, body.query, body.budget, body.messages)
    return ChatResponse(response=reply)
