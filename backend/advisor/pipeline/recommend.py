"""Recommendation pipeline: optimize -> category -> search -> budget filter -> rank.

Stages run strictly in order; each consumes the previous stage's output.
A failed catalog search propagates as ``UpstreamError`` because there is no
list to fall back to. A failed taxonomy lookup only loses the category hint.
"""

from __future__ import annotations

import structlog

from advisor.config import CATALOG_MAX_PAGE_SIZE
from advisor.errors import UpstreamError, ValidationError
from advisor.models.contracts import RecommendationResult, RequirementSet, SearchRequest
from advisor.pipeline.budget import filter_by_budget, within_budget
from advisor.pipeline.catalog import Catalog, find_category_id
from advisor.pipeline.query_builder import optimize
from advisor.pipeline.ranking import rank
from advisor.utils.llm import TextModel

log = structlog.get_logger("recommend")


async def resolve_category(catalog: Catalog, query: str) -> str | None:
    try:
        taxonomy = await catalog.get_taxonomy()
    except UpstreamError as e:
        log.warning("taxonomy_unavailable", error=str(e))
        return None
    return find_category_id(query, taxonomy)


async def recommend(
    query: str,
    budget: float,
    requirements: RequirementSet,
    catalog: Catalog,
    model: TextModel | None = None,
    max_results: int = 5,
    page_size: int = CATALOG_MAX_PAGE_SIZE,
) -> RecommendationResult:
    if not query or not query.strip():
        raise ValidationError("A search query is required", field="query")
    if max_results < 1:
        raise ValidationError("max_results must be at least 1", field="max_results")

    optimized = optimize(query, requirements, budget)
    category_id = await resolve_category(catalog, optimized.original_query)

    request = SearchRequest(
        query=optimized.augmented_query,
        category_id=category_id,
        sort=optimized.sort,
        order=optimized.order,
        num_items=min(max(page_size, 1), CATALOG_MAX_PAGE_SIZE),
    )
    result = await catalog.search(request)

    candidates = filter_by_budget(result.records, budget)
    fallback_applied = bool(
        budget > 0 and result.records and not within_budget(result.records, budget)
    )

    recommendations = await rank(candidates, requirements, max_results, model)
    log.info(
        "recommendation_complete",
        augmented_query=optimized.augmented_query,
        category_id=category_id,
        total=result.total_count,
        candidates=len(candidates),
        returned=len(recommendations),
        budget_fallback=fallback_applied,
    )
    return RecommendationResult(
        optimized=optimized,
        category_id=category_id,
        total_count=result.total_count,
        candidates_considered=len(candidates),
        budget_fallback_applied=fallback_applied,
        recommendations=recommendations,
    )
