"""In-memory catalog with the same contract as ``CatalogClient``.

Lets the whole pipeline run without catalog credentials. Records are ranked
by a weighted text match, then filtered by category and re-sorted by the
requested server-side strategy.
"""

from __future__ import annotations

import structlog

from advisor.models.contracts import (
    ProductRecord,
    SearchRequest,
    SearchResult,
    TaxonomyCategory,
)
from advisor.pipeline.mock_data import MOCK_PRODUCTS, MOCK_TAXONOMY

log = structlog.get_logger("mock_catalog")

DEFAULT_PAGE_SIZE = 10
TRENDING_COUNT = 5

# Weights for relevance scoring
TITLE_TERM_WEIGHT = 10
CATEGORY_WEIGHT = 8
FEATURE_TERM_WEIGHT = 5
DESCRIPTION_TERM_WEIGHT = 3
RATING_WEIGHT = 2
BADGE_BONUS = 5


def _query_terms(query: str) -> list[str]:
    return [t for t in query.lower().split() if len(t) > 1]


def relevance_score(record: ProductRecord, query: str) -> tuple[float, bool]:
    """Return (score, matched) for a record against the query.

    ``matched`` is False when no query term appears anywhere in the record, in
    which case the record is not a search hit regardless of its rating bonus.
    """
    terms = _query_terms(query)
    title = record.name.lower()
    features = " ".join(record.features).lower()
    description = f"{record.short_description} {record.long_description}".lower()
    category = record.category_path.lower()

    score = 0.0
    matched = False
    for term in terms:
        if term in title:
            score += TITLE_TERM_WEIGHT
            matched = True
        if term in features:
            score += FEATURE_TERM_WEIGHT
            matched = True
        if term in description:
            score += DESCRIPTION_TERM_WEIGHT
            matched = True
        if term in category:
            matched = True

    if query.strip() and query.lower().strip() in category:
        score += CATEGORY_WEIGHT

    score += record.rating * RATING_WEIGHT
    if record.editors_choice:
        score += BADGE_BONUS
    if record.best_seller:
        score += BADGE_BONUS
    return score, matched


def _category_paths(nodes: list[TaxonomyCategory], parent: str = "") -> dict[str, str]:
    paths: dict[str, str] = {}
    for node in nodes:
        path = f"{parent}/{node.name}" if parent else node.name
        paths[node.id] = path
        paths.update(_category_paths(node.children, path))
    return paths


def _server_sort(records: list[ProductRecord], request: SearchRequest) -> list[ProductRecord]:
    if request.sort == "price":
        return sorted(
            records,
            key=lambda r: r.sale_price,
            reverse=request.order == "descending",
        )
    if request.sort == "customerRating":
        return sorted(records, key=lambda r: r.rating, reverse=True)
    if request.sort == "bestseller":
        return sorted(records, key=lambda r: (r.best_seller, r.review_count), reverse=True)
    return records


class MockCatalog:
    def __init__(
        self,
        products: list[ProductRecord] | None = None,
        taxonomy: list[TaxonomyCategory] | None = None,
    ) -> None:
        self.products = list(MOCK_PRODUCTS if products is None else products)
        self.taxonomy = MOCK_TAXONOMY if taxonomy is None else taxonomy
        self._paths = _category_paths(self.taxonomy)

    async def aclose(self) -> None:
        return None

    async def search(self, request: SearchRequest) -> SearchResult:
        scored = []
        for record in self.products:
            score, matched = relevance_score(record, request.query)
            if matched:
                scored.append((score, record))
        # Stable: equal scores keep catalog order
        scored.sort(key=lambda s: s[0], reverse=True)
        hits = [record for _, record in scored]

        if request.category_id:
            path = self._paths.get(request.category_id)
            if path is None:
                hits = []
            else:
                hits = [
                    r
                    for r in hits
                    if r.category_path == path or r.category_path.startswith(path + "/")
                ]

        hits = _server_sort(hits, request)
        start = request.start or 0
        size = request.num_items or DEFAULT_PAGE_SIZE
        page = hits[start : start + size]

        log.info(
            "mock_catalog_search",
            query=request.query[:80],
            category_id=request.category_id,
            sort=request.sort,
            hits=len(hits),
            returned=len(page),
        )
        return SearchResult(records=page, total_count=len(hits))

    async def get_taxonomy(self) -> list[TaxonomyCategory]:
        return self.taxonomy

    async def trending(self) -> SearchResult:
        ranked = sorted(self.products, key=lambda r: r.review_count, reverse=True)
        return SearchResult(records=ranked[:TRENDING_COUNT], total_count=len(self.products))
