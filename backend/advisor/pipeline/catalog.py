"""Product catalog client.

Formats a ``SearchRequest`` into the affiliate catalog's query string, issues
one GET, and deserialises the page into ``ProductRecord``s. No caching and no
retries: a failed call surfaces immediately as ``UpstreamError``.

Authentication is not this module's concern. A header provider (see
``advisor.utils.signing``) is injected at construction time.
"""

from __future__ import annotations

import urllib.parse
from collections.abc import Callable, Mapping
from typing import Any, Protocol

import httpx
import structlog

from advisor.config import CATALOG_MAX_PAGE_SIZE, Settings
from advisor.errors import UpstreamError
from advisor.models.contracts import (
    ProductRecord,
    SearchRequest,
    SearchResult,
    TaxonomyCategory,
)

log = structlog.get_logger("catalog")

HeaderProvider = Callable[[], Mapping[str, str]]

# encodeURIComponent leaves these unescaped; the catalog expects the same
_URI_COMPONENT_SAFE = "-_.!~*'()"


class Catalog(Protocol):
    async def search(self, request: SearchRequest) -> SearchResult: ...

    async def get_taxonomy(self) -> list[TaxonomyCategory]: ...

    async def trending(self) -> SearchResult: ...

    async def aclose(self) -> None: ...


def _encode(value: str) -> str:
    return urllib.parse.quote(value, safe=_URI_COMPONENT_SAFE)


def build_query_string(request: SearchRequest) -> str:
    """Serialise only the fields that are present; nothing is sent empty."""
    parts = [f"query={_encode(request.query)}"]
    if request.category_id:
        parts.append(f"categoryId={_encode(request.category_id)}")
    # "relevance" is the catalog default and is expressed by omitting sort
    if request.sort and request.sort != "relevance":
        parts.append(f"sort={_encode(request.sort)}")
        if request.sort == "price" and request.order:
            parts.append(f"order={request.order}")
    if request.start is not None:
        parts.append(f"start={request.start}")
    if request.num_items:
        parts.append(f"numItems={min(request.num_items, CATALOG_MAX_PAGE_SIZE)}")
    return "&".join(parts)


# === Deserialisation ===


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> int:
    number = _as_float(value)
    if number is None or number < 0:
        return 0
    return int(number)


def parse_record(item: Mapping[str, Any]) -> ProductRecord | None:
    """Convert one catalog item to a ``ProductRecord``.

    Returns None for items that cannot satisfy the record invariants
    (no id, no name, or no usable non-negative sale price).
    """
    item_id = item.get("itemId")
    name = item.get("name")
    sale_price = _as_float(item.get("salePrice"))
    if item_id is None or not name or sale_price is None or sale_price < 0:
        log.warning(
            "catalog_item_dropped",
            reason="missing id, name or sale price",
            item_id=item_id,
        )
        return None

    rating = _as_float(item.get("customerRating")) or 0.0
    features = item.get("features") or []
    specifications = item.get("specifications") or {}

    return ProductRecord(
        id=str(item_id),
        name=str(name),
        brand=item.get("brandName") or "Unknown",
        sale_price=sale_price,
        original_price=_as_float(item.get("msrp")),
        rating=min(max(rating, 0.0), 5.0),
        review_count=_as_int(item.get("numReviews")),
        short_description=item.get("shortDescription") or "",
        long_description=item.get("longDescription") or "",
        features=[str(f) for f in features if f] if isinstance(features, list) else [],
        specifications=(
            {str(k): str(v) for k, v in specifications.items()}
            if isinstance(specifications, dict)
            else {}
        ),
        category_path=item.get("categoryPath") or "",
        image_url=item.get("largeImage") or item.get("mediumImage") or item.get("thumbnailImage"),
        product_url=item.get("productTrackingUrl") or item.get("productUrl") or "",
        in_stock=item.get("stock") == "Available",
    )


def parse_search_page(data: Mapping[str, Any]) -> SearchResult:
    raw_items = data.get("items") or []
    records = [r for r in (parse_record(i) for i in raw_items if isinstance(i, dict)) if r]
    total = data.get("totalResults")
    total_count = _as_int(total) if total is not None else len(records)
    return SearchResult(records=records, total_count=total_count)


def _parse_categories(raw: Any) -> list[TaxonomyCategory]:
    if not isinstance(raw, list):
        return []
    categories = []
    for entry in raw:
        if not isinstance(entry, dict) or entry.get("id") is None or not entry.get("name"):
            continue
        categories.append(
            TaxonomyCategory(
                id=str(entry["id"]),
                name=str(entry["name"]),
                children=_parse_categories(entry.get("children")),
            )
        )
    return categories


# === Category finder ===


def find_category_id(query: str, categories: list[TaxonomyCategory]) -> str | None:
    """Pick the taxonomy category that best matches the query terms.

    Each query term contained in a category name scores 10, plus 5 inside the
    Electronics department, plus 2 per level of depth. Ties keep tree order.
    """
    terms = query.lower().split()
    matches: list[tuple[int, str]] = []

    def walk(nodes: list[TaxonomyCategory], parent_path: str) -> None:
        for node in nodes:
            path = f"{parent_path} > {node.name}" if parent_path else node.name
            name = node.name.lower()
            depth = path.count(">")
            score = 0
            for term in terms:
                if term in name:
                    score += 10
                    if "Electronics" in path:
                        score += 5
                    score += depth * 2
            if score > 0:
                matches.append((score, node.id))
            walk(node.children, path)

    walk(categories, "")
    if not matches:
        return None
    matches.sort(key=lambda m: m[0], reverse=True)
    return matches[0][1]


# === HTTP client ===


class CatalogClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str,
        search_path: str,
        taxonomy_path: str = "",
        trends_path: str = "",
        signer: HeaderProvider | None = None,
    ) -> None:
        self._http = http_client
        self.base_url = base_url.rstrip("/")
        self.search_path = search_path.strip("/")
        self.taxonomy_path = taxonomy_path.strip("/")
        self.trends_path = trends_path.strip("/")
        self._signer = signer

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._signer is not None:
            headers.update(self._signer())
        return headers

    async def _get(self, path: str, query_string: str = "") -> Any:
        url = f"{self.base_url}/{path}"
        if query_string:
            url = f"{url}?{query_string}"

        try:
            resp = await self._http.get(url, headers=self._headers())
        except httpx.RequestError as e:
            log.warning("catalog_request_error", path=path, error_type=type(e).__name__)
            raise UpstreamError(None, type(e).__name__, source="catalog") from e

        if not resp.is_success:
            log.warning("catalog_request_failed", path=path, status=resp.status_code)
            raise UpstreamError(resp.status_code, resp.reason_phrase, source="catalog")

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(resp.status_code, "response body is not JSON", source="catalog") from e

    async def search(self, request: SearchRequest) -> SearchResult:
        query_string = build_query_string(request)
        data = await self._get(self.search_path, query_string)
        result = parse_search_page(data if isinstance(data, dict) else {})
        log.info(
            "catalog_search_complete",
            query=request.query[:80],
            sort=request.sort,
            records=len(result.records),
            total=result.total_count,
        )
        return result

    async def get_taxonomy(self) -> list[TaxonomyCategory]:
        data = await self._get(self.taxonomy_path)
        return _parse_categories(data.get("categories") if isinstance(data, dict) else None)

    async def trending(self) -> SearchResult:
        data = await self._get(self.trends_path)
        return parse_search_page(data if isinstance(data, dict) else {})


def build_catalog(config: Settings, http_client: httpx.AsyncClient | None = None) -> Catalog:
    """Construct the catalog selected by ``catalog_mode``."""
    if config.catalog_mode == "mock":
        from advisor.pipeline.mock_catalog import MockCatalog

        return MockCatalog()

    signer: HeaderProvider | None = None
    if config.signing_configured:
        from advisor.utils.signing import CatalogSigner

        signer = CatalogSigner(
            config.catalog_consumer_id,
            config.catalog_key_version,
            config.catalog_private_key,
        )
    else:
        log.warning("catalog_signing_not_configured")

    return CatalogClient(
        http_client or httpx.AsyncClient(timeout=config.catalog_timeout_seconds),
        config.catalog_base_url,
        config.catalog_search_path,
        config.catalog_taxonomy_path,
        config.catalog_trends_path,
        signer=signer,
    )
