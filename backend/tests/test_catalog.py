"""Tests for the catalog client: query strings, deserialisation, errors, categories."""

import httpx
import pytest

from advisor.config import Settings
from advisor.errors import UpstreamError
from advisor.models.contracts import SearchRequest, TaxonomyCategory
from advisor.pipeline.catalog import (
    CatalogClient,
    build_catalog,
    build_query_string,
    find_category_id,
    parse_record,
    parse_search_page,
)
from advisor.pipeline.mock_catalog import MockCatalog

BASE = "https://catalog.test"

_ITEM = {
    "itemId": 12345,
    "name": "Wireless Headphones",
    "brandName": "Acme",
    "salePrice": 79.99,
    "msrp": 99.99,
    "customerRating": "4.3",
    "numReviews": 812,
    "shortDescription": "Over-ear",
    "categoryPath": "Electronics/Audio/Headphones",
    "largeImage": "https://img.test/large.jpg",
    "productTrackingUrl": "https://shop.test/ip/12345",
    "stock": "Available",
    "features": ["Bluetooth 5.3", ""],
}


def _client(handler, signer=None) -> CatalogClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CatalogClient(
        http,
        BASE,
        "v2/search",
        taxonomy_path="v2/taxonomy",
        trends_path="v2/trends",
        signer=signer,
    )


class TestQueryString:
    """Only present fields are serialised."""

    def test_query_only(self):
        assert build_query_string(SearchRequest(query="usb c hub")) == "query=usb%20c%20hub"

    def test_relevance_sort_is_omitted(self):
        qs = build_query_string(SearchRequest(query="tv", sort="relevance"))
        assert "sort" not in qs

    def test_price_sort_with_order(self):
        qs = build_query_string(
            SearchRequest(query="tv", sort="price", order="ascending", start=0, num_items=10)
        )
        assert qs == "query=tv&sort=price&order=ascending&start=0&numItems=10"

    def test_category_and_bestseller(self):
        qs = build_query_string(SearchRequest(query="tv", category_id="3944", sort="bestseller"))
        assert qs == "query=tv&categoryId=3944&sort=bestseller"

    def test_special_characters_encoded(self):
        qs = build_query_string(SearchRequest(query="50\" tv & stand"))
        assert qs == "query=50%22%20tv%20%26%20stand"


class TestDeserialisation:
    """Catalog items become ProductRecords or are dropped."""

    def test_full_item(self):
        record = parse_record(_ITEM)
        assert record.id == "12345"
        assert record.brand == "Acme"
        assert record.sale_price == 79.99
        assert record.original_price == 99.99
        assert record.rating == 4.3
        assert record.review_count == 812
        assert record.features == ["Bluetooth 5.3"]
        assert record.image_url == "https://img.test/large.jpg"
        assert record.product_url == "https://shop.test/ip/12345"
        assert record.in_stock is True

    def test_defaults(self):
        record = parse_record({"itemId": 1, "name": "Thing", "salePrice": 5})
        assert record.brand == "Unknown"
        assert record.rating == 0
        assert record.review_count == 0
        assert record.in_stock is False

    def test_rating_is_clamped(self):
        record = parse_record({"itemId": 1, "name": "Thing", "salePrice": 5, "customerRating": 7})
        assert record.rating == 5

    @pytest.mark.parametrize(
        "item",
        [
            {"name": "No id", "salePrice": 5},
            {"itemId": 1, "salePrice": 5},
            {"itemId": 1, "name": "No price"},
            {"itemId": 1, "name": "Negative", "salePrice": -1},
            {"itemId": 1, "name": "Text price", "salePrice": "call us"},
        ],
    )
    def test_unusable_items_are_dropped(self, item):
        assert parse_record(item) is None

    def test_page_total(self):
        page = parse_search_page({"items": [_ITEM, {"name": "bad"}], "totalResults": 40})
        assert len(page.records) == 1
        assert page.total_count == 40

    def test_page_without_total(self):
        page = parse_search_page({"items": [_ITEM]})
        assert page.total_count == 1


class TestCatalogClient:
    """One GET per call; non-success statuses surface as UpstreamError."""

    async def test_search_builds_url(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": [_ITEM], "totalResults": 1})

        client = _client(handler)
        result = await client.search(SearchRequest(query="wireless headphones", num_items=5))
        assert str(seen[0].url) == f"{BASE}/v2/search?query=wireless%20headphones&numItems=5"
        assert result.records[0].name == "Wireless Headphones"
        await client.aclose()

    async def test_signer_headers_are_sent(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": []})

        client = _client(handler, signer=lambda: {"WM_CONSUMER.ID": "abc"})
        await client.search(SearchRequest(query="tv"))
        assert seen[0].headers["WM_CONSUMER.ID"] == "abc"
        assert seen[0].headers["Accept"] == "application/json"

    async def test_error_status_raises(self):
        client = _client(lambda request: httpx.Response(503))
        with pytest.raises(UpstreamError) as exc_info:
            await client.search(SearchRequest(query="tv"))
        assert exc_info.value.status_code == 503
        assert exc_info.value.status_text == "Service Unavailable"
        assert exc_info.value.source == "catalog"

    async def test_no_retry(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        client = _client(handler)
        with pytest.raises(UpstreamError):
            await client.search(SearchRequest(query="tv"))
        assert len(calls) == 1

    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = _client(handler)
        with pytest.raises(UpstreamError) as exc_info:
            await client.search(SearchRequest(query="tv"))
        assert exc_info.value.status_code is None

    async def test_non_json_body_raises(self):
        client = _client(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(UpstreamError):
            await client.search(SearchRequest(query="tv"))

    async def test_taxonomy(self):
        body = {
            "categories": [
                {"id": "1", "name": "Electronics", "children": [{"id": "1_2", "name": "TVs"}]},
                {"name": "missing id"},
            ]
        }
        client = _client(lambda request: httpx.Response(200, json=body))
        taxonomy = await client.get_taxonomy()
        assert [c.id for c in taxonomy] == ["1"]
        assert taxonomy[0].children[0].name == "TVs"

    async def test_trending(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"items": [_ITEM]})

        client = _client(handler)
        result = await client.trending()
        assert seen[0].url.path == "/v2/trends"
        assert len(result.records) == 1


class TestFindCategory:
    """Taxonomy matching: +10 per term, +5 inside Electronics, +2 per depth level."""

    TAXONOMY = [
        TaxonomyCategory(
            id="e",
            name="Electronics",
            children=[
                TaxonomyCategory(
                    id="e_c",
                    name="Computers",
                    children=[TaxonomyCategory(id="e_c_l", name="Laptops")],
                ),
            ],
        ),
        TaxonomyCategory(id="o", name="Office", children=[TaxonomyCategory(id="o_l", name="Laptops")]),
    ]

    def test_deeper_electronics_match_wins(self):
        assert find_category_id("gaming laptop", self.TAXONOMY) == "e_c_l"

    def test_no_match(self):
        assert find_category_id("garden hose", self.TAXONOMY) is None

    def test_tie_keeps_tree_order(self):
        taxonomy = [
            TaxonomyCategory(id="a", name="Kettles"),
            TaxonomyCategory(id="b", name="Kettles"),
        ]
        assert find_category_id("kettles", taxonomy) == "a"


class TestBuildCatalog:
    """Factory picks the catalog from settings."""

    def test_mock_mode(self):
        assert isinstance(build_catalog(Settings(catalog_mode="mock")), MockCatalog)

    async def test_live_mode_without_signing(self):
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        catalog = build_catalog(Settings(catalog_mode="live", catalog_consumer_id=""), http)
        assert isinstance(catalog, CatalogClient)
        assert catalog._signer is None
        await catalog.aclose()
