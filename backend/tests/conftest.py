"""Shared fixtures: product records, a scripted text model and an API client."""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from httpx import ASGITransport, AsyncClient

from advisor.api.routes.shopping import get_catalog, get_model
from advisor.main import app
from advisor.models.contracts import ChatMessage, ProductRecord
from advisor.pipeline.mock_catalog import MockCatalog


def make_record(
    idx: int,
    *,
    price: float = 100.0,
    rating: float = 4.0,
    reviews: int = 100,
    name: str | None = None,
    **extra,
) -> ProductRecord:
    return ProductRecord(
        id=f"item-{idx}",
        name=name or f"Product {idx}",
        sale_price=price,
        rating=rating,
        review_count=reviews,
        **extra,
    )


class ScriptedModel:
    """TextModel test double that returns canned replies and records prompts."""

    def __init__(self, reply: str = "", *, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []
        self.chats: list[tuple[list[ChatMessage], str]] = []

    async def complete(self, prompt: str, *, system: str | None = None) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply

    async def chat(self, messages: Sequence[ChatMessage], *, system: str) -> str:
        self.chats.append((list(messages), system))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def catalog() -> MockCatalog:
    return MockCatalog()


@pytest.fixture
def model_override() -> dict:
    """Holder for the model the API should see; tests set ``["model"]``."""
    return {"model": None}


@pytest.fixture
async def client(catalog, model_override):
    """httpx client over the ASGI app with catalog and model overridden.

    Uses raise_app_exceptions=False so unhandled errors return 500 JSON
    (matching production behavior).
    """
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_model] = lambda: model_override["model"]
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
