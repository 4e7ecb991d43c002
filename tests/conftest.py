import re
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from pymongo.errors import ServerSelectionTimeoutError

from offlookup.app import app
from offlookup.services.store import ProductStore

PRODUCTS: list[dict[str, Any]] = [
    {
        "_id": "64b000000000000000000001",
        "code": "3017620422003",
        "product_name": "Nutella",
        "brands": "Ferrero",
        "categories": "Spreads",
        "ingredients_text": "Sugar, palm oil, hazelnuts",
        "nutrition_grades": "e",
        "countries": "France",
        "image_url": "https://images.example/nutella.jpg",
        "energy_100g": 2252,
        "fat_100g": 30.9,
        "saturated-fat_100g": 10.6,
        "sugars_100g": 56.3,
        "salt_100g": 0.107,
    },
    {
        "_id": "64b000000000000000000002",
        "code": "0036000291452",
        "product_name": "Facial Tissues",
        "brands": "Kleenex",
    },
    {
        "_id": "64b000000000000000000003",
        "code": "029315000011",
        "product_name": "Nutella Biscuits",
        "brands": "Ferrero",
        "nutrition_grades": "e",
    },
    {
        "_id": "64b000000000000000000004",
        "code": "5449000000996",
        "product_name": "Coca-Cola",
        "brands": "",
        "image_url": None,
    },
]


class FakeCursor:
    """Minimal stand-in for a motor cursor."""

    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self.documents = documents

    def limit(self, n: int) -> "FakeCursor":
        return FakeCursor(self.documents[:n])

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        return list(self.documents if length is None else self.documents[:length])


class FakeDatabase:
    def __init__(self) -> None:
        self.healthy = True

    async def command(self, name: str) -> dict[str, Any]:
        if not self.healthy:
            raise ServerSelectionTimeoutError("no servers available")
        return {"ok": 1.0}


class FakeCollection:
    """In-memory collection supporting the queries the store issues.

    Records every ``find_one`` filter in ``lookups`` so tests can check the
    order of candidate keys.
    """

    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self.documents = [dict(d) for d in documents]
        self.database = FakeDatabase()
        self.lookups: list[str] = []
        self.last_filter: dict[str, Any] | None = None

    async def find_one(self, filter: dict[str, Any]) -> dict[str, Any] | None:
        self.lookups.append(filter["code"])
        return next((d for d in self.documents if d.get("code") == filter["code"]), None)

    def find(self, filter: dict[str, Any]) -> FakeCursor:
        self.last_filter = filter
        condition = filter["product_name"]
        pattern = re.compile(condition["$regex"], re.IGNORECASE)
        return FakeCursor([d for d in self.documents if pattern.search(d.get("product_name") or "")])

    async def count_documents(self, filter: dict[str, Any]) -> int:
        if not filter:
            return len(self.documents)
        (key,) = filter
        return sum(1 for d in self.documents if d.get(key) is not None)

    def aggregate(self, pipeline: list[dict[str, Any]]) -> FakeCursor:
        counts: dict[str, int] = {}
        for d in self.documents:
            brand = d.get("brands")
            if brand is not None and brand != "":
                counts[brand] = counts.get(brand, 0) + 1
        ranked = sorted(counts.items(), key=lambda item: -item[1])
        return FakeCursor([{"_id": brand, "count": count} for brand, count in ranked])


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def collection() -> FakeCollection:
    return FakeCollection(PRODUCTS)


@pytest.fixture
def store(collection: FakeCollection) -> ProductStore:
    return ProductStore(collection)


@pytest.fixture
def attached_store(store: ProductStore, monkeypatch: pytest.MonkeyPatch) -> ProductStore:
    """Attach the fake-backed store to the app for the duration of a test."""
    monkeypatch.setattr(app.state, "store", store, raising=False)
    return store


@pytest.fixture
async def client(attached_store):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
