"""MongoDB-backed product store.

Wraps a motor collection holding Open Food Facts product documents.  The
collection is passed in explicitly so the app can share one client across
requests and tests can substitute a fake.
"""

import logging
import re
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import PyMongoError

from offlookup.config import Settings
from offlookup.errors import UpstreamError

logger = logging.getLogger(__name__)

TOP_BRANDS_LIMIT = 5


class ProductStore:
    """Read-only queries against the products collection."""

    def __init__(self, collection: AsyncIOMotorCollection) -> None:
        self.collection = collection

    async def find_by_candidates(self, candidates: list[str]) -> dict[str, Any] | None:
        """Return the first product whose ``code`` equals one of *candidates*.

        Candidates are tried in order, one round trip each, stopping at the
        first hit.  Returns ``None`` when none of them match.
        """
        try:
            for candidate in candidates:
                product = await self.collection.find_one({"code": candidate})
                if product:
                    logger.debug("Barcode candidate %s matched", candidate)
                    return product
                logger.debug("Barcode candidate %s not found", candidate)
        except PyMongoError as e:
            logger.error("Product lookup failed for %s: %s", candidates, e)
            raise UpstreamError("Failed to query database") from e
        return None

    async def search(self, query: str, limit: int) -> list[dict[str, Any]]:
        """Case-insensitive substring search on ``product_name``."""
        name_filter = {"product_name": {"$regex": re.escape(query), "$options": "i"}}
        try:
            cursor = self.collection.find(name_filter).limit(limit)
            return await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error("Product search failed for '%s': %s", query, e)
            raise UpstreamError("Failed to search database") from e

    async def statistics(self) -> dict[str, Any]:
        """Document counts and the most common brands."""
        pipeline = [
            {"$match": {"brands": {"$exists": True, "$ne": ""}}},
            {"$group": {"_id": "$brands", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
            {"$limit": TOP_BRANDS_LIMIT},
        ]
        try:
            total = await self.collection.count_documents({})
            with_images = await self.collection.count_documents({"image_url": {"$exists": True, "$ne": None}})
            with_grades = await self.collection.count_documents({"nutrition_grades": {"$exists": True, "$ne": None}})
            top_brands = await self.collection.aggregate(pipeline).to_list(length=TOP_BRANDS_LIMIT)
        except PyMongoError as e:
            logger.error("Statistics query failed: %s", e)
            raise UpstreamError("Failed to get database statistics") from e
        return {
            "total_products": total,
            "products_with_images": with_images,
            "products_with_nutrition_grades": with_grades,
            "top_brands": top_brands,
        }

    async def ping(self) -> bool:
        """Return True if the database answers a ``ping`` command."""
        try:
            await self.collection.database.command("ping")
        except PyMongoError as e:
            logger.warning("Database ping failed: %s", e)
            return False
        return True


async def connect(settings: Settings) -> tuple[AsyncIOMotorClient, ProductStore]:
    """Open a client for *settings* and verify the server is reachable.

    Raises:
        UpstreamError: if the server does not answer within the configured
            selection timeout.  The client is closed before raising.
    """
    client: AsyncIOMotorClient = AsyncIOMotorClient(
        settings.mongodb_uri,
        serverSelectionTimeoutMS=settings.mongodb_timeout_ms,
    )
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        client.close()
        logger.error("Failed to connect to MongoDB: %s", e)
        raise UpstreamError("Failed to connect to database") from e

    collection = client[settings.database_name][settings.collection_name]
    logger.info("Connected to MongoDB database: %s", settings.database_name)
    return client, ProductStore(collection)
