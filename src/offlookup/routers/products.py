"""Product lookup, search and statistics endpoints."""

import logging

from fastapi import APIRouter, Depends, Query, Request

from offlookup.barcode import resolve
from offlookup.config import Settings, get_settings
from offlookup.errors import NotFoundError, UpstreamError, ValidationError
from offlookup.models import ProductResponse, SearchResponse, StatsResponse
from offlookup.presenters import present_product, present_summary
from offlookup.services.store import ProductStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> ProductStore:
    """Return the store attached to the app at startup."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        logger.error("Request received before the product store was connected")
        raise UpstreamError("Database not connected")
    return store


def parse_limit(value: str | None, default: int, maximum: int) -> int:
    """Parse the ``limit`` query parameter.

    Anything that is not a positive integer falls back to *default*; larger
    values are clamped to *maximum*.
    """
    try:
        limit = int(value) if value is not None else default
    except ValueError:
        return default
    if limit <= 0:
        return default
    return min(limit, maximum)


@router.get("/product/{barcode}", response_model=ProductResponse)
async def get_product(barcode: str, store: ProductStore = Depends(get_store)) -> ProductResponse:
    """Look up a product by barcode.

    Tries the normalized barcode first, then the barcode as given, then the
    13-digit form without its leading zero.
    """
    resolution = resolve(barcode)
    product = await store.find_by_candidates(resolution.candidates)
    if product is None:
        raise NotFoundError(
            f"No product found with barcode: {resolution.raw} (also tried: {resolution.normalized})",
            error="Product not found",
        )

    return ProductResponse(
        barcode_searched=resolution.raw,
        barcode_found=product.get("code"),
        product=present_product(product),
    )


@router.get("/search", response_model=SearchResponse)
async def search(
    q: str | None = Query(None, description="Text to look for in product names"),
    limit: str | None = Query(None, description="Maximum number of products to return"),
    store: ProductStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> SearchResponse:
    """Search products by name (case-insensitive substring match)."""
    if not q:
        raise ValidationError(
            "Please provide a search query using ?q=your_search_term",
            error="Missing query parameter",
        )
    max_results = parse_limit(limit, settings.search_default_limit, settings.search_max_limit)
    products = await store.search(q, max_results)
    return SearchResponse(
        query=q,
        count=len(products),
        products=[present_summary(p) for p in products],
    )


@router.get("/stats", response_model=StatsResponse)
async def stats(store: ProductStore = Depends(get_store)) -> StatsResponse:
    """Return collection-wide product statistics."""
    statistics = await store.statistics()
    return StatsResponse(statistics=statistics)
