"""Pydantic models for offlookup API responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
    message: str


class NutritionFacts(BaseModel):
    """Nutrition facts per 100g; ``None`` where the record has no value."""

    energy_100g: Any = None
    fat_100g: Any = None
    saturated_fat_100g: Any = None
    carbohydrates_100g: Any = None
    sugars_100g: Any = None
    fiber_100g: Any = None
    proteins_100g: Any = None
    salt_100g: Any = None
    sodium_100g: Any = None


class ProductDetail(BaseModel):
    """Curated product fields plus the untouched source record."""

    barcode: Any = None
    name: Any
    brands: Any
    categories: Any
    ingredients: Any
    nutrition_grade: Any
    countries: Any
    image_url: Any = None
    nutrition_facts: NutritionFacts
    raw_data: dict[str, Any]


class ProductResponse(BaseModel):
    """Result of a barcode lookup."""

    success: bool = True
    barcode_searched: str
    barcode_found: Any = None
    product: ProductDetail


class ProductSummary(BaseModel):
    """A product as listed in search results."""

    barcode: Any = None
    name: Any = None
    brands: Any = None
    categories: Any = None
    nutrition_grade: Any = None
    image_url: Any = None


class SearchResponse(BaseModel):
    """Products whose name matches a query."""

    success: bool = True
    query: str
    count: int
    products: list[ProductSummary] = []


class BrandCount(BaseModel):
    """Number of products carrying a brand string."""

    model_config = ConfigDict(populate_by_name=True)

    #: Serialized as ``_id`` to match the aggregation output.
    brand: Any = Field(alias="_id")
    count: int


class Statistics(BaseModel):
    """Aggregate counts over the product collection."""

    total_products: int
    products_with_images: int
    products_with_nutrition_grades: int
    top_brands: list[BrandCount] = []


class StatsResponse(BaseModel):
    """Database statistics."""

    success: bool = True
    statistics: Statistics


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "OK"
    database: str
    timestamp: str
