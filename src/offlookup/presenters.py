"""Shape raw product documents into API payloads.

Product documents are owned by the store and may lack any field, so
defaults are applied here and nowhere else.
"""

from typing import Any

from bson import ObjectId
from fastapi.encoders import jsonable_encoder

UNKNOWN = "Unknown"
NOT_AVAILABLE = "Not available"

#: Response key -> document key for the per-100g nutrition facts.
NUTRITION_FIELDS: dict[str, str] = {
    "energy_100g": "energy_100g",
    "fat_100g": "fat_100g",
    "saturated_fat_100g": "saturated-fat_100g",
    "carbohydrates_100g": "carbohydrates_100g",
    "sugars_100g": "sugars_100g",
    "fiber_100g": "fiber_100g",
    "proteins_100g": "proteins_100g",
    "salt_100g": "salt_100g",
    "sodium_100g": "sodium_100g",
}


def _field(record: dict[str, Any], key: str, default: Any = None) -> Any:
    """Return ``record[key]``, or *default* when it is missing, null or empty."""
    value = record.get(key)
    if value is None or value == "":
        return default
    return value


def raw_record(record: dict[str, Any]) -> dict[str, Any]:
    """Return a JSON-safe copy of *record* (ObjectIds become strings)."""
    return jsonable_encoder(
        record,
        custom_encoder={ObjectId: str},
        sqlalchemy_safe=False,
    )


def present_product(record: dict[str, Any]) -> dict[str, Any]:
    """Curated product view with defaults, plus the full raw record."""
    return {
        "barcode": record.get("code"),
        "name": _field(record, "product_name", UNKNOWN),
        "brands": _field(record, "brands", UNKNOWN),
        "categories": _field(record, "categories", UNKNOWN),
        "ingredients": _field(record, "ingredients_text", NOT_AVAILABLE),
        "nutrition_grade": _field(record, "nutrition_grades", UNKNOWN),
        "countries": _field(record, "countries", UNKNOWN),
        "image_url": _field(record, "image_url"),
        "nutrition_facts": {key: _field(record, source) for key, source in NUTRITION_FIELDS.items()},
        "raw_data": raw_record(record),
    }


def present_summary(record: dict[str, Any]) -> dict[str, Any]:
    """Short product view used in search results."""
    return {
        "barcode": record.get("code"),
        "name": record.get("product_name"),
        "brands": record.get("brands"),
        "categories": record.get("categories"),
        "nutrition_grade": record.get("nutrition_grades"),
        "image_url": record.get("image_url"),
    }
