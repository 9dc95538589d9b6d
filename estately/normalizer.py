# estately/normalizer.py
from typing import Any, Optional

from estately.filters import AREA_UNITS, CURRENCIES
from estately.schemas import ListingRecord

# remote spreadsheet-style keys first, then the camelCase the forms post
FIELD_KEYS: dict[str, tuple[str, ...]] = {
    "id": ("id", "ID", "row_number"),
    "name": ("Name", "name"),
    "email": ("Email", "email"),
    "phone_number": ("Phone_Number", "phoneNumber", "phone"),
    "location": ("Location_", "Location", "location"),
    "price_range": ("Price_Range", "priceRange"),
    "property_type": ("Property_Type", "propertyType"),
    "area": ("Area", "area"),
    "construction_status": ("Construction_Status", "constructionStatus"),
    "image_url": ("Image", "image", "imageUrl"),
}


def _first(item: dict, keys: tuple[str, ...]) -> Optional[str]:
    for k in keys:
        v = item.get(k)
        if v is None or v == "":
            continue
        if isinstance(v, (str, int, float)):
            return str(v)
    return None


def unwrap(item: Any) -> Optional[dict]:
    # rows come back either flat or as {"json": {...}}
    if isinstance(item, dict):
        inner = item.get("json")
        return inner if isinstance(inner, dict) else item
    return None


def normalize_record(item: Any) -> Optional[ListingRecord]:
    row = unwrap(item)
    if row is None:
        return None
    return ListingRecord(**{field: _first(row, keys) for field, keys in FIELD_KEYS.items()})


def normalize_listings(payload: Any) -> Optional[list[ListingRecord]]:
    """Map a webhook reply into records; None when it is not a JSON array."""
    if not isinstance(payload, list):
        return None
    records = []
    for item in payload:
        rec = normalize_record(item)
        if rec is not None:
            records.append(rec)
    return records


def split_trailing_token(value: Optional[str], tokens: list[str], default: str) -> tuple[str, str]:
    """Split off a trailing currency/unit token: "1200 sq ft" -> ("1200", "sq ft")."""
    value = (value or "").strip()
    for token in tokens:
        if value.endswith(token):
            return value[: -len(token)].strip(), token
    return value, default


def edit_defaults(record: ListingRecord) -> dict:
    """Pre-fill values for the edit form, composite fields split back apart."""
    price, currency = split_trailing_token(record.price_range, CURRENCIES, "USD")
    area, unit = split_trailing_token(record.area, AREA_UNITS, "sq ft")
    return {
        "name": record.name or "",
        "email": record.email or "",
        "phoneNumber": record.phone_number or "",
        "location": record.location or "",
        "priceRange": price,
        "priceCurrency": currency,
        "propertyType": record.property_type or "House",
        "area": area,
        "areaUnit": unit,
        "constructionStatus": record.construction_status or "Ready to move",
    }


def record_from_edit(record: ListingRecord, payload: dict) -> ListingRecord:
    """The record as it looks after a successful card_edit."""
    return record.model_copy(update={
        "name": payload.get("name"),
        "email": payload.get("email"),
        "phone_number": payload.get("phoneNumber"),
        "location": payload.get("location"),
        "price_range": payload.get("priceRange"),
        "property_type": payload.get("propertyType"),
        "area": payload.get("area"),
        "construction_status": payload.get("constructionStatus"),
    })
