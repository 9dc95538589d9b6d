# estately/utils/formatting.py
from telegram.helpers import escape_markdown

from estately.filters import FilterCriteria
from estately.schemas import ListingRecord

LABELS = {
    "location": "Location",
    "price_range_label": "Price",
    "price_currency": "Currency",
    "property_type": "Type",
    "area_value": "Area",
    "area_unit": "Unit",
    "construction_status": "Status",
}

def _md(v: str | None) -> str:
    return escape_markdown(v or "N/A")

def fmt_card(rec: ListingRecord) -> str:
    parts = [
        f"*{_md((rec.name or 'Unnamed Seller')[:100])}*",
        f"_{_md(rec.property_type)}_",
        f"Location: {_md(rec.location)}",
        f"Price: {_md(rec.price_range)}",
        f"Area: {_md(rec.area)}",
        f"Status: {_md(rec.construction_status)}",
    ]
    if rec.phone_number:
        parts.append(f"Phone: {_md(rec.phone_number)}")
    if rec.email:
        parts.append(f"Email: {_md(rec.email)}")
    return "\n".join(parts)

def fmt_criteria(criteria: FilterCriteria) -> str:
    active = [f"{LABELS[k]}: {_md(getattr(criteria, k))}" for k in FilterCriteria.field_names() if getattr(criteria, k)]
    return "\n".join(active) if active else "No filters (showing everything)"

def photo_url(rec: ListingRecord) -> str | None:
    # inline data-URL images cannot be sent by reference
    if rec.image_url and rec.image_url.startswith(("http://", "https://")):
        return rec.image_url
    return None
