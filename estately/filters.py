# estately/filters.py
"""
Listing filter engine shared by the seller and buyer browse views.

Matching is literal: price brackets and area units are compared as text
against the composite ``priceRange`` / ``area`` strings the webhooks store
(e.g. "250,001 - 500,000 USD", "1200 sq ft"), never parsed into numbers.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, asdict
from typing import Optional, Sequence

from pydantic.alias_generators import to_camel

from estately.schemas import ListingRecord

USD_PRICE_RANGES = [
    "50,000 - 100,000",
    "100,001 - 250,000",
    "250,001 - 500,000",
    "500,001 - 1,000,000",
    "1,000,001+",
]
PKR_PRICE_RANGES = [
    "1,000,000 - 5,000,000",
    "5,000,001 - 10,000,000",
    "10,000,001 - 25,000,000",
    "25,000,001 - 50,000,000",
    "50,000,001+",
]
PROPERTY_TYPES = ["House", "Flat", "Plot", "Commercial"]
CONSTRUCTION_STATUSES = ["Ready to move", "Under construction"]
CURRENCIES = ["USD", "PKR"]
AREA_UNITS = ["sq ft", "marla", "kanal"]

# value emitted by the "All ..." entry of every select control
ALL = "all"


def price_ranges_for(currency: str) -> list[str]:
    return PKR_PRICE_RANGES if currency == "PKR" else USD_PRICE_RANGES


@dataclass
class FilterCriteria:
    location: str = ""
    price_range_label: str = ""
    price_currency: str = ""
    property_type: str = ""
    area_value: str = ""
    area_unit: str = ""
    construction_status: str = ""

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def set(self, name: str, value: Optional[str]) -> None:
        """Mutate one criterion. Switching to another currency drops the bracket
        label, since brackets come from a per-currency list."""
        if name not in self.field_names():
            raise ValueError(f"unknown filter field: {name!r}")
        value = value or ""
        if value == ALL:
            value = ""
        changed = getattr(self, name) != value
        setattr(self, name, value)
        if name == "price_currency" and changed:
            self.price_range_label = ""

    def apply(self, updates: dict[str, Optional[str]]) -> None:
        """Apply several mutations; the currency goes first so a label sent
        in the same batch survives the reset."""
        ordered = sorted(updates.items(), key=lambda kv: kv[0] != "price_currency")
        for name, value in ordered:
            if value is not None:
                self.set(name, value)

    def clear(self) -> None:
        for name in self.field_names():
            setattr(self, name, "")

    def is_empty(self) -> bool:
        return not any(asdict(self).values())

    def price_brackets(self) -> list[str]:
        return price_ranges_for(self.price_currency)

    def snapshot(self) -> tuple[str, ...]:
        return tuple(getattr(self, n) for n in self.field_names())

    def to_dict(self) -> dict[str, str]:
        return {to_camel(k): v for k, v in asdict(self).items()}


def _contains_ci(haystack: Optional[str], needle: str) -> bool:
    return needle.lower() in (haystack or "").lower()


def matches(record: ListingRecord, criteria: FilterCriteria) -> bool:
    """True when every non-empty criterion matches the record."""
    price = record.price_range or ""
    area = record.area or ""

    if criteria.location and not _contains_ci(record.location, criteria.location):
        return False
    if criteria.price_range_label and criteria.price_range_label not in price:
        return False
    if criteria.price_currency and not _contains_ci(price, criteria.price_currency):
        return False
    if criteria.property_type and record.property_type != criteria.property_type:
        return False
    if criteria.area_value and not _contains_ci(area, criteria.area_value):
        return False
    if criteria.area_unit and not _contains_ci(area, criteria.area_unit):
        return False
    if criteria.construction_status and record.construction_status != criteria.construction_status:
        return False
    return True


def filter_listings(
    records: Optional[Sequence[ListingRecord]], criteria: FilterCriteria
) -> Optional[list[ListingRecord]]:
    """None (not loaded yet) stays None; otherwise a new list in input order."""
    if records is None:
        return None
    return [r for r in records if matches(r, criteria)]


class FilteredView:
    """
    One browse view: the loaded records, the live criteria and the last
    computed result. The result is recomputed only after a load or a
    criteria mutation made through the view.
    """

    def __init__(self, kind: str = "sellers"):
        self.kind = kind
        self.criteria = FilterCriteria()
        self._records: Optional[list[ListingRecord]] = None
        self._loads = 0
        self._cache_key: Optional[tuple] = None
        self._cache: Optional[list[ListingRecord]] = None

    @property
    def records(self) -> Optional[list[ListingRecord]]:
        return self._records

    @property
    def loaded(self) -> bool:
        return self._records is not None

    def load(self, records: Optional[Sequence[ListingRecord]]) -> None:
        self._records = list(records) if records is not None else None
        self._loads += 1

    def replace(self, record: ListingRecord) -> bool:
        """Swap in an edited record (matched by id); counts as a fresh load."""
        if self._records is None or record.id is None:
            return False
        for i, existing in enumerate(self._records):
            if existing.id == record.id:
                self._records = self._records[:i] + [record] + self._records[i + 1:]
                self._loads += 1
                return True
        return False

    def set(self, name: str, value: Optional[str]) -> None:
        self.criteria.set(name, value)

    def apply(self, updates: dict[str, Optional[str]]) -> None:
        self.criteria.apply(updates)

    def clear(self) -> None:
        self.criteria.clear()

    def result(self) -> Optional[list[ListingRecord]]:
        key = (self._loads, self.criteria.snapshot())
        if key != self._cache_key:
            self._cache = filter_listings(self._records, self.criteria)
            self._cache_key = key
        return self._cache
