# estately/services/listings.py
import logging
from dataclasses import dataclass
from typing import Optional

from estately.filters import FilteredView
from estately.normalizer import normalize_listings
from estately.schemas import ListingRecord
from estately.webhooks.client import WebhookClient, WebhookError

logger = logging.getLogger(__name__)

KINDS = ("sellers", "buyers")


@dataclass
class FetchResult:
    records: list[ListingRecord]
    notice: Optional[str] = None
    stale: bool = False


class ListingFeed:
    """
    Fetches one kind of listing into a FilteredView.

    Every activation takes a new generation number; a reply that resolves
    after a newer activation started is dropped instead of overwriting
    the view.
    """

    def __init__(self, client: WebhookClient, view: FilteredView):
        if view.kind not in KINDS:
            raise ValueError(f"unknown listing kind: {view.kind!r}")
        self.client = client
        self.view = view
        self.generation = 0

    async def _fetch_raw(self):
        if self.view.kind == "buyers":
            return await self.client.get_buyers()
        return await self.client.get_sellers()

    async def activate(self) -> FetchResult:
        self.generation += 1
        mine = self.generation

        notice = None
        try:
            payload = await self._fetch_raw()
            records = normalize_listings(payload)
            if records is None:
                records, notice = [], "Unexpected format: could not parse listings from the server."
            elif not records:
                notice = "No listings found"
        except WebhookError as e:
            records, notice = [], f"Failed to fetch listings: {e.message}"

        if mine != self.generation:
            logger.debug("dropping stale %s fetch (gen %d, latest %d)", self.view.kind, mine, self.generation)
            return FetchResult(records=records, notice=notice, stale=True)

        self.view.load(records)
        logger.info("loaded %d %s", len(records), self.view.kind)
        return FetchResult(records=records, notice=notice)
