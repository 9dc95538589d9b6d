import json

import httpx
import pytest

from estately.schemas import ListingRecord
from estately.webhooks.client import WebhookClient


@pytest.fixture
def records():
    return [
        ListingRecord(id="1", location="Multan", price_range="1,000,000 - 5,000,000 PKR",
                      property_type="House", area="10 marla", construction_status="Ready to move"),
        ListingRecord(id="2", location="Lahore", price_range="500,001 - 1,000,000 USD",
                      property_type="Flat", area="1200 sq ft", construction_status="Under construction"),
    ]


class FakeWebhooks:
    """Routes webhook paths to canned replies and records what was posted."""

    def __init__(self):
        self.routes: dict[str, httpx.Response] = {}
        self.calls: list[tuple[str, dict]] = []

    def reply(self, path: str, status: int = 200, json_body=None, text: str | None = None):
        if text is not None:
            self.routes[path] = httpx.Response(status, text=text)
        else:
            self.routes[path] = httpx.Response(status, json=json_body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content or b"{}")
        self.calls.append((request.url.path, body))
        return self.routes.get(request.url.path, httpx.Response(404, json={"message": "not found"}))

    def client(self) -> WebhookClient:
        return WebhookClient(base_url="https://hooks.test", transport=httpx.MockTransport(self.handler))


@pytest.fixture
def hooks():
    return FakeWebhooks()
