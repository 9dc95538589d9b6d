# estately/services/pricing.py
from estately.schemas import PriceCheckForm, PriceCheckResponse
from estately.webhooks.client import WebhookClient


async def check_price(client: WebhookClient, form: PriceCheckForm) -> PriceCheckResponse:
    data = await client.check_price(form)
    # the price bot sometimes wraps its answer as [{"output": ...}]
    if isinstance(data, list) and len(data) == 1 and isinstance(data[0], dict):
        data = data[0]
    if isinstance(data, dict) and isinstance(data.get("output"), str):
        return PriceCheckResponse(output=data["output"])
    if isinstance(data, str):
        return PriceCheckResponse(output=data)
    return PriceCheckResponse(raw=data)
