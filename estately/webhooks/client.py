# estately/webhooks/client.py
import json
import logging
from typing import Any, Optional

import httpx

from estately.config import settings
from estately.schemas import (
    BuyerForm, EditListingForm, ForgotPasswordForm, LoginForm, PriceCheckForm,
    ResetCodeForm, ResetPasswordForm, SellerForm, SignupForm, VerifyEmailForm,
)

logger = logging.getLogger(__name__)

DEFAULT_ERROR = "An unexpected error occurred."


class WebhookError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def reply_message(data: Any) -> str:
    """The text to show for a webhook reply: its `message`, else the JSON itself."""
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    if data in (None, ""):
        return ""
    if isinstance(data, str):
        return data
    return json.dumps(data, indent=2)


def _decode(r: httpx.Response) -> Any:
    if not r.content:
        return None
    try:
        return r.json()
    except ValueError:
        return r.text


def _error_message(r: httpx.Response) -> str:
    return reply_message(_decode(r)) or r.reason_phrase or DEFAULT_ERROR


class WebhookClient:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url or settings.WEBHOOK_BASE_URL
        self.timeout = timeout or settings.WEBHOOK_TIMEOUT
        self.transport = transport

    async def post(self, path: str, payload: Optional[dict] = None) -> Any:
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport,
                                     headers={"User-Agent": "Mozilla/5.0 (compatible; Estately/0.1)"}) as client:
            try:
                r = await client.post(path, json=payload or {})
                r.raise_for_status()
            except httpx.HTTPStatusError as e:
                msg = _error_message(e.response)
                logger.warning("webhook %s -> %s: %s", path, e.response.status_code, msg)
                raise WebhookError(msg, e.response.status_code) from e
            except httpx.HTTPError as e:
                logger.warning("webhook %s failed: %r", path, e)
                raise WebhookError(str(e) or DEFAULT_ERROR) from e
            return _decode(r)

    # ------------------------------ auth ------------------------------

    async def signup(self, form: SignupForm) -> Any:
        return await self.post(settings.SIGNUP_PATH, form.payload())

    async def verify_email(self, form: VerifyEmailForm) -> Any:
        return await self.post(settings.VERIFY_EMAIL_PATH, form.model_dump(by_alias=True))

    async def login(self, form: LoginForm) -> Any:
        return await self.post(settings.LOGIN_PATH, form.model_dump(by_alias=True))

    async def forgot_password(self, form: ForgotPasswordForm) -> Any:
        return await self.post(settings.FORGOT_PASSWORD_PATH, form.model_dump(by_alias=True))

    async def verify_reset_code(self, form: ResetCodeForm) -> Any:
        return await self.post(settings.VERIFY_RESET_CODE_PATH, form.model_dump(by_alias=True))

    async def reset_password(self, form: ResetPasswordForm) -> Any:
        return await self.post(settings.RESET_PASSWORD_PATH, form.payload())

    # ---------------------------- listings ----------------------------

    async def add_buyer(self, form: BuyerForm) -> Any:
        return await self.post(settings.ADD_BUYER_PATH, form.payload())

    async def add_seller(self, form: SellerForm) -> Any:
        return await self.post(settings.ADD_SELLER_PATH, form.payload())

    async def edit_listing(self, listing_id: str, form: EditListingForm) -> Any:
        return await self.post(settings.EDIT_LISTING_PATH, form.payload(listing_id))

    async def get_sellers(self) -> Any:
        return await self.post(settings.GET_SELLERS_PATH)

    async def get_buyers(self) -> Any:
        return await self.post(settings.GET_BUYERS_PATH)

    # ------------------------------- AI -------------------------------

    async def check_price(self, form: PriceCheckForm) -> Any:
        return await self.post(settings.CHECK_PRICE_PATH, form.model_dump(by_alias=True))
