# estately/web/server.py
import logging
from typing import Literal, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from estately.content import DASHBOARD_CARDS, map_embed_url, site_links
from estately.filters import FilteredView
from estately.normalizer import edit_defaults, record_from_edit
from estately.schemas import (
    AgentMatchingInput, AgentMatchingOutput, BrowseResponse, BuyerForm, CriteriaUpdate,
    EditListingForm, ForgotPasswordForm, ListingRecord, LoginForm, LoginResponse,
    PriceCheckForm, PriceCheckResponse, ResetCodeForm, ResetPasswordForm, SellerForm,
    SignupForm, VerifyEmailForm,
)
from estately.services.agents import AgentMatcher, AgentMatchingError
from estately.services.listings import FetchResult, ListingFeed
from estately.services.pricing import check_price
from estately.services.session import Session, SessionStore, user_from_login_reply
from estately.webhooks.client import WebhookClient, WebhookError, reply_message

logger = logging.getLogger(__name__)

Kind = Literal["sellers", "buyers"]

bearer = HTTPBearer(auto_error=False)


def _browse(view: FilteredView, notice: Optional[str] = None) -> BrowseResponse:
    return BrowseResponse(
        loaded=view.loaded,
        criteria=view.criteria.to_dict(),
        price_brackets=view.criteria.price_brackets(),
        listings=view.result(),
        notice=notice,
    )


def _message(data) -> dict:
    return {"message": reply_message(data)}


def create_app(client: Optional[WebhookClient] = None, sessions: Optional[SessionStore] = None,
               matcher: Optional[AgentMatcher] = None) -> FastAPI:
    app = FastAPI(title="Estately")
    app.state.client = client or WebhookClient()
    app.state.sessions = sessions or SessionStore()
    app.state.matcher = matcher or AgentMatcher()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WebhookError)
    async def webhook_error(request: Request, exc: WebhookError):
        return JSONResponse(status_code=exc.status_code or 502, content={"detail": exc.message})

    @app.exception_handler(AgentMatchingError)
    async def agent_error(request: Request, exc: AgentMatchingError):
        return JSONResponse(status_code=503, content={"detail": str(exc)})

    def get_client(request: Request) -> WebhookClient:
        return request.app.state.client

    def require_session(request: Request,
                        creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> Session:
        token = creds.credentials if creds else None
        session = request.app.state.sessions.get(token)
        if session is None:
            raise HTTPException(status_code=401, detail="You need to be logged in to access this page.")
        return session

    # ----------------------------- site -----------------------------

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    @app.get("/api/nav")
    async def nav():
        return site_links()

    @app.get("/api/dashboard")
    async def dashboard(session: Session = Depends(require_session)):
        return {"user": session.user.model_dump(by_alias=True), "cards": DASHBOARD_CARDS}

    @app.get("/api/map")
    async def map_url(location: str = ""):
        return {"url": map_embed_url(location)}

    # ----------------------------- auth -----------------------------

    @app.post("/api/auth/signup")
    async def signup(form: SignupForm, client: WebhookClient = Depends(get_client)):
        return _message(await client.signup(form))

    @app.post("/api/auth/verify-email")
    async def verify_email(form: VerifyEmailForm, client: WebhookClient = Depends(get_client)):
        return _message(await client.verify_email(form))

    @app.post("/api/auth/login", response_model=LoginResponse)
    async def login(form: LoginForm, request: Request, client: WebhookClient = Depends(get_client)):
        reply = await client.login(form)
        session = request.app.state.sessions.create(user_from_login_reply(reply, form.email))
        return LoginResponse(
            token=session.token,
            user=session.user,
            expires_at=session.expires_at.isoformat(),
            expires_in=session.expires_in(),
        )

    @app.post("/api/auth/logout")
    async def logout(request: Request, session: Session = Depends(require_session)):
        request.app.state.sessions.revoke(session.token)
        return {"ok": True}

    @app.get("/api/auth/session")
    async def current_session(session: Session = Depends(require_session)):
        return {"user": session.user.model_dump(by_alias=True), "expiresIn": session.expires_in()}

    @app.post("/api/auth/forgot-password")
    async def forgot_password(form: ForgotPasswordForm, client: WebhookClient = Depends(get_client)):
        return _message(await client.forgot_password(form))

    @app.post("/api/auth/verify-reset-code")
    async def verify_reset_code(form: ResetCodeForm, client: WebhookClient = Depends(get_client)):
        return _message(await client.verify_reset_code(form))

    @app.post("/api/auth/reset-password")
    async def reset_password(form: ResetPasswordForm, client: WebhookClient = Depends(get_client)):
        return _message(await client.reset_password(form))

    # ------------------------- intake forms -------------------------

    @app.post("/api/buyers")
    async def add_buyer(form: BuyerForm, preview: bool = False,
                        session: Session = Depends(require_session),
                        client: WebhookClient = Depends(get_client)):
        if preview:
            return {"preview": form.payload()}
        await client.add_buyer(form)
        return {"message": "Buyer information submitted successfully."}

    @app.post("/api/sellers")
    async def add_seller(form: SellerForm, preview: bool = False,
                         session: Session = Depends(require_session),
                         client: WebhookClient = Depends(get_client)):
        if preview:
            return {"preview": form.payload()}
        await client.add_seller(form)
        return {"message": "Seller information submitted successfully."}

    def _find(session: Session, kind: str, listing_id: str, client: WebhookClient) -> ListingRecord:
        for rec in session.feed(kind, client).view.records or []:
            if rec.id == listing_id:
                return rec
        raise HTTPException(status_code=404, detail="Listing not found. Open the listings view first.")

    @app.get("/api/views/{kind}/{listing_id}/edit")
    async def edit_form(kind: Kind, listing_id: str, session: Session = Depends(require_session),
                        client: WebhookClient = Depends(get_client)):
        return edit_defaults(_find(session, kind, listing_id, client))

    @app.put("/api/views/{kind}/{listing_id}")
    async def edit_listing(kind: Kind, listing_id: str, form: EditListingForm, preview: bool = False,
                           session: Session = Depends(require_session),
                           client: WebhookClient = Depends(get_client)):
        record = _find(session, kind, listing_id, client)
        payload = form.payload(listing_id)
        if preview:
            return {"preview": payload}
        await client.edit_listing(listing_id, form)
        updated = record_from_edit(record, payload)
        session.feed(kind, client).view.replace(updated)
        return {"message": "Listing updated successfully.", "listing": updated.model_dump(by_alias=True)}

    # ------------------------- browse views -------------------------

    @app.get("/api/listings/{kind}", response_model=BrowseResponse)
    async def browse(kind: Kind,
                     location: Optional[str] = None,
                     price_range_label: Optional[str] = Query(None, alias="priceRangeLabel"),
                     price_currency: Optional[str] = Query(None, alias="priceCurrency"),
                     property_type: Optional[str] = Query(None, alias="propertyType"),
                     area_value: Optional[str] = Query(None, alias="areaValue"),
                     area_unit: Optional[str] = Query(None, alias="areaUnit"),
                     construction_status: Optional[str] = Query(None, alias="constructionStatus"),
                     client: WebhookClient = Depends(get_client)):
        feed = ListingFeed(client, FilteredView(kind))
        feed.view.apply({
            "location": location,
            "price_range_label": price_range_label,
            "price_currency": price_currency,
            "property_type": property_type,
            "area_value": area_value,
            "area_unit": area_unit,
            "construction_status": construction_status,
        })
        result = await feed.activate()
        return _browse(feed.view, None if result.stale else result.notice)

    @app.post("/api/views/{kind}", response_model=BrowseResponse)
    async def activate_view(kind: Kind, session: Session = Depends(require_session),
                            client: WebhookClient = Depends(get_client)):
        feed = session.feed(kind, client)
        result: FetchResult = await feed.activate()
        # a superseded fetch says nothing about the records now in the view
        return _browse(feed.view, None if result.stale else result.notice)

    @app.get("/api/views/{kind}", response_model=BrowseResponse)
    async def current_view(kind: Kind, session: Session = Depends(require_session),
                           client: WebhookClient = Depends(get_client)):
        return _browse(session.feed(kind, client).view)

    @app.patch("/api/views/{kind}/criteria", response_model=BrowseResponse)
    async def update_criteria(kind: Kind, update: CriteriaUpdate, session: Session = Depends(require_session),
                              client: WebhookClient = Depends(get_client)):
        view = session.feed(kind, client).view
        view.apply(update.model_dump(exclude_unset=True))
        return _browse(view)

    @app.delete("/api/views/{kind}/criteria", response_model=BrowseResponse)
    async def clear_criteria(kind: Kind, session: Session = Depends(require_session),
                             client: WebhookClient = Depends(get_client)):
        view = session.feed(kind, client).view
        view.clear()
        return _browse(view)

    # ---------------------------- AI tools ----------------------------

    @app.post("/api/agents/match", response_model=AgentMatchingOutput)
    async def match_agents(data: AgentMatchingInput, request: Request):
        return await request.app.state.matcher.recommend(data)

    @app.post("/api/price-check", response_model=PriceCheckResponse)
    async def price_check(form: PriceCheckForm, client: WebhookClient = Depends(get_client)):
        return await check_price(client, form)

    return app
