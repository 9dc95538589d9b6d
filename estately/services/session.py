# estately/services/session.py
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import humanize

from estately.config import settings
from estately.filters import FilteredView
from estately.schemas import SessionUser
from estately.services.listings import ListingFeed
from estately.webhooks.client import WebhookClient

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Session:
    token: str
    user: SessionUser
    expires_at: datetime
    feeds: dict[str, ListingFeed] = field(default_factory=dict)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or _now()) >= self.expires_at

    def expires_in(self, now: Optional[datetime] = None) -> str:
        return humanize.naturaldelta(self.expires_at - (now or _now()))

    def feed(self, kind: str, client: WebhookClient) -> ListingFeed:
        """This session's browse view for `kind`, created on first use."""
        if kind not in self.feeds:
            self.feeds[kind] = ListingFeed(client, FilteredView(kind))
        return self.feeds[kind]


def user_from_login_reply(data: Any, fallback_email: str) -> SessionUser:
    """The login webhook answers with {"user": {...}} or with the fields inline."""
    src = data if isinstance(data, dict) else {}
    if isinstance(src.get("user"), dict):
        src = src["user"]
    return SessionUser(name=src.get("name") or src.get("Name"),
                       email=src.get("email") or src.get("Email") or fallback_email)


class SessionStore:
    """In-process sessions; the one place that decides whether a token is live."""

    def __init__(self, ttl: Optional[timedelta] = None):
        self.ttl = ttl or timedelta(hours=settings.SESSION_TTL_HOURS)
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, user: SessionUser, now: Optional[datetime] = None) -> Session:
        s = Session(token=secrets.token_urlsafe(32), user=user, expires_at=(now or _now()) + self.ttl)
        self._sessions[s.token] = s
        logger.info("session opened for %s", user.email)
        return s

    def get(self, token: Optional[str], now: Optional[datetime] = None) -> Optional[Session]:
        if not token:
            return None
        s = self._sessions.get(token)
        if s is None:
            return None
        if s.is_expired(now):
            del self._sessions[token]
            return None
        return s

    def revoke(self, token: str) -> bool:
        return self._sessions.pop(token, None) is not None

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        now = now or _now()
        dead = [t for t, s in self._sessions.items() if s.is_expired(now)]
        for t in dead:
            del self._sessions[t]
        if dead:
            logger.info("purged %d expired sessions", len(dead))
        return len(dead)
