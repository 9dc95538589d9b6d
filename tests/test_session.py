from datetime import datetime, timedelta, timezone

from estately.schemas import SessionUser
from estately.services.session import SessionStore, user_from_login_reply

T0 = datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_session_lives_until_expiry():
    store = SessionStore(ttl=timedelta(hours=1))
    s = store.create(SessionUser(email="a@b.co"), now=T0)
    assert store.get(s.token, now=T0 + timedelta(minutes=59)) is s
    assert store.get(s.token, now=T0 + timedelta(hours=1)) is None
    # expired sessions are dropped on lookup
    assert len(store) == 0


def test_unknown_and_missing_tokens():
    store = SessionStore()
    assert store.get(None) is None
    assert store.get("nope") is None


def test_revoke_and_purge():
    store = SessionStore(ttl=timedelta(minutes=10))
    a = store.create(SessionUser(email="a@b.co"), now=T0)
    b = store.create(SessionUser(email="b@b.co"), now=T0 + timedelta(minutes=30))
    assert store.purge_expired(now=T0 + timedelta(minutes=20)) == 1
    assert store.get(a.token, now=T0 + timedelta(minutes=20)) is None
    assert store.revoke(b.token)
    assert not store.revoke(b.token)


def test_expires_in_is_human_readable():
    store = SessionStore(ttl=timedelta(hours=2))
    s = store.create(SessionUser(email="a@b.co"), now=T0)
    assert s.expires_in(now=T0) == "2 hours"


def test_feed_per_kind_is_reused(hooks):
    s = SessionStore().create(SessionUser(email="a@b.co"))
    client = hooks.client()
    sellers = s.feed("sellers", client)
    assert s.feed("sellers", client) is sellers
    assert s.feed("buyers", client) is not sellers


def test_user_from_login_reply_shapes():
    assert user_from_login_reply({"user": {"name": "Ali", "email": "ali@x.co"}}, "f@x.co") == \
        SessionUser(name="Ali", email="ali@x.co")
    assert user_from_login_reply({"Name": "Sara"}, "s@x.co") == SessionUser(name="Sara", email="s@x.co")
    assert user_from_login_reply(["ok"], "f@x.co") == SessionUser(email="f@x.co")


async def test_sweep_job_purges_expired():
    from estately.jobs.scheduler import sweep_sessions

    store = SessionStore(ttl=timedelta(seconds=-1))
    store.create(SessionUser(email="a@b.co"))
    assert await sweep_sessions(store) == 1
    assert len(store) == 0
