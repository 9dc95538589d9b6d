from types import SimpleNamespace

import pytest
from telegram.error import BadRequest

from estately.bot import handlers
from estately.config import settings
from estately.filters import PKR_PRICE_RANGES
from estately.services.listings import FetchResult


class Recorder:
    """Stands in for a telegram object; every awaited method call is recorded."""

    def __init__(self, **attrs):
        self.calls = []
        self.__dict__.update(attrs)

    def __getattr__(self, name):
        async def method(*args, **kwargs):
            self.calls.append((name, args, kwargs))
        return method

    def texts(self):
        return [kw.get("text", args[0] if args else None) for _, args, kw in self.calls]


class UnchangedQuery(Recorder):
    async def edit_message_text(self, *args, **kwargs):
        raise BadRequest("Message is not modified: specified new message content is the same")


@pytest.fixture
def ctx(hooks):
    return SimpleNamespace(user_data={}, bot_data={"client": hooks.client()}, args=[])


def make_update(query=None):
    msg, bot = Recorder(), Recorder()
    return SimpleNamespace(message=msg, effective_message=msg, callback_query=query,
                           effective_chat=SimpleNamespace(id=42), get_bot=lambda: bot), msg, bot


async def test_listings_command_loads_and_shows_panel(ctx, hooks):
    hooks.reply(settings.GET_SELLERS_PATH, json_body=[
        {"json": {"id": "1", "Name": "Ali", "Location_": "Multan"}},
        {"json": {"id": "2", "Name": "Sara", "Location_": "Lahore"}},
    ])
    update, msg, _ = make_update()
    await handlers.listings_cmd(update, ctx)
    assert "2 of 2 match." in msg.texts()[-1]
    assert ctx.user_data["active_kind"] == "sellers"


async def test_stale_fetch_sends_nothing(ctx):
    feed = handlers._feed(ctx, "sellers")

    async def stale():
        return FetchResult(records=[], notice="Failed to fetch listings: boom", stale=True)

    feed.activate = stale
    update, msg, _ = make_update()
    await handlers.listings_cmd(update, ctx)
    assert msg.calls == []


async def test_currency_tap_clears_label_only_on_change(ctx):
    view = handlers._feed(ctx, "sellers").view
    view.set("price_currency", "USD")
    view.set("price_range_label", "250,001 - 500,000")

    update, _, _ = make_update(Recorder(data="flt:set:cur:0"))
    await handlers.filter_callback(update, ctx)
    assert view.criteria.price_range_label == "250,001 - 500,000"

    update, _, _ = make_update(Recorder(data="flt:set:cur:1"))
    await handlers.filter_callback(update, ctx)
    assert view.criteria.price_currency == "PKR"
    assert view.criteria.price_range_label == ""


async def test_price_tap_uses_current_currency_list(ctx):
    view = handlers._feed(ctx, "sellers").view
    view.set("price_currency", "PKR")
    q = Recorder(data="flt:set:price:2")
    update, _, _ = make_update(q)
    await handlers.filter_callback(update, ctx)
    assert view.criteria.price_range_label == PKR_PRICE_RANGES[2]
    assert q.calls[-1][0] == "edit_message_text"


async def test_location_without_args_clears_filter(ctx):
    view = handlers._feed(ctx, "sellers").view
    view.set("location", "Multan")
    update, msg, _ = make_update()
    await handlers.location_cmd(update, ctx)
    assert view.criteria.location == ""
    assert msg.texts()[0].startswith("Location filter cleared.")


async def test_show_with_no_matches(ctx, records):
    view = handlers._feed(ctx, "sellers").view
    view.load(records)
    view.set("location", "Karachi")
    update, _, bot = make_update(Recorder(data="flt:show"))
    await handlers.filter_callback(update, ctx)
    assert bot.texts() == ["No listings match your criteria."]


async def test_unchanged_panel_edit_is_ignored(ctx):
    q = UnchangedQuery(data="flt:clear")
    update, _, _ = make_update(q)
    await handlers.filter_callback(update, ctx)
    assert q.calls[0][0] == "answer"
