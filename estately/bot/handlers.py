# estately/bot/handlers.py
import logging

from telegram import Update
from telegram.constants import ParseMode
from telegram.error import BadRequest, TelegramError
from telegram.ext import Application, CallbackQueryHandler, CommandHandler, ContextTypes

from estately.bot.keyboards import MENUS, filter_panel, menu_options, options_keyboard
from estately.config import settings
from estately.filters import FilteredView
from estately.services.listings import ListingFeed
from estately.utils.formatting import fmt_card, fmt_criteria, photo_url
from estately.webhooks.client import WebhookClient

logger = logging.getLogger(__name__)

MAX_CARDS = 10

HELP = (
    "/listings - Browse properties from sellers\n"
    "/buyers - Browse buyer requests\n"
    "/location <text> - Filter by location (e.g., /location Multan)\n"
    "/area <value> - Filter by area (e.g., /area 1200)\n"
    "/clear - Clear all filters\n"
    "/help - Show this message"
)


def _client(ctx: ContextTypes.DEFAULT_TYPE) -> WebhookClient:
    return ctx.bot_data.setdefault("client", WebhookClient())

def _feed(ctx: ContextTypes.DEFAULT_TYPE, kind: str | None = None) -> ListingFeed:
    """The chat's active browse view; switching kind keeps each view's own criteria."""
    kind = kind or ctx.user_data.get("active_kind", "sellers")
    feeds = ctx.user_data.setdefault("feeds", {})
    if kind not in feeds:
        feeds[kind] = ListingFeed(_client(ctx), FilteredView(kind))
    ctx.user_data["active_kind"] = kind
    return feeds[kind]

def _panel_text(feed: ListingFeed) -> str:
    view = feed.view
    shown = view.result()
    if shown is None:
        count = "Listings not loaded yet."
    else:
        count = f"{len(shown)} of {len(view.records or [])} match."
    title = "Properties" if view.kind == "sellers" else "Buyer requests"
    return f"🔎 *{title}*\n{fmt_criteria(view.criteria)}\n\n{count}"


async def start(update: Update, ctx: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(
        "🏡 *Estately*\nFind your dream home or the buyer for it.\n\n" + HELP,
        parse_mode=ParseMode.MARKDOWN,
    )

async def help_cmd(update: Update, ctx: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(HELP)

async def _browse(update: Update, ctx: ContextTypes.DEFAULT_TYPE, kind: str):
    feed = _feed(ctx, kind)
    result = await feed.activate()
    if result.stale:
        return
    if result.notice:
        await update.effective_message.reply_text(result.notice)
    await update.effective_message.reply_text(
        _panel_text(feed), parse_mode=ParseMode.MARKDOWN, reply_markup=filter_panel()
    )

async def listings_cmd(update: Update, ctx: ContextTypes.DEFAULT_TYPE):
    await _browse(update, ctx, "sellers")

async def buyers_cmd(update: Update, ctx: ContextTypes.DEFAULT_TYPE):
    await _browse(update, ctx, "buyers")

async def _set_text_filter(update: Update, ctx: ContextTypes.DEFAULT_TYPE, field: str, usage: str):
    feed = _feed(ctx)
    feed.view.set(field, " ".join(ctx.args or []))
    if not ctx.args:
        await update.message.reply_text(usage)
    await update.message.reply_text(
        _panel_text(feed), parse_mode=ParseMode.MARKDOWN, reply_markup=filter_panel()
    )

async def location_cmd(update: Update, ctx: ContextTypes.DEFAULT_TYPE):
    await _set_text_filter(update, ctx, "location", "Location filter cleared. Usage: /location <text>")

async def area_cmd(update: Update, ctx: ContextTypes.DEFAULT_TYPE):
    await _set_text_filter(update, ctx, "area_value", "Area filter cleared. Usage: /area <value>")

async def clear_cmd(update: Update, ctx: ContextTypes.DEFAULT_TYPE):
    feed = _feed(ctx)
    feed.view.clear()
    await update.message.reply_text(
        _panel_text(feed), parse_mode=ParseMode.MARKDOWN, reply_markup=filter_panel()
    )

async def filter_callback(update: Update, ctx: ContextTypes.DEFAULT_TYPE):
    q = update.callback_query
    await q.answer()
    parts = q.data.split(":")
    feed = _feed(ctx)
    view = feed.view
    action = parts[1]

    if action == "menu" and parts[2] in MENUS:
        await q.edit_message_reply_markup(options_keyboard(parts[2], view.criteria))
        return
    if action == "set" and len(parts) == 4 and parts[2] in MENUS:
        menu, choice = parts[2], parts[3]
        field, _ = MENUS[menu]
        if choice == "all":
            view.set(field, "")
        else:
            options = menu_options(menu, view.criteria)
            try:
                view.set(field, options[int(choice)])
            except (ValueError, IndexError):
                await q.edit_message_text("That option is no longer available. Send /listings again.")
                return
    elif action == "clear":
        view.clear()
    elif action == "show":
        await _send_cards(update, view.result() or [])
        return

    try:
        await q.edit_message_text(_panel_text(feed), parse_mode=ParseMode.MARKDOWN, reply_markup=filter_panel())
    except BadRequest as e:
        # tapping an option that is already selected leaves the panel unchanged
        if "not modified" not in str(e).lower():
            raise

async def _send_cards(update: Update, records):
    bot = update.get_bot()
    chat_id = update.effective_chat.id
    if not records:
        await bot.send_message(chat_id=chat_id, text="No listings match your criteria.")
        return

    for rec in records[:MAX_CARDS]:
        cap = fmt_card(rec)
        photo = photo_url(rec)
        if photo:
            try:
                await bot.send_photo(chat_id=chat_id, photo=photo, caption=cap, parse_mode=ParseMode.MARKDOWN)
                continue
            except TelegramError:
                logger.warning("photo rejected for listing %s, sending text", rec.id)
        await bot.send_message(chat_id=chat_id, text=cap, parse_mode=ParseMode.MARKDOWN)

    if len(records) > MAX_CARDS:
        await bot.send_message(chat_id=chat_id, text=f"…and {len(records) - MAX_CARDS} more. Narrow your filters.")

async def build_app(client: WebhookClient | None = None) -> Application:
    app = Application.builder().token(settings.TELEGRAM_BOT_TOKEN).build()
    if client is not None:
        app.bot_data["client"] = client
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("help", help_cmd))
    app.add_handler(CommandHandler("listings", listings_cmd))
    app.add_handler(CommandHandler("buyers", buyers_cmd))
    app.add_handler(CommandHandler("location", location_cmd))
    app.add_handler(CommandHandler("area", area_cmd))
    app.add_handler(CommandHandler("clear", clear_cmd))
    app.add_handler(CallbackQueryHandler(filter_callback, pattern=r"^flt:"))
    return app
