# main.py: FastAPI + optional Telegram bot (PTB async) + APScheduler on one event loop
import asyncio
import logging

import uvicorn
from estately.config import settings
from estately.bot.handlers import build_app as build_bot_app
from estately.jobs.scheduler import start_scheduler
from estately.services.session import SessionStore
from estately.web.server import create_app as create_web_app
from estately.webhooks.client import WebhookClient

logger = logging.getLogger(__name__)
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL))

async def run():
    client = WebhookClient()
    sessions = SessionStore()

    # 1) Telegram bot, only when a token is configured
    application = None
    if settings.TELEGRAM_BOT_TOKEN:
        application = await build_bot_app(client)
        await application.initialize()
        await application.start()
        await application.updater.start_polling()
    else:
        logger.info("TELEGRAM_BOT_TOKEN not set, bot disabled")

    # 2) Scheduler
    scheduler = await start_scheduler(sessions)

    # 3) FastAPI via Uvicorn (blocks until Ctrl+C / shutdown)
    web_app = create_web_app(client=client, sessions=sessions)
    server = uvicorn.Server(
        uvicorn.Config(
            web_app,
            host=settings.WEB_HOST,
            port=settings.WEB_PORT,
            log_level=settings.LOG_LEVEL.lower(),
        )
    )

    try:
        await server.serve()
    finally:
        scheduler.shutdown(wait=False)
        if application is not None:
            await application.updater.stop()
            await application.stop()
            await application.shutdown()

if __name__ == "__main__":
    try:
        asyncio.run(run())
    except (KeyboardInterrupt, SystemExit):
        pass
