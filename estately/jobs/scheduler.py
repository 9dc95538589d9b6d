# estately/jobs/scheduler.py
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from estately.config import settings
from estately.services.session import SessionStore

async def sweep_sessions(sessions: SessionStore) -> int:
    # must run on the event loop: the store is not thread-safe
    return sessions.purge_expired()

async def start_scheduler(sessions: SessionStore) -> AsyncIOScheduler:
    sched = AsyncIOScheduler(timezone="UTC")
    sched.add_job(sweep_sessions, IntervalTrigger(minutes=settings.SESSION_SWEEP_MINUTES), args=[sessions])
    sched.start()
    return sched
