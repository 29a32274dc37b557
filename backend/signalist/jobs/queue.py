from __future__ import annotations

import datetime

from redis import Redis
from rq import Queue
from rq.job import Job

from signalist.config.settings import settings
from signalist.jobs.daily_news import run_daily_news_summary
from signalist.jobs.welcome import run_welcome_email


def get_redis_connection() -> Redis:
    return Redis.from_url(settings.redis_url)


def get_queue(name: str | None = None) -> Queue:
    queue_name = name or settings.jobs_queue_name
    return Queue(name=queue_name, connection=get_redis_connection())


def next_daily_run(now: datetime.datetime | None = None) -> datetime.datetime:
    now = now or datetime.datetime.now(datetime.UTC)
    candidate = now.replace(
        hour=settings.daily_news_hour_utc,
        minute=settings.daily_news_minute,
        second=0,
        microsecond=0,
    )
    if candidate <= now:
        candidate += datetime.timedelta(days=1)
    return candidate


def enqueue_welcome_email(data: dict) -> Job:
    queue = get_queue()
    return queue.enqueue(run_welcome_email, data=data)


def enqueue_daily_news_summary() -> Job:
    queue = get_queue()
    return queue.enqueue(run_daily_news_summary)


def schedule_daily_news_summary(now: datetime.datetime | None = None) -> Job:
    run_at = next_daily_run(now)
    queue = get_queue()
    # One job id per day keeps repeated registrations from stacking up.
    return queue.enqueue_at(
        run_at,
        run_daily_news_summary,
        reschedule=True,
        job_id=f"daily-news-summary:{run_at:%Y-%m-%d}",
    )
