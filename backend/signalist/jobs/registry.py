"""Job manifest and event routing for the notification pipeline."""

from __future__ import annotations

from typing import Callable

from pydantic import ValidationError as PydanticValidationError
from rq.job import Job

from signalist.config.settings import settings
from signalist.errors import ValidationError
from signalist.jobs import queue
from signalist.schemas.jobs import EnqueuedJob, JobDefinition, JobTrigger, UserCreatedEvent

USER_CREATED_EVENT = "app/user.created"
SEND_DAILY_NEWS_EVENT = "app/send.daily.news"


def daily_news_cron() -> str:
    return f"{settings.daily_news_minute} {settings.daily_news_hour_utc} * * *"


def list_functions() -> list[JobDefinition]:
    return [
        JobDefinition(id="sign-up-email", triggers=[JobTrigger(event=USER_CREATED_EVENT)]),
        JobDefinition(
            id="daily-news-summary",
            triggers=[JobTrigger(event=SEND_DAILY_NEWS_EVENT), JobTrigger(cron=daily_news_cron())],
        ),
    ]


def _on_user_created(data: dict) -> Job:
    try:
        event = UserCreatedEvent(**data)
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {USER_CREATED_EVENT} payload: {exc.error_count()} error(s)") from exc
    return queue.enqueue_welcome_email(event.model_dump())


def _on_send_daily_news(data: dict) -> Job:
    return queue.enqueue_daily_news_summary()


_HANDLERS: dict[str, tuple[str, Callable[[dict], Job]]] = {
    USER_CREATED_EVENT: ("sign-up-email", _on_user_created),
    SEND_DAILY_NEWS_EVENT: ("daily-news-summary", _on_send_daily_news),
}


def send_event(name: str, data: dict | None = None) -> EnqueuedJob:
    handler = _HANDLERS.get(name)
    if handler is None:
        raise ValidationError(f"Unknown event: {name}")
    function_id, enqueue = handler
    job = enqueue(data or {})
    return EnqueuedJob(function_id=function_id, job_id=job.id)


def register_schedules() -> list[JobDefinition]:
    queue.schedule_daily_news_summary()
    return list_functions()
