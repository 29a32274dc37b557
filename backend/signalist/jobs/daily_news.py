from __future__ import annotations

import asyncio
import json

from loguru import logger

from signalist.ai import gemini
from signalist.ai.prompts import DEFAULT_NEWS_CONTENT, news_summary_prompt
from signalist.config.settings import settings
from signalist.db.session import Database, database
from signalist.logging import setup_logger
from signalist.mail.sender import format_date_today, send_news_summary_email
from signalist.schemas.jobs import DigestRunResult
from signalist.services.news import get_news
from signalist.services.users import UserProfile, list_users_for_news_email
from signalist.services.watchlist import list_symbols


async def _send_digest(db_handle: Database, user: UserProfile, date: str) -> None:
    async with db_handle.session() as db:
        symbols = await list_symbols(db, user.id)

    articles = await get_news(symbols)
    if not articles:
        articles = await get_news()
    articles = articles[: settings.news_limit]

    country_code = user.country or settings.default_country_code
    news_data = json.dumps([article.model_dump() for article in articles], indent=2)
    news_content = await gemini.generate_text(news_summary_prompt(news_data, country_code))

    await send_news_summary_email(user.email, date, news_content or DEFAULT_NEWS_CONTENT)


async def send_daily_news_summary(db_handle: Database = database) -> DigestRunResult:
    async with db_handle.session() as db:
        users = await list_users_for_news_email(db)
    if not users:
        return DigestRunResult(success=False, message="No users found for news email.")

    date = format_date_today()
    sent = 0
    failed = 0
    for user in users:
        try:
            await _send_digest(db_handle, user, date)
            sent += 1
        except Exception as exc:
            failed += 1
            logger.error(f"Failed processing daily news for {user.email}: {exc}")

    logger.info(f"Daily news summary: {sent} sent, {failed} failed, {len(users)} users")
    return DigestRunResult(
        success=True,
        message=f"Daily news summary processed for {len(users)} users",
        processed=len(users),
        sent=sent,
        failed=failed,
    )


async def _run_and_dispose() -> DigestRunResult:
    try:
        return await send_daily_news_summary()
    finally:
        await database.dispose()


def run_daily_news_summary(reschedule: bool = False) -> dict:
    setup_logger()
    try:
        return asyncio.run(_run_and_dispose()).model_dump()
    finally:
        if reschedule:
            from signalist.jobs.queue import schedule_daily_news_summary

            schedule_daily_news_summary()
