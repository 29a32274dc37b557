"""News retrieval for the dashboard and the daily digest.

General market news is de-duplicated and trimmed to the newest handful of
articles. Company news for a list of symbols is picked round-robin so that
every symbol gets a turn before any symbol contributes a second article.
"""

from __future__ import annotations

import asyncio
import datetime
from typing import Callable, Iterable, TypeVar

from loguru import logger

from signalist.config.settings import settings
from signalist.errors import NewsFetchError
from signalist.providers import finnhub
from signalist.schemas.news import FormattedNewsArticle

T = TypeVar("T")

_COMPANY_SUMMARY_LIMIT = 200
_GENERAL_SUMMARY_LIMIT = 150


def get_date_range(days: int, today: datetime.date | None = None) -> tuple[datetime.date, datetime.date]:
    to_date = today or datetime.date.today()
    return to_date - datetime.timedelta(days=days), to_date


def normalize_symbols(symbols: Iterable[str | None]) -> list[str]:
    return list(dict.fromkeys(
        cleaned for cleaned in ((symbol or "").strip().upper() for symbol in symbols) if cleaned
    ))


def validate_article(article: dict) -> bool:
    if not isinstance(article, dict):
        return False
    for field in ("headline", "summary", "url"):
        value = article.get(field)
        if not isinstance(value, str) or not value.strip():
            return False
    timestamp = article.get("datetime")
    return isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool) and timestamp > 0


def dedupe(items: Iterable[T], make_key: Callable[[T], str]) -> list[T]:
    seen: set[str] = set()
    unique: list[T] = []
    for item in items:
        key = make_key(item)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def _article_key(article: dict) -> str:
    return f"{article.get('id')}|{article.get('url')}|{article.get('headline')}"


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


def format_article(
    article: dict, is_company_news: bool, symbol: str | None = None, index: int = 0
) -> FormattedNewsArticle:
    summary = article["summary"].strip()
    if is_company_news:
        return FormattedNewsArticle(
            id=article.get("id"),
            headline=article["headline"].strip(),
            summary=_truncate(summary, _COMPANY_SUMMARY_LIMIT),
            source=article.get("source") or "Company News",
            url=article["url"],
            datetime=int(article["datetime"]),
            image=article.get("image") or "",
            category="company",
            related=symbol or "",
            symbol=symbol,
            index=index,
        )
    return FormattedNewsArticle(
        id=article.get("id"),
        headline=article["headline"].strip(),
        summary=_truncate(summary, _GENERAL_SUMMARY_LIMIT),
        source=article.get("source") or "Market News",
        url=article["url"],
        datetime=int(article["datetime"]),
        image=article.get("image") or "",
        category=article.get("category") or "general",
        related=article.get("related") or "",
        symbol=None,
        index=index,
    )


def pick_round_robin(
    symbols: list[str], news_by_symbol: dict[str, list[dict]], limit: int
) -> list[FormattedNewsArticle]:
    results: list[FormattedNewsArticle] = []
    cursors = {symbol: 0 for symbol in symbols}

    for round_index in range(limit):
        for symbol in symbols:
            if len(results) >= limit:
                return results
            articles = news_by_symbol.get(symbol) or []
            cursor = cursors[symbol]
            while cursor < len(articles) and not validate_article(articles[cursor]):
                cursor += 1
            if cursor >= len(articles):
                cursors[symbol] = cursor
                continue
            results.append(format_article(articles[cursor], True, symbol, round_index))
            cursors[symbol] = cursor + 1
        if all(cursors[symbol] >= len(news_by_symbol.get(symbol) or []) for symbol in symbols):
            break
    return results


async def _general_news(limit: int) -> list[FormattedNewsArticle]:
    articles = await finnhub.fetch_general_news()
    valid = [article for article in articles if validate_article(article)]
    unique = dedupe(valid, _article_key)
    return [format_article(article, False, None, index) for index, article in enumerate(unique[:limit])]


async def _company_news(symbol: str, from_date: datetime.date, to_date: datetime.date) -> list[dict]:
    try:
        articles = await finnhub.fetch_company_news(symbol, from_date, to_date)
    except Exception as exc:
        logger.error(f"Error fetching company news for {symbol}: {exc}")
        return []
    return [article for article in articles if validate_article(article)]


async def get_news(symbols: Iterable[str] | None = None) -> list[FormattedNewsArticle]:
    limit = settings.news_limit
    try:
        clean_symbols = normalize_symbols(symbols or [])
        if not clean_symbols:
            return await _general_news(limit)

        from_date, to_date = get_date_range(settings.news_lookback_days)
        fetched = await asyncio.gather(
            *(_company_news(symbol, from_date, to_date) for symbol in clean_symbols)
        )
        news_by_symbol = dict(zip(clean_symbols, fetched))

        results = pick_round_robin(clean_symbols, news_by_symbol, limit)
        if not results:
            return await _general_news(limit)

        results.sort(key=lambda article: article.datetime or 0, reverse=True)
        return results[:limit]
    except Exception as exc:
        logger.error(f"Failed to fetch news: {exc}")
        raise NewsFetchError("Failed to fetch news") from exc
