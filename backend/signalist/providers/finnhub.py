from __future__ import annotations

import datetime
from typing import Any
from urllib.parse import urlencode

import httpx

from signalist.cache import remember
from signalist.config.settings import settings
from signalist.errors import ConfigurationError, UpstreamError


_SEARCH_PATH = "/search"
_PROFILE_PATH = "/stock/profile2"
_COMPANY_NEWS_PATH = "/company-news"
_GENERAL_NEWS_PATH = "/news"
_QUOTE_PATH = "/quote"
_METRIC_PATH = "/stock/metric"


def _build_url(path: str) -> str:
    return f"{settings.finnhub.base_url.rstrip('/')}{path}"


def _cache_key(path: str, params: dict[str, str]) -> str:
    return f"finnhub:{path}:{urlencode(sorted(params.items()))}"


async def fetch_json(path: str, params: dict[str, str], ttl_seconds: int | None = None) -> Any:
    api_key = settings.finnhub.api_key
    if not api_key:
        raise ConfigurationError("FINNHUB API key is not configured")

    if not ttl_seconds:
        return await _request(path, params, api_key)
    return await remember(
        _cache_key(path, params), ttl_seconds, lambda: _request(path, params, api_key)
    )


async def _request(path: str, params: dict[str, str], api_key: str) -> Any:
    try:
        async with httpx.AsyncClient(timeout=settings.finnhub.timeout_seconds) as client:
            response = await client.get(_build_url(path), params={**params, "token": api_key})
    except httpx.HTTPError as exc:
        raise UpstreamError(f"Finnhub request failed: {exc}") from exc

    if response.is_error:
        raise UpstreamError(
            f"Finnhub request failed: {response.status_code} {response.reason_phrase} {response.text}".strip(),
            status=response.status_code,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamError("Finnhub returned a non-JSON body") from exc


async def search_symbols(query: str) -> list[dict]:
    payload = await fetch_json(
        _SEARCH_PATH, {"q": query}, ttl_seconds=settings.cache_ttl.search_seconds
    )
    if not isinstance(payload, dict):
        return []
    result = payload.get("result")
    return result if isinstance(result, list) else []


async def fetch_profile(symbol: str) -> dict:
    payload = await fetch_json(
        _PROFILE_PATH, {"symbol": symbol}, ttl_seconds=settings.cache_ttl.profile_seconds
    )
    return payload if isinstance(payload, dict) else {}


async def fetch_company_news(
    symbol: str, from_date: datetime.date, to_date: datetime.date
) -> list[dict]:
    payload = await fetch_json(
        _COMPANY_NEWS_PATH,
        {"symbol": symbol, "from": from_date.isoformat(), "to": to_date.isoformat()},
    )
    return payload if isinstance(payload, list) else []


async def fetch_general_news() -> list[dict]:
    payload = await fetch_json(
        _GENERAL_NEWS_PATH,
        {"category": "general"},
        ttl_seconds=settings.cache_ttl.general_news_seconds,
    )
    return payload if isinstance(payload, list) else []


async def fetch_quote(symbol: str) -> dict:
    payload = await fetch_json(_QUOTE_PATH, {"symbol": symbol})
    if not isinstance(payload, dict):
        return {}
    has_values = payload.get("c") is not None or payload.get("pc") is not None
    return payload if has_values else {}


async def fetch_basic_metrics(symbol: str) -> dict:
    payload = await fetch_json(_METRIC_PATH, {"symbol": symbol, "metric": "all"})
    if not isinstance(payload, dict):
        return {}
    metric = payload.get("metric")
    return metric if isinstance(metric, dict) else {}
