from __future__ import annotations

import asyncio
from typing import Iterable

from loguru import logger

from signalist.config.settings import settings
from signalist.providers import finnhub
from signalist.schemas.stocks import StockSearchResult


async def _safe_profile(symbol: str) -> dict | None:
    try:
        return await finnhub.fetch_profile(symbol)
    except Exception as exc:
        logger.warning(f"Profile fetch failed for {symbol}: {exc}")
        return None


async def _popular_candidates() -> list[dict]:
    symbols = settings.popular_symbols
    profiles = await asyncio.gather(*(_safe_profile(symbol) for symbol in symbols))
    candidates: list[dict] = []
    for symbol, profile in zip(symbols, profiles):
        if not profile or not profile.get("name"):
            continue
        candidates.append(
            {
                "symbol": symbol,
                "description": profile.get("name"),
                "displaySymbol": symbol,
                "type": "Common Stock",
                "exchange": profile.get("exchange"),
            }
        )
    return candidates


async def _enrich(candidate: dict, watchlist: set[str]) -> StockSearchResult | None:
    symbol = str(candidate.get("symbol") or "").strip().upper()
    if not symbol:
        return None
    profile = await _safe_profile(symbol) or {}
    name = candidate.get("description") or profile.get("name") or symbol
    return StockSearchResult(
        symbol=symbol,
        name=name,
        exchange=candidate.get("exchange") or profile.get("exchange") or candidate.get("displaySymbol") or "US",
        type=candidate.get("type") or "Stock",
        logo_url=profile.get("logo") or None,
        official_name=profile.get("name") or None,
        is_in_watchlist=symbol in watchlist,
    )


async def search_stocks(
    query: str | None = None, watchlist_symbols: Iterable[str] = ()
) -> list[StockSearchResult]:
    watchlist = {symbol.strip().upper() for symbol in watchlist_symbols if symbol}
    trimmed = (query or "").strip()

    try:
        if trimmed:
            candidates = await finnhub.search_symbols(trimmed)
        else:
            candidates = await _popular_candidates()
    except Exception as exc:
        logger.error(f"Error in stock search: {exc}")
        return []

    candidates = candidates[: settings.search_limit]
    enriched = await asyncio.gather(*(_enrich(candidate, watchlist) for candidate in candidates))
    return [result for result in enriched if result is not None]
