from __future__ import annotations

import asyncio
from typing import Literal

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from signalist.db.models import WatchlistItem, utcnow
from signalist.errors import UserNotFoundError, ValidationError, WatchlistConflictError
from signalist.providers import finnhub
from signalist.services.users import get_user_id_by_email

ToggleAction = Literal["added", "removed"]


def normalize_symbol(symbol: str | None) -> str:
    normalized = (symbol or "").strip().upper()
    if not normalized:
        raise ValidationError("Symbol is required.")
    return normalized


def _insert_if_absent(db: AsyncSession, values: dict):
    dialect = db.bind.dialect.name if db.bind is not None else "postgresql"
    insert = sqlite_insert if dialect == "sqlite" else pg_insert
    stmt = insert(WatchlistItem).values(**values)
    # Idempotent: a second add for the same (user, symbol) is ignored.
    return stmt.on_conflict_do_nothing(index_elements=["user_id", "symbol"])


async def _get_item(db: AsyncSession, user_id: str, symbol: str) -> WatchlistItem | None:
    result = await db.execute(
        select(WatchlistItem).where(
            WatchlistItem.user_id == user_id, WatchlistItem.symbol == symbol
        )
    )
    return result.scalar_one_or_none()


async def list_items(db: AsyncSession, user_id: str) -> list[WatchlistItem]:
    result = await db.execute(
        select(WatchlistItem)
        .where(WatchlistItem.user_id == user_id)
        .order_by(WatchlistItem.added_at.desc(), WatchlistItem.id.desc())
    )
    return list(result.scalars().all())


async def list_symbols(db: AsyncSession, user_id: str) -> list[str]:
    result = await db.execute(
        select(WatchlistItem.symbol)
        .where(WatchlistItem.user_id == user_id)
        .order_by(WatchlistItem.added_at.desc(), WatchlistItem.id.desc())
    )
    return [str(symbol) for symbol in result.scalars().all()]


async def add(db: AsyncSession, user_id: str, symbol: str, company: str | None) -> WatchlistItem:
    symbol = normalize_symbol(symbol)
    company = (company or "").strip() or symbol
    stmt = _insert_if_absent(
        db,
        {
            "user_id": user_id,
            "symbol": symbol,
            "company": company,
            "added_at": utcnow(),
        },
    )
    result = await db.execute(stmt.returning(WatchlistItem))
    item = result.scalar_one_or_none()
    await db.commit()

    if item is None:
        item = await _get_item(db, user_id, symbol)
    if item is None:
        raise WatchlistConflictError(f"{symbol} was removed while it was being added.")
    return item


async def remove(db: AsyncSession, user_id: str, symbol: str) -> bool:
    symbol = normalize_symbol(symbol)
    result = await db.execute(
        delete(WatchlistItem).where(
            WatchlistItem.user_id == user_id, WatchlistItem.symbol == symbol
        )
    )
    await db.commit()
    return bool(result.rowcount)


async def toggle(db: AsyncSession, user_id: str, symbol: str, company: str | None) -> ToggleAction:
    symbol = normalize_symbol(symbol)
    existing = await _get_item(db, user_id, symbol)
    if existing is not None:
        await remove(db, user_id, symbol)
        return "removed"
    await add(db, user_id, symbol, company)
    return "added"


async def refresh_metrics(db: AsyncSession, user_id: str) -> list[WatchlistItem]:
    items = await list_items(db, user_id)
    if not items:
        return items

    quotes = await asyncio.gather(
        *(finnhub.fetch_quote(item.symbol) for item in items), return_exceptions=True
    )
    metrics = await asyncio.gather(
        *(finnhub.fetch_basic_metrics(item.symbol) for item in items), return_exceptions=True
    )
    for item, quote, metric in zip(items, quotes, metrics):
        if isinstance(quote, BaseException):
            logger.warning(f"Quote refresh failed for {item.symbol}: {quote}")
        elif quote:
            item.price = quote.get("c", item.price)
            item.change = quote.get("dp", item.change)
        if isinstance(metric, BaseException):
            logger.warning(f"Metric refresh failed for {item.symbol}: {metric}")
        elif metric:
            capitalization = metric.get("marketCapitalization")
            if isinstance(capitalization, (int, float)):
                # Finnhub reports market cap in millions
                item.market_cap = float(capitalization) * 1_000_000
            item.pe_ratio = metric.get("peTTM", item.pe_ratio)
    await db.commit()
    return items


async def _require_user_id(db: AsyncSession, email: str | None) -> str:
    user_id = await get_user_id_by_email(db, email)
    if not user_id:
        raise UserNotFoundError(f"No user found for {email or '<empty email>'}")
    return user_id


async def list_items_by_email(db: AsyncSession, email: str | None) -> list[WatchlistItem]:
    user_id = await get_user_id_by_email(db, email)
    if not user_id:
        return []
    return await list_items(db, user_id)


async def list_symbols_by_email(db: AsyncSession, email: str | None) -> list[str]:
    user_id = await get_user_id_by_email(db, email)
    if not user_id:
        return []
    return await list_symbols(db, user_id)


async def add_by_email(db: AsyncSession, email: str | None, symbol: str, company: str | None) -> WatchlistItem:
    return await add(db, await _require_user_id(db, email), symbol, company)


async def remove_by_email(db: AsyncSession, email: str | None, symbol: str) -> bool:
    return await remove(db, await _require_user_id(db, email), symbol)


async def toggle_by_email(db: AsyncSession, email: str | None, symbol: str, company: str | None) -> ToggleAction:
    return await toggle(db, await _require_user_id(db, email), symbol, company)


async def refresh_metrics_by_email(db: AsyncSession, email: str | None) -> list[WatchlistItem]:
    return await refresh_metrics(db, await _require_user_id(db, email))
