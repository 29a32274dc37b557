# backend/signalist/db/session.py

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from signalist.config.settings import settings
from signalist.db.models import Base
from signalist.errors import ConfigurationError

_CREDENTIALS_RE = re.compile(r"//(.*?):.*?@")


def redact_url(url: str | None) -> str | None:
    if not url:
        return url
    return _CREDENTIALS_RE.sub(r"//\1:<redacted>@", url, count=1)


class Database:
    """Lazily connected, process-wide engine handle.

    The first caller of :meth:`connect` starts a single connection attempt;
    callers arriving while it is in flight await the same task. A failed
    attempt clears the pending task so the next call starts over.
    """

    def __init__(self, url: str | None = None, **engine_kwargs) -> None:
        self._url = url
        self._engine_kwargs = engine_kwargs
        self.engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None
        self._pending: asyncio.Task | None = None

    @property
    def url(self) -> str | None:
        return self._url or settings.database_url

    @property
    def state(self) -> str:
        if self.engine is not None:
            return "connected"
        if self._pending is not None and not self._pending.done():
            return "connecting"
        return "disconnected"

    async def connect(self) -> AsyncEngine:
        if self.engine is not None:
            return self.engine
        if not self.url:
            raise ConfigurationError("DATABASE_URL must be set.")

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._establish(self.url))
        pending = self._pending
        try:
            return await asyncio.shield(pending)
        except Exception:
            if self._pending is pending:
                self._pending = None
            raise

    async def _establish(self, url: str) -> AsyncEngine:
        engine = create_async_engine(url, echo=False, **self._engine_kwargs)
        try:
            async with engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            await engine.dispose()
            logger.error(f"Database connection failed ({redact_url(url)})")
            raise

        self.engine = engine
        self._sessionmaker = async_sessionmaker(
            bind=engine, autoflush=False, expire_on_commit=False
        )
        logger.info(f"Connected to database {engine.url.database}")
        return engine

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        await self.connect()
        if self._sessionmaker is None:
            raise ConfigurationError("Database session factory is not initialised.")
        async with self._sessionmaker() as session:
            yield session

    async def create_schema(self) -> None:
        engine = await self.connect()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        engine = self.engine
        self.engine = None
        self._sessionmaker = None
        self._pending = None
        if engine is not None:
            await engine.dispose()

    def describe(self) -> dict:
        engine = self.engine
        return {
            "state": self.state,
            "db_name": engine.url.database if engine is not None else None,
            "host": engine.url.host if engine is not None else None,
            "url": redact_url(self.url),
        }


database = Database()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency to get a database session."""
    async with database.session() as session:
        yield session
