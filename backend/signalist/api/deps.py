from __future__ import annotations

import hmac

from fastapi import Depends, HTTPException, Request, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from signalist.config.settings import settings
from signalist.db.session import get_session
from signalist.services.users import UserProfile, get_user_by_session_token


def session_cookie(request: Request) -> str | None:
    name = settings.auth.session_cookie_name
    return request.cookies.get(name) or request.cookies.get(f"__Secure-{name}")


async def get_optional_user(
    request: Request, db: AsyncSession = Depends(get_session)
) -> UserProfile | None:
    return await get_user_by_session_token(db, session_cookie(request))


async def get_current_user(user: UserProfile | None = Depends(get_optional_user)) -> UserProfile:
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not signed in.")
    return user


def require_jobs_signature(request: Request) -> None:
    """Only the job runtime, holding the shared signing key, may send events or re-arm schedules."""
    key = settings.jobs_signing_key
    if not key:
        logger.warning("Rejected job request: JOBS_SIGNING_KEY is not configured")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid job signature.")

    scheme, _, supplied = request.headers.get("authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not hmac.compare_digest(
        supplied.strip().encode("utf-8"), key.encode("utf-8")
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid job signature.")
