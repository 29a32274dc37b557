"""Read access to the auth provider's user and session tables."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from signalist.db.models import AuthSession, User, utcnow


@dataclass(frozen=True)
class UserProfile:
    id: str
    email: str
    name: str
    country: str | None = None


def _to_profile(user: User) -> UserProfile:
    return UserProfile(id=user.id, email=user.email, name=user.name or "", country=user.country)


async def get_user_by_email(db: AsyncSession, email: str | None) -> UserProfile | None:
    if not email:
        return None
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    return _to_profile(user) if user is not None else None


async def get_user_id_by_email(db: AsyncSession, email: str | None) -> str | None:
    user = await get_user_by_email(db, email)
    return user.id if user is not None else None


async def get_user_by_session_token(db: AsyncSession, token: str | None) -> UserProfile | None:
    """Resolve the signed-in user from a session cookie value.

    The cookie holds ``<token>.<signature>``; only the token part is stored.
    """
    if not token:
        return None
    raw_token = token.split(".", 1)[0]
    now = utcnow()
    result = await db.execute(
        select(User)
        .join(AuthSession, AuthSession.user_id == User.id)
        .where(AuthSession.token == raw_token, AuthSession.expires_at > now)
    )
    user = result.scalar_one_or_none()
    return _to_profile(user) if user is not None else None


async def list_users_for_news_email(db: AsyncSession) -> list[UserProfile]:
    result = await db.execute(
        select(User)
        .where(User.email.is_not(None), User.daily_emails.is_(True))
        .order_by(User.email)
    )
    return [_to_profile(user) for user in result.scalars().all() if user.email and user.name]


async def update_country_for_email(db: AsyncSession, email: str, country: str) -> bool:
    result = await db.execute(update(User).where(User.email == email).values(country=country))
    await db.commit()
    matched = bool(result.rowcount)
    if not matched:
        logger.warning(f"No user found to update country for {email}")
    return matched


async def set_daily_emails_subscription(db: AsyncSession, email: str, subscribed: bool) -> bool:
    result = await db.execute(
        update(User).where(User.email == email).values(daily_emails=subscribed)
    )
    await db.commit()
    return bool(result.rowcount)
