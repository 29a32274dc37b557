from __future__ import annotations

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from signalist.jobs.registry import USER_CREATED_EVENT, send_event
from signalist.providers import auth as auth_provider
from signalist.schemas.auth import SignInFormData, SignUpFormData
from signalist.services.users import update_country_for_email


async def sign_up_with_email(db: AsyncSession, form: SignUpFormData) -> list[str]:
    """Create the account, store the country and queue the welcome email.

    Returns the provider's Set-Cookie headers so the caller is signed in.
    """
    response = await auth_provider.sign_up_email(form.email, form.password, form.full_name)
    await update_country_for_email(db, form.email, form.country)
    try:
        send_event(
            USER_CREATED_EVENT,
            {
                "email": form.email,
                "name": form.full_name,
                "country": form.country,
                "investment_goals": form.investment_goals,
                "risk_tolerance": form.risk_tolerance,
                "preferred_industry": form.preferred_industry,
            },
        )
    except Exception as exc:
        # The account exists at this point; a missing welcome email is not a sign-up failure.
        logger.error(f"Failed to queue welcome email for {form.email}: {exc}")
    return response.set_cookie_headers


async def sign_in_with_email(form: SignInFormData) -> list[str]:
    response = await auth_provider.sign_in_email(form.email, form.password)
    return response.set_cookie_headers


async def sign_out(cookies: dict[str, str]) -> list[str]:
    response = await auth_provider.sign_out(cookies)
    return response.set_cookie_headers
