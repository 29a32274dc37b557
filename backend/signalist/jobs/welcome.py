from __future__ import annotations

import asyncio

from loguru import logger

from signalist.ai import gemini
from signalist.ai.prompts import DEFAULT_WELCOME_INTRO, build_user_profile, welcome_prompt
from signalist.logging import setup_logger
from signalist.mail.sender import send_welcome_email
from signalist.schemas.jobs import UserCreatedEvent, WelcomeEmailResult


async def _generate_intro(event: UserCreatedEvent) -> str | None:
    profile = build_user_profile(
        event.country, event.investment_goals, event.risk_tolerance, event.preferred_industry
    )
    try:
        return await gemini.generate_text(welcome_prompt(profile))
    except Exception as exc:
        logger.warning(f"Welcome intro generation failed for {event.email}: {exc}")
        return None


async def send_sign_up_email(event: UserCreatedEvent) -> WelcomeEmailResult:
    intro = await _generate_intro(event)
    used_fallback = not intro
    await send_welcome_email(event.email, event.name, intro or DEFAULT_WELCOME_INTRO)
    logger.info(f"Welcome email sent to {event.email}")
    return WelcomeEmailResult(
        success=True,
        message="Welcome email sent successfully.",
        used_fallback=used_fallback,
    )


def run_welcome_email(data: dict) -> dict:
    setup_logger()
    event = UserCreatedEvent(**data)
    return asyncio.run(send_sign_up_email(event)).model_dump()
