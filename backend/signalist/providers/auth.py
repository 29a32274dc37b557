"""Forwarding client for the external auth provider's email/password API.

Password storage, session issuing and cookie signing stay with the provider;
this module only relays requests and hands back the cookies it sets.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from signalist.config.settings import settings
from signalist.errors import UpstreamError

_SIGN_UP_PATH = "/api/auth/sign-up/email"
_SIGN_IN_PATH = "/api/auth/sign-in/email"
_SIGN_OUT_PATH = "/api/auth/sign-out"


@dataclass
class AuthResponse:
    payload: dict
    set_cookie_headers: list[str] = field(default_factory=list)


async def _post(path: str, json: dict | None = None, cookies: dict[str, str] | None = None) -> AuthResponse:
    url = f"{settings.auth.base_url.rstrip('/')}{path}"
    try:
        async with httpx.AsyncClient(timeout=10.0, cookies=cookies) as client:
            response = await client.post(url, json=json or {})
    except httpx.HTTPError as exc:
        raise UpstreamError(f"Auth provider request failed: {exc}") from exc

    if response.is_error:
        raise UpstreamError(
            f"Auth provider rejected {path}: {response.status_code}", status=response.status_code
        )
    try:
        payload = response.json()
    except ValueError:
        payload = {}
    return AuthResponse(
        payload=payload if isinstance(payload, dict) else {},
        set_cookie_headers=response.headers.get_list("set-cookie"),
    )


async def sign_up_email(email: str, password: str, name: str) -> AuthResponse:
    return await _post(_SIGN_UP_PATH, {"email": email, "password": password, "name": name})


async def sign_in_email(email: str, password: str) -> AuthResponse:
    return await _post(_SIGN_IN_PATH, {"email": email, "password": password})


async def sign_out(cookies: dict[str, str]) -> AuthResponse:
    return await _post(_SIGN_OUT_PATH, cookies=cookies)
