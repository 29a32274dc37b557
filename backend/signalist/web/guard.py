from __future__ import annotations

from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from signalist.api.deps import session_cookie
from signalist.config.settings import settings

SIGN_IN_PATH = "/sign-in"


def is_public_path(path: str) -> bool:
    for prefix in settings.auth.public_paths:
        if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
            return True
    return False


async def session_guard(request: Request, call_next) -> Response:
    """Redirect page requests without a session cookie to the sign-in page.

    Only the cookie's presence is checked here; pages resolve the user themselves.
    """
    if is_public_path(request.url.path) or session_cookie(request):
        return await call_next(request)
    return RedirectResponse(url=SIGN_IN_PATH, status_code=307)
