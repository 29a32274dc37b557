import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import HTMLResponse, JSONResponse
from loguru import logger
from markupsafe import escape
from sqlalchemy.ext.asyncio import AsyncSession

from signalist.api.deps import get_current_user, require_jobs_signature
from signalist.config.settings import settings
from signalist.db.session import database, get_session
from signalist.errors import UserNotFoundError, ValidationError
from signalist.jobs import registry
from signalist.mail import unsubscribe
from signalist.schemas.auth import AuthResult, SignInFormData, SignUpFormData
from signalist.schemas.jobs import EnqueuedJob, EventRequest, JobDefinition
from signalist.schemas.news import FormattedNewsArticle
from signalist.schemas.stocks import StockSearchResult
from signalist.schemas.watchlist import (
    RemoveResult,
    ToggleResult,
    WatchlistItemResponse,
    WatchlistRequest,
)
from signalist.services import auth as auth_service
from signalist.services import watchlist as watchlist_service
from signalist.services.news import get_news
from signalist.services.search import search_stocks
from signalist.services.users import UserProfile, set_daily_emails_subscription

router = APIRouter()

CurrentUser = Annotated[UserProfile, Depends(get_current_user)]
Session = Annotated[AsyncSession, Depends(get_session)]


def _apply_cookies(response: Response, set_cookie_headers: list[str]) -> None:
    for header in set_cookie_headers:
        response.headers.append("set-cookie", header)


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/api/watchlist", response_model=list[WatchlistItemResponse])
async def list_watchlist(user: CurrentUser, db: Session) -> list[WatchlistItemResponse]:
    items = await watchlist_service.list_items_by_email(db, user.email)
    return [WatchlistItemResponse.model_validate(item) for item in items]


@router.post("/api/watchlist", response_model=WatchlistItemResponse)
async def add_watchlist_item(
    payload: WatchlistRequest, user: CurrentUser, db: Session
) -> WatchlistItemResponse:
    item = await watchlist_service.add_by_email(db, user.email, payload.symbol, payload.company)
    return WatchlistItemResponse.model_validate(item)


@router.delete("/api/watchlist/{symbol}", response_model=RemoveResult)
async def remove_watchlist_item(symbol: str, user: CurrentUser, db: Session) -> RemoveResult:
    removed = await watchlist_service.remove_by_email(db, user.email, symbol)
    return RemoveResult(ok=True, removed=removed)


@router.post("/api/watchlist/toggle", response_model=ToggleResult)
async def toggle_watchlist_item(
    payload: WatchlistRequest, user: CurrentUser, db: Session
) -> ToggleResult:
    try:
        action = await watchlist_service.toggle_by_email(db, user.email, payload.symbol, payload.company)
    except (UserNotFoundError, ValidationError) as exc:
        return ToggleResult(ok=False, error=exc.message)
    return ToggleResult(ok=True, action=action)


@router.post("/api/watchlist/refresh", response_model=list[WatchlistItemResponse])
async def refresh_watchlist(user: CurrentUser, db: Session) -> list[WatchlistItemResponse]:
    items = await watchlist_service.refresh_metrics_by_email(db, user.email)
    return [WatchlistItemResponse.model_validate(item) for item in items]


@router.get("/api/stocks/search", response_model=list[StockSearchResult])
async def search(user: CurrentUser, db: Session, q: str | None = None) -> list[StockSearchResult]:
    symbols = await watchlist_service.list_symbols_by_email(db, user.email)
    return await search_stocks(q, watchlist_symbols=symbols)


@router.get("/api/news", response_model=list[FormattedNewsArticle])
async def news(
    user: CurrentUser, symbols: Annotated[list[str] | None, Query()] = None
) -> list[FormattedNewsArticle]:
    return await get_news(symbols)


@router.get("/api/email/unsubscribe")
async def unsubscribe_email(
    db: Session,
    email: str | None = None,
    t: str | None = None,
    sig: str | None = None,
) -> Response:
    if not email or not t or not sig:
        return JSONResponse(
            {"success": False, "message": "Invalid unsubscribe link."},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    if not unsubscribe.verify(email, t, sig):
        return JSONResponse(
            {"success": False, "message": "Signature mismatch."},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if not await set_daily_emails_subscription(db, email, False):
        return JSONResponse(
            {"success": False, "message": "User not found."},
            status_code=status.HTTP_404_NOT_FOUND,
        )

    logger.info(f"Unsubscribed {email} from daily emails")
    return HTMLResponse(unsubscribe_page(email))


def unsubscribe_page(email: str) -> str:
    return f"""<!DOCTYPE html><html><body style="font-family:Arial; background:#0b0b0b; color:#e5e7eb; padding:32px;">
  <div style="max-width:640px; margin:0 auto; background:#141414; border:1px solid #30333A; border-radius:12px; padding:28px;">
    <h2 style="margin-top:0; color:#FDD458;">You've been unsubscribed</h2>
    <p><strong>{escape(email)}</strong> will no longer receive daily market news emails from Signalist.</p>
    <p>If this was a mistake, you can resubscribe from your profile inside the app.</p>
    <p style="margin-top:24px;"><a href="{escape(settings.base_url)}" style="color:#FDD458;">Return to Signalist</a></p>
  </div>
</body></html>"""


@router.get("/api/debug/db")
async def debug_db() -> JSONResponse:
    headers = {"Cache-Control": "no-store"}
    now = datetime.datetime.now(datetime.UTC).isoformat()
    try:
        await database.connect()
    except Exception as exc:
        return JSONResponse(
            {"ok": False, "error": str(exc), "now": now},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            headers=headers,
        )
    return JSONResponse({"ok": True, **database.describe(), "now": now}, headers=headers)


@router.get("/api/jobs", response_model=list[JobDefinition])
def list_jobs() -> list[JobDefinition]:
    return registry.list_functions()


@router.put("/api/jobs", response_model=list[JobDefinition], dependencies=[Depends(require_jobs_signature)])
def register_jobs() -> list[JobDefinition]:
    return registry.register_schedules()


@router.post("/api/jobs", response_model=EnqueuedJob, dependencies=[Depends(require_jobs_signature)])
def send_job_event(payload: EventRequest) -> EnqueuedJob:
    return registry.send_event(payload.name, payload.data)


@router.post("/api/auth/sign-up", response_model=AuthResult)
async def sign_up(form: SignUpFormData, response: Response, db: Session) -> AuthResult:
    try:
        cookies = await auth_service.sign_up_with_email(db, form)
    except Exception as exc:
        logger.warning(f"Sign up failed for {form.email}: {exc}")
        return AuthResult(success=False, error="Sign up failed")
    _apply_cookies(response, cookies)
    return AuthResult(success=True)


@router.post("/api/auth/sign-in", response_model=AuthResult)
async def sign_in(form: SignInFormData, response: Response) -> AuthResult:
    try:
        cookies = await auth_service.sign_in_with_email(form)
    except Exception as exc:
        logger.warning(f"Sign in failed for {form.email}: {exc}")
        return AuthResult(success=False, error="Sign in failed")
    _apply_cookies(response, cookies)
    return AuthResult(success=True)


@router.post("/api/auth/sign-out", response_model=AuthResult)
async def sign_out(request: Request, response: Response) -> AuthResult:
    try:
        cookies = await auth_service.sign_out(dict(request.cookies))
    except Exception as exc:
        logger.warning(f"Sign out failed: {exc}")
        return AuthResult(success=False, error="Sign out failed.")
    _apply_cookies(response, cookies)
    return AuthResult(success=True)
