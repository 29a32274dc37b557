from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.ext.asyncio import AsyncSession

from signalist.api.deps import get_optional_user
from signalist.db.session import get_session
from signalist.services import watchlist as watchlist_service
from signalist.services.search import search_stocks
from signalist.services.users import UserProfile
from signalist.web import widgets
from signalist.web.guard import SIGN_IN_PATH

templates = Jinja2Templates(directory=Path(__file__).parent / "templates")

router = APIRouter()

NAV_ITEMS = [
    {"href": "/", "label": "Dashboard"},
    {"href": "/search", "label": "Search"},
    {"href": "/watchlist", "label": "Watchlist"},
]

INVESTMENT_GOALS = ["Growth", "Income", "Balanced", "Conservative"]
RISK_TOLERANCE_OPTIONS = ["Low", "Medium", "High"]
PREFERRED_INDUSTRIES = ["Technology", "Healthcare", "Finance", "Energy", "Consumer Goods"]


def format_market_cap(value: float | None) -> str:
    if value is None:
        return "–"
    for threshold, suffix in ((1e12, "T"), (1e9, "B"), (1e6, "M")):
        if value >= threshold:
            return f"${value / threshold:.2f}{suffix}"
    return f"${value:,.0f}"


templates.env.filters["market_cap"] = format_market_cap


def _render(request: Request, name: str, user: UserProfile | None = None, **context) -> HTMLResponse:
    return templates.TemplateResponse(
        request, name, {"nav_items": NAV_ITEMS, "user": user, **context}
    )


@router.get("/sign-in", response_class=HTMLResponse)
def sign_in_page(request: Request) -> HTMLResponse:
    return _render(request, "sign_in.html")


@router.get("/sign-up", response_class=HTMLResponse)
def sign_up_page(request: Request) -> HTMLResponse:
    return _render(
        request,
        "sign_up.html",
        investment_goals=INVESTMENT_GOALS,
        risk_tolerance_options=RISK_TOLERANCE_OPTIONS,
        preferred_industries=PREFERRED_INDUSTRIES,
    )


@router.get("/", response_class=HTMLResponse)
def dashboard(request: Request, user: UserProfile | None = Depends(get_optional_user)) -> HTMLResponse:
    return _render(request, "dashboard.html", user, widgets=widgets.dashboard_widgets())


@router.get("/watchlist", response_class=HTMLResponse)
async def watchlist_page(
    request: Request,
    user: UserProfile | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    if user is None:
        return RedirectResponse(SIGN_IN_PATH, status_code=307)
    items = await watchlist_service.list_items_by_email(db, user.email)
    return _render(request, "watchlist.html", user, items=items)


@router.get("/stocks/{symbol}", response_class=HTMLResponse)
async def stock_page(
    symbol: str,
    request: Request,
    user: UserProfile | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    if user is None:
        return RedirectResponse(SIGN_IN_PATH, status_code=307)
    symbol = symbol.strip().upper()
    symbols = await watchlist_service.list_symbols_by_email(db, user.email)
    return _render(
        request,
        "stock.html",
        user,
        symbol=symbol,
        is_in_watchlist=symbol in symbols,
        widgets=widgets.stock_widgets(symbol),
    )


@router.get("/search", response_class=HTMLResponse)
async def search_page(
    request: Request,
    q: str | None = None,
    user: UserProfile | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    if user is None:
        return RedirectResponse(SIGN_IN_PATH, status_code=307)
    symbols = await watchlist_service.list_symbols_by_email(db, user.email)
    results = await search_stocks(q, watchlist_symbols=symbols)
    if not (q or "").strip():
        results = results[:10]
    return _render(request, "search.html", user, query=q or "", results=results)
