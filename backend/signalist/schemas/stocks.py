from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class StockSearchResult(BaseModel):
    symbol: str
    name: str
    exchange: str
    type: str
    logo_url: Optional[str] = None
    official_name: Optional[str] = None
    is_in_watchlist: bool = False
