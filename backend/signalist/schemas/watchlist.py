from __future__ import annotations

import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class WatchlistRequest(BaseModel):
    symbol: str
    company: str = ""


class WatchlistItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    symbol: str
    company: str
    added_at: datetime.datetime
    price: float | None = None
    change: float | None = None
    market_cap: float | None = None
    pe_ratio: float | None = None


class ToggleResult(BaseModel):
    ok: bool
    action: Literal["added", "removed"] | None = None
    error: str | None = None


class RemoveResult(BaseModel):
    ok: bool
    removed: bool = False
