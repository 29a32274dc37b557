from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class FormattedNewsArticle(BaseModel):
    id: Optional[int] = None
    headline: str
    summary: str
    source: str
    url: str
    datetime: int
    image: str = ""
    category: str
    related: str = ""
    symbol: Optional[str] = None
    index: int = 0
