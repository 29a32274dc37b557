import asyncio
import datetime
from unittest.mock import AsyncMock, patch

import pytest

from signalist.config.settings import settings
from signalist.errors import ConfigurationError
from signalist.providers import finnhub


def test_cache_key_is_independent_of_param_order() -> None:
    first = finnhub._cache_key("/company-news", {"symbol": "AAPL", "from": "2026-10-13", "to": "2026-10-18"})
    second = finnhub._cache_key("/company-news", {"to": "2026-10-18", "symbol": "AAPL", "from": "2026-10-13"})

    assert first == second
    assert first == "finnhub:/company-news:from=2026-10-13&symbol=AAPL&to=2026-10-18"


def test_missing_api_key_raises(monkeypatch) -> None:
    monkeypatch.setattr(settings.finnhub, "api_key", None)

    with pytest.raises(ConfigurationError):
        asyncio.run(finnhub.fetch_general_news())


def test_search_symbols_uses_cache(monkeypatch) -> None:
    monkeypatch.setattr(settings.finnhub, "api_key", "test-key")
    cached = {"result": [{"symbol": "AAPL"}]}

    with (
        patch("signalist.cache.get_json", AsyncMock(return_value=cached)) as get_mock,
        patch("signalist.providers.finnhub._request", AsyncMock()) as request_mock,
    ):
        result = asyncio.run(finnhub.search_symbols("apple"))

    assert result == [{"symbol": "AAPL"}]
    get_mock.assert_awaited_once_with("finnhub:/search:q=apple")
    request_mock.assert_not_awaited()


def test_company_news_is_not_cached(monkeypatch) -> None:
    monkeypatch.setattr(settings.finnhub, "api_key", "test-key")
    articles = [{"headline": "h"}]

    with (
        patch("signalist.cache.get_json", AsyncMock()) as get_mock,
        patch("signalist.providers.finnhub._request", AsyncMock(return_value=articles)) as request_mock,
    ):
        result = asyncio.run(
            finnhub.fetch_company_news("AAPL", datetime.date(2026, 10, 13), datetime.date(2026, 10, 18))
        )

    assert result == articles
    get_mock.assert_not_awaited()
    request_mock.assert_awaited_once_with(
        "/company-news", {"symbol": "AAPL", "from": "2026-10-13", "to": "2026-10-18"}, "test-key"
    )


def test_quote_without_values_is_empty(monkeypatch) -> None:
    monkeypatch.setattr(settings.finnhub, "api_key", "test-key")

    with patch("signalist.providers.finnhub._request", AsyncMock(return_value={"c": None, "pc": None})):
        assert asyncio.run(finnhub.fetch_quote("NOPE")) == {}
