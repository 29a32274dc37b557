import asyncio

from signalist.cache import get_json, remember, set_json


class FakeRedis:
    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.expirations: dict[str, int] = {}

    async def get(self, key: str) -> str | None:
        return self.store.get(key)

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.store[key] = value
        self.expirations[key] = ttl


class BrokenRedis:
    async def get(self, key: str) -> str | None:
        raise ConnectionError("redis is down")

    async def setex(self, key: str, ttl: int, value: str) -> None:
        raise ConnectionError("redis is down")


def test_cache_roundtrip(monkeypatch) -> None:
    fake = FakeRedis()
    monkeypatch.setattr("signalist.cache._get_client", lambda: fake)

    payload = {"result": [{"symbol": "AAPL", "description": "Apple Inc"}]}
    asyncio.run(set_json("finnhub:/search:q=apple", payload, ttl_seconds=123))
    cached = asyncio.run(get_json("finnhub:/search:q=apple"))

    assert cached == payload
    assert fake.expirations["finnhub:/search:q=apple"] == 123


def test_cache_errors_are_misses(monkeypatch) -> None:
    monkeypatch.setattr("signalist.cache._get_client", lambda: BrokenRedis())

    asyncio.run(set_json("key", {"a": 1}, ttl_seconds=10))
    assert asyncio.run(get_json("key")) is None


def test_remember_loads_once(monkeypatch) -> None:
    fake = FakeRedis()
    monkeypatch.setattr("signalist.cache._get_client", lambda: fake)
    calls: list[int] = []

    async def loader() -> dict:
        calls.append(1)
        return {"name": "Apple Inc"}

    first = asyncio.run(remember("finnhub:/stock/profile2:symbol=AAPL", 60, loader))
    second = asyncio.run(remember("finnhub:/stock/profile2:symbol=AAPL", 60, loader))

    assert first == second == {"name": "Apple Inc"}
    assert len(calls) == 1
