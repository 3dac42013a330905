"""
Polycache - Redis Round-Trip Tests

Runs instance-level round trips through both redis drivers over an in-memory
client. Values pass through redis-py's own Encoder, so every argument is
converted exactly as it would be on the wire (and rejected where redis-py
rejects it).
"""

import fnmatch
from types import SimpleNamespace
from typing import Any

import pytest
from redis.connection import Encoder

from polycache.cache import CacheInstance
from polycache.cache.drivers import redis as redis_module
from polycache.cache.drivers import redis_url as redis_url_module
from polycache.cache.drivers.redis import RedisDriver
from polycache.cache.drivers.redis_url import RedisURLDriver


class InMemoryRedis:
    """The subset of the redis-py client the drivers call, with decode_responses=True."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self._encoder = Encoder(encoding="utf-8", encoding_errors="strict", decode_responses=True)

    def _store(self, key: str, value: Any, ttl: int | None) -> None:
        self.data[key] = self._encoder.decode(self._encoder.encode(value), force=True)
        if ttl:
            self.ttls[key] = ttl
        else:
            self.ttls.pop(key, None)

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: Any, ex: int | None = None) -> bool:
        self._store(key, value, ex)
        return True

    def setex(self, key: str, time: int, value: Any) -> bool:
        self._store(key, value, time)
        return True

    def mget(self, keys: list[str]) -> list[str | None]:
        return [self.data.get(k) for k in keys]

    def delete(self, *keys: str) -> int:
        removed = [k for k in keys if self.data.pop(k, None) is not None]
        for key in keys:
            self.ttls.pop(key, None)
        return len(removed)

    def keys(self, pattern: str) -> list[str]:
        return [k for k in self.data if fnmatch.fnmatchcase(k, pattern)]

    def scan_iter(self, match: str, count: int) -> Any:
        return iter(self.keys(match))

    def pipeline(self, transaction: bool = True) -> "InMemoryRedis":
        return self

    def execute(self) -> list[Any]:
        return []

    def close(self) -> None:
        pass


@pytest.fixture
def client() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture(params=["redis", "redis_url"])
def redis_instance(request: pytest.FixtureRequest, client: InMemoryRedis, monkeypatch: pytest.MonkeyPatch) -> CacheInstance:
    if request.param == "redis":
        monkeypatch.setattr(redis_module, "Redis", lambda **kwargs: client)
        driver = RedisDriver()
    else:
        monkeypatch.setattr(redis_url_module, "Redis", SimpleNamespace(from_url=lambda *args, **kwargs: client))
        driver = RedisURLDriver("redis://localhost:6379/0")
    return CacheInstance("default", driver)


class TestRoundTrip:
    """Every value the instance accepts reads back equal through redis."""

    def test_various_types(self, redis_instance: CacheInstance, sample_cache_data: dict[str, Any]) -> None:
        for key, value in sample_cache_data.items():
            redis_instance.set(key, value)

        for key, expected in sample_cache_data.items():
            assert redis_instance.get(key, as_array=True) == expected

    @pytest.mark.parametrize("value", [True, False])
    def test_bool(self, redis_instance: CacheInstance, client: InMemoryRedis, value: bool) -> None:
        redis_instance.set("flag", value)

        assert redis_instance.get("flag") is value
        assert client.data["0b4e02e6.flag"] == ("true" if value else "false")

    def test_batch_with_scalars(self, redis_instance: CacheInstance) -> None:
        redis_instance.mset({"t": True, "f": 2.5, "i": 7, "s": "plain"}, expires=30)

        assert redis_instance.mget(["t", "f", "i", "s", "missing"]) == {
            "t": True,
            "f": 2.5,
            "i": 7,
            "s": "plain",
            "missing": None,
        }

    def test_ttl_recorded(self, redis_instance: CacheInstance, client: InMemoryRedis) -> None:
        redis_instance.set("k", "v", 60)
        redis_instance.set("n", "v")

        assert client.ttls == {"0b4e02e6.k": 60}

    def test_keys_and_flush(self, redis_instance: CacheInstance, client: InMemoryRedis) -> None:
        client.set("ffffffff.foreign", "x")
        redis_instance.mset({"users.1": True, "posts.1": 1.0})

        assert sorted(redis_instance.keys()) == ["posts.1", "users.1"]

        redis_instance.flush()
        assert redis_instance.keys() == []
        assert client.data == {"ffffffff.foreign": "x"}
