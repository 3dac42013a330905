"""
Polycache - Redis URL Driver Tests

Tests RedisURLDriver against a mocked redis client.
"""

from unittest.mock import MagicMock, call

import pytest

from polycache.cache.drivers import redis_url as redis_url_module
from polycache.cache.drivers.redis_url import RedisURLDriver

URL = "redis://cache.local:6379/4"


@pytest.fixture
def redis_cls(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    mock_cls = MagicMock(name="Redis")
    monkeypatch.setattr(redis_url_module, "Redis", mock_cls)
    return mock_cls


@pytest.fixture
def client(redis_cls: MagicMock) -> MagicMock:
    return redis_cls.from_url.return_value


@pytest.fixture
def driver(redis_cls: MagicMock) -> RedisURLDriver:
    return RedisURLDriver(URL)


def test_client_from_url(redis_cls: MagicMock, driver: RedisURLDriver) -> None:
    redis_cls.from_url.assert_called_once_with(URL, decode_responses=True, socket_timeout=None)
    assert driver.url == URL


def test_url_required(redis_cls: MagicMock) -> None:
    with pytest.raises(ValueError, match="url is required"):
        RedisURLDriver("")


def test_set_with_ttl_uses_setex(client: MagicMock, driver: RedisURLDriver) -> None:
    driver.set("tok.k", "v", 30)

    client.setex.assert_called_once_with("tok.k", 30, "v")
    client.set.assert_not_called()


@pytest.mark.parametrize("expires", [None, 0])
def test_set_without_ttl(client: MagicMock, driver: RedisURLDriver, expires: int | None) -> None:
    driver.set("tok.k", "v", expires)

    client.set.assert_called_once_with("tok.k", "v")
    client.setex.assert_not_called()


def test_set_bool_as_json_literal(client: MagicMock, driver: RedisURLDriver) -> None:
    driver.set("tok.t", True, 10)
    driver.set("tok.f", False)

    client.setex.assert_called_once_with("tok.t", 10, "true")
    client.set.assert_called_once_with("tok.f", "false")


def test_set_none_deletes(client: MagicMock, driver: RedisURLDriver) -> None:
    driver.set("tok.k", None)
    client.delete.assert_called_once_with("tok.k")


def test_get_miss(client: MagicMock, driver: RedisURLDriver) -> None:
    client.get.return_value = None
    assert driver.get("tok.k") is None


def test_mget(client: MagicMock, driver: RedisURLDriver) -> None:
    client.mget.return_value = [None, "2"]
    assert driver.mget(["tok.a", "tok.b"]) == {"tok.a": None, "tok.b": "2"}


def test_mset_writes_each_entry(client: MagicMock, driver: RedisURLDriver) -> None:
    driver.mset({"tok.a": "1", "tok.b": None}, expires=5)

    client.setex.assert_called_once_with("tok.a", 5, "1")
    client.delete.assert_called_once_with("tok.b")


def test_keys_and_flush(client: MagicMock, driver: RedisURLDriver) -> None:
    client.keys.return_value = ["tok.a", "tok.b"]

    assert driver.keys("tok.*") == ["tok.a", "tok.b"]
    driver.flush("tok.*")

    assert client.keys.call_args_list == [call("tok.*"), call("tok.*")]
    client.delete.assert_called_once_with("tok.a", "tok.b")


def test_flush_without_matches(client: MagicMock, driver: RedisURLDriver) -> None:
    client.keys.return_value = []

    driver.flush("tok.*")

    client.delete.assert_not_called()


def test_close(client: MagicMock, driver: RedisURLDriver) -> None:
    driver.close()
    client.close.assert_called_once_with()
