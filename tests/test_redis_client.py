from __future__ import annotations

import pytest

from saotome.infra.redis_client import DEFAULT_REDIS_URL, create_redis, get_redis_url


def test_default_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REDIS_URL", raising=False)
    assert get_redis_url() == DEFAULT_REDIS_URL


def test_client_uses_env_url_and_decodes(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_URL", "redis://cache.internal:6380/2")

    kwargs = create_redis().connection_pool.connection_kwargs

    assert kwargs["host"] == "cache.internal"
    assert kwargs["port"] == 6380
    assert kwargs["db"] == 2
    assert kwargs["decode_responses"] is True


def test_explicit_url_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REDIS_URL", "redis://cache.internal:6380/2")
    assert create_redis("redis://other:6379/5").connection_pool.connection_kwargs["db"] == 5
