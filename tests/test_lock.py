from __future__ import annotations

import fakeredis
import pytest

from saotome.lock import LOCK_KEY_PREFIX, game_lock


def test_lock_is_exclusive_and_released(r: fakeredis.FakeRedis) -> None:
    with game_lock(r=r, game_id="g1") as token:
        assert r.get(f"{LOCK_KEY_PREFIX}g1") == token
        with pytest.raises(ValueError, match="Game is busy"):
            with game_lock(r=r, game_id="g1"):
                pass
        # Other matches are independent.
        with game_lock(r=r, game_id="g2"):
            pass

    assert r.get(f"{LOCK_KEY_PREFIX}g1") is None


def test_lock_released_when_body_raises(r: fakeredis.FakeRedis) -> None:
    with pytest.raises(RuntimeError):
        with game_lock(r=r, game_id="g1"):
            raise RuntimeError("boom")
    assert r.get(f"{LOCK_KEY_PREFIX}g1") is None


def test_expired_holder_does_not_release_a_new_holders_lock(r: fakeredis.FakeRedis) -> None:
    key = f"{LOCK_KEY_PREFIX}g1"
    with game_lock(r=r, game_id="g1"):
        # Our TTL ran out and another writer took over.
        r.set(key, "someone-else")
    assert r.get(key) == "someone-else"


def test_lock_has_a_ttl(r: fakeredis.FakeRedis) -> None:
    with game_lock(r=r, game_id="g1", ttl_ms=2_000):
        assert 0 < r.pttl(f"{LOCK_KEY_PREFIX}g1") <= 2_000


def test_waiting_writer_gives_up_after_deadline(r: fakeredis.FakeRedis) -> None:
    r.set(f"{LOCK_KEY_PREFIX}g1", "held")
    with pytest.raises(ValueError, match="Game is busy"):
        with game_lock(r=r, game_id="g1", wait_ms=30):
            pass
