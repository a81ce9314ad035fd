from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import uuid4

import redis

logger = logging.getLogger(__name__)

LOCK_KEY_PREFIX = "lock:saotome:game:"  # + {game_id}


def _release(r: redis.Redis, key: str, token: str) -> None:
    # Compare-and-delete, so an expired holder never frees someone else's lock.
    with r.pipeline() as pipe:
        try:
            pipe.watch(key)
            if pipe.get(key) != token:
                pipe.unwatch()
                logger.warning("lock %s expired before release", key)
                return
            pipe.multi()
            pipe.delete(key)
            pipe.execute()
        except redis.WatchError:
            logger.warning("lock %s changed hands during release", key)


@contextmanager
def game_lock(*, r: redis.Redis, game_id: str, ttl_ms: int = 5_000, wait_ms: int = 0) -> Iterator[str]:
    """Per-game lock: moves on one match are applied one at a time.

    A second writer polls for up to `wait_ms` and is then refused with
    `ValueError("Game is busy")`. The TTL frees the lock if a holder dies
    mid-move. Yields the holder's token.
    """

    key = f"{LOCK_KEY_PREFIX}{game_id}"
    token = uuid4().hex
    deadline = time.monotonic() + wait_ms / 1000
    while not r.set(key, token, nx=True, px=ttl_ms):
        if time.monotonic() >= deadline:
            raise ValueError("Game is busy")
        time.sleep(0.01)
    try:
        yield token
    finally:
        _release(r, key, token)
