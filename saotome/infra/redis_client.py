from __future__ import annotations

import logging
import os

import redis

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def get_redis_url() -> str:
    return os.environ.get("REDIS_URL", DEFAULT_REDIS_URL)


def create_redis(url: str | None = None) -> redis.Redis:
    """Client for the match store. Connects lazily on first command."""

    url = url or get_redis_url()
    logger.debug("match store at %s", url)
    # Game JSON goes in and out as str.
    return redis.Redis.from_url(url, decode_responses=True)
