from upstash_redis import Redis
from typing import Optional
from datetime import date
import hashlib
import json
import logging
import time

from matrimatch.config import settings
from matrimatch.schemas.compatibility import CompatibilityResult
from matrimatch.schemas.records import UserRecord


logger = logging.getLogger(__name__)

# Global Redis client, None when Upstash is not configured
redis_client: Optional[Redis] = None


async def init_redis():
    """Initialize Upstash Redis connection."""
    global redis_client
    if not settings.cache_enabled:
        redis_client = None
        logger.info("Upstash Redis not configured, score cache disabled")
        return
    redis_client = Redis(
        url=settings.UPSTASH_REDIS_URL,
        token=settings.UPSTASH_REDIS_TOKEN,
    )
    logger.info("Redis (Upstash) initialized")


async def close_redis():
    """Close Redis connection."""
    global redis_client
    redis_client = None
    logger.info("Redis connection closed")


def get_redis() -> Optional[Redis]:
    """Get Redis client instance, or None when caching is disabled."""
    return redis_client


def ping_cache() -> Optional[float]:
    """Ping Upstash and return the latency in milliseconds, or None when disabled."""
    if redis_client is None:
        return None
    start = time.perf_counter()
    redis_client.ping()
    return round((time.perf_counter() - start) * 1000, 2)


class ScoreCache:
    """
    Caches compatibility results keyed by the exact pair payload.
    Any change to either record or to the reference day yields a different
    key. With no client every lookup is a miss.
    """

    KEY_PREFIX = "score:"

    def __init__(self, client: Optional[Redis] = None, ttl_seconds: Optional[int] = None):
        self.client = client
        self.ttl_seconds = ttl_seconds or settings.SCORE_CACHE_TTL_SECONDS

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def key_for(self, user: UserRecord, candidate: UserRecord, policy: str, today: date) -> str:
        """Key over both records, the missing-horoscope policy and the reference date."""
        payload = json.dumps(
            {
                "today": today.isoformat(),
                "user": user.model_dump(mode="json"),
                "candidate": candidate.model_dump(mode="json"),
                "policy": policy,
            },
            sort_keys=True,
            separators=(",", ":"),
        )
        return self.KEY_PREFIX + hashlib.sha256(payload.encode("utf-8")).hexdigest()

    # ==================== Compatibility Scores ====================

    async def get_score(self, key: str) -> Optional[CompatibilityResult]:
        """Cached result for a key, None on miss or cache error."""
        if self.client is None:
            return None
        try:
            cached = self.client.get(key)
        except Exception as e:
            logger.warning("Score cache read failed: %s", e)
            return None
        if not cached:
            return None
        try:
            return CompatibilityResult.model_validate_json(cached)
        except ValueError:
            logger.warning("Discarding unreadable cache entry %s", key)
            return None

    async def store_score(self, key: str, result: CompatibilityResult) -> None:
        if self.client is None:
            return
        try:
            self.client.setex(key, self.ttl_seconds, result.model_dump_json())
        except Exception as e:
            logger.warning("Score cache write failed: %s", e)
