from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from functools import lru_cache

from matrimatch.db.session import get_db
from matrimatch.db.redis import ScoreCache, get_redis
from matrimatch.scoring.scorer import CompatibilityScorer
from matrimatch.services.matches import MatchService


@lru_cache()
def get_scorer() -> CompatibilityScorer:
    """Scorer configured from settings, shared across requests."""
    return CompatibilityScorer.from_settings()


def get_score_cache() -> ScoreCache:
    """Dependency to get the score cache (a no-op without Upstash)."""
    return ScoreCache(get_redis())


def get_match_service(
    db: AsyncSession = Depends(get_db),
    scorer: CompatibilityScorer = Depends(get_scorer),
) -> MatchService:
    return MatchService(db, scorer)
