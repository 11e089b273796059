import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from matrimatch.config import settings
from matrimatch.core.dependencies import get_score_cache, get_scorer
from matrimatch.db.redis import ScoreCache
from matrimatch.schemas.compatibility import (
    CompatibilityResult,
    HoroscopeReport,
    HoroscopeRequest,
    RankRequest,
    RankResponse,
    ScoreRequest,
)
from matrimatch.scoring.horoscope import horoscope_compatibility
from matrimatch.scoring.scorer import CompatibilityScorer


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/compatibility", tags=["Compatibility"])


@router.post("/score", response_model=CompatibilityResult)
async def score_pair(
    payload: ScoreRequest,
    scorer: CompatibilityScorer = Depends(get_scorer),
    cache: ScoreCache = Depends(get_score_cache),
):
    """
    Compatibility of a candidate for a user.
    Returns the final score, grade, the four sub-scores and a per-term breakdown.
    """
    today = datetime.now(timezone.utc).date()
    key = None
    if cache.enabled:
        key = cache.key_for(payload.user, payload.candidate, scorer.missing_horoscope_policy, today)
        cached = await cache.get_score(key)
        if cached is not None:
            logger.debug("Score cache hit for %s/%s", payload.user.id, payload.candidate.id)
            return cached

    result = scorer.score(payload.user, payload.candidate, today)

    if key is not None:
        await cache.store_score(key, result)

    return result


@router.post("/rank", response_model=RankResponse)
async def rank_candidates(
    payload: RankRequest,
    scorer: CompatibilityScorer = Depends(get_scorer),
):
    """
    Rank candidates for a user, best first.
    Candidates failing the user's preferences or deal breakers are dropped
    unless apply_filters is false.
    """
    if len(payload.candidates) > settings.MAX_RANK_CANDIDATES:
        raise HTTPException(
            status_code=422,
            detail=f"At most {settings.MAX_RANK_CANDIDATES} candidates per request",
        )

    results, filtered_out = scorer.rank_candidates(
        payload.user,
        payload.candidates,
        limit=payload.limit,
        apply_filters=payload.apply_filters,
    )
    return RankResponse(results=results, total=len(results), filtered_out=filtered_out)


@router.post("/horoscope", response_model=HoroscopeReport)
async def compare_horoscopes(payload: HoroscopeRequest):
    """Vedic compatibility of two horoscopes, as seen from the first."""
    return horoscope_compatibility(payload.horoscope, payload.other)
