from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any

from matrimatch.config import settings
from matrimatch.schemas.records import UserRecord, HoroscopeRecord


# ==================== Scoring Results ====================

class SubScore(BaseModel):
    """One term of the compatibility score with its per-component points."""
    score: float = Field(..., ge=0, le=100)
    components: Dict[str, float] = {}


class HoroscopeFactor(BaseModel):
    score: float
    max_score: float
    compatible: bool


class HoroscopeReport(BaseModel):
    """Vedic compatibility of two horoscopes."""
    score: float = Field(..., ge=0, le=100)
    grade: str
    compatible: bool
    analysis: Dict[str, HoroscopeFactor]
    ashtakoot_points: float  # out of 36
    ashtakoot_breakdown: Optional[Dict[str, float]] = None
    ashtakoot_interpretation: str
    common_doshas: List[str] = []
    moon_signs_compatible: Optional[bool] = None
    recommendations: List[str] = []


class CompatibilityResult(BaseModel):
    """Final compatibility of a user and a candidate."""
    user_id: str
    candidate_id: str
    compatibility_score: float = Field(..., ge=0, le=100)
    grade: str
    match_quality: str

    profile_score: float
    preference_score: float
    horoscope_score: Optional[float]
    ai_score: float

    # One-directional preference fits, for inspecting asymmetric matches
    user_preference_fit: Optional[float] = None
    candidate_preference_fit: Optional[float] = None

    horoscope_missing: bool = False
    missing_horoscope_policy: str
    matching_factors: List[str] = []
    breakdown: Dict[str, Any] = {}


# ==================== Requests ====================

class ScoreRequest(BaseModel):
    """Score one pair of users."""
    user: UserRecord
    candidate: UserRecord


class RankRequest(BaseModel):
    """Rank candidates for a user."""
    user: UserRecord
    candidates: List[UserRecord]
    limit: int = Field(default_factory=lambda: settings.DEFAULT_RANK_LIMIT, ge=1, le=100)
    apply_filters: bool = True


class RankResponse(BaseModel):
    results: List[CompatibilityResult]
    total: int
    filtered_out: int


class HoroscopeRequest(BaseModel):
    """Compare two horoscopes directly."""
    horoscope: HoroscopeRecord
    other: HoroscopeRecord
