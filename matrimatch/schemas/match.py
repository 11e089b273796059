from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from uuid import UUID

from matrimatch.models.match import MatchAction, MatchType
from matrimatch.schemas.records import UserRecord


# ==================== Match Schemas ====================

class MatchCreate(BaseModel):
    """Score a pair and store it as a match for `user`."""
    user: UserRecord
    candidate: UserRecord
    match_type: MatchType = MatchType.AI_SUGGESTION


class MatchActionRequest(BaseModel):
    """A like, super like, dislike or block by one of the two users."""
    actor_id: str = Field(..., min_length=1, max_length=64)
    action: MatchAction


class MatchResponse(BaseModel):
    """Schema for match response."""
    id: UUID
    user_id: str
    matched_user_id: str
    match_type: str
    status: str

    compatibility_score: float
    profile_score: Optional[float]
    preference_score: Optional[float]
    horoscope_score: Optional[float]
    ai_score: Optional[float]
    grade: Optional[str]
    match_quality: str
    horoscope_missing: bool
    matching_factors: Optional[List[str]]
    compatibility_details: Optional[Dict[str, Any]]

    user_action: Optional[str]
    matched_user_action: Optional[str]
    can_communicate: bool
    communication_started_at: Optional[datetime]
    profile_views: int
    expires_at: Optional[datetime]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True
