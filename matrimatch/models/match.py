from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Float,
    Integer,
    JSON,
    String,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid
import enum

from matrimatch.core.exceptions import MatchActionError
from matrimatch.db.session import Base
from matrimatch.schemas.compatibility import CompatibilityResult
from matrimatch.scoring.grading import match_quality


# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


class MatchStatus(str, enum.Enum):
    PENDING = "pending"
    LIKED = "liked"
    SUPER_LIKED = "super_liked"
    DISLIKED = "disliked"
    MUTUAL = "mutual"
    BLOCKED = "blocked"


class MatchAction(str, enum.Enum):
    LIKE = "like"
    SUPER_LIKE = "super_like"
    DISLIKE = "dislike"
    BLOCK = "block"


class MatchType(str, enum.Enum):
    AI_SUGGESTION = "ai_suggestion"
    SEARCH_RESULT = "search_result"
    MANUAL = "manual"
    PREMIUM_SUGGESTION = "premium_suggestion"


ACTIVE_STATUSES = (
    MatchStatus.PENDING.value,
    MatchStatus.LIKED.value,
    MatchStatus.SUPER_LIKED.value,
    MatchStatus.MUTUAL.value,
)
POSITIVE_ACTIONS = (MatchStatus.LIKED.value, MatchStatus.SUPER_LIKED.value)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class UserMatch(Base):
    """
    A suggested pairing of two users with its computed compatibility.
    The row belongs to `user_id`; `matched_user_id` is the candidate.
    """

    __tablename__ = "user_matches"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String(64), nullable=False, index=True)
    matched_user_id = Column(String(64), nullable=False, index=True)

    match_type = Column(String(30), nullable=False, default=MatchType.AI_SUGGESTION.value)
    status = Column(String(20), nullable=False, default=MatchStatus.PENDING.value, index=True)

    # Scores (0-100)
    compatibility_score = Column(Float, nullable=False, default=0)
    profile_score = Column(Float, nullable=True)
    preference_score = Column(Float, nullable=True)
    horoscope_score = Column(Float, nullable=True)
    ai_score = Column(Float, nullable=True)
    grade = Column(String(20), nullable=True)
    horoscope_missing = Column(Boolean, nullable=False, default=False)
    matching_factors = Column(JSONType, nullable=True)
    compatibility_details = Column(JSONType, nullable=True)
    scored_at = Column(DateTime(timezone=True), nullable=True)

    # Actions
    user_action = Column(String(20), nullable=True)
    user_action_at = Column(DateTime(timezone=True), nullable=True)
    matched_user_action = Column(String(20), nullable=True)
    matched_user_action_at = Column(DateTime(timezone=True), nullable=True)

    # Communication
    can_communicate = Column(Boolean, nullable=False, default=False)
    communication_started_at = Column(DateTime(timezone=True), nullable=True)

    # Views
    profile_views = Column(Integer, nullable=False, default=0)
    last_viewed_at = Column(DateTime(timezone=True), nullable=True)

    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "matched_user_id", name="unique_user_match"),
        CheckConstraint("user_id <> matched_user_id", name="match_distinct_users"),
        CheckConstraint(
            "compatibility_score >= 0 AND compatibility_score <= 100",
            name="match_score_range",
        ),
    )

    # ==================== Scoring ====================

    def apply_result(self, result: CompatibilityResult) -> None:
        """Store a scoring run on the match."""
        self.compatibility_score = result.compatibility_score
        self.profile_score = result.profile_score
        self.preference_score = result.preference_score
        self.horoscope_score = result.horoscope_score
        self.ai_score = result.ai_score
        self.grade = result.grade
        self.horoscope_missing = result.horoscope_missing
        self.matching_factors = list(result.matching_factors)
        self.compatibility_details = result.breakdown
        self.scored_at = utcnow()

    @property
    def match_quality(self) -> str:
        return match_quality(self.compatibility_score or 0)

    # ==================== Actions ====================

    def _side(self, actor_id: str) -> str:
        if actor_id == self.user_id:
            return "user"
        if actor_id == self.matched_user_id:
            return "matched_user"
        raise MatchActionError(
            "Only the two matched users can act on a match",
            status_code=403,
        )

    def _record_action(self, actor_id: str, action: str) -> None:
        side = self._side(actor_id)
        setattr(self, f"{side}_action", action)
        setattr(self, f"{side}_action_at", utcnow())

    def like(self, actor_id: str, super_like: bool = False) -> None:
        """Record a like; both sides liking makes the match mutual."""
        self._side(actor_id)
        if self.status == MatchStatus.BLOCKED.value:
            raise MatchActionError("Match is blocked")

        action = MatchStatus.SUPER_LIKED.value if super_like else MatchStatus.LIKED.value
        self._record_action(actor_id, action)

        if self.is_mutual():
            self.status = MatchStatus.MUTUAL.value
            self.can_communicate = True
            if self.communication_started_at is None:
                self.communication_started_at = utcnow()
        else:
            self.status = action

    def dislike(self, actor_id: str) -> None:
        self._side(actor_id)
        if self.status == MatchStatus.BLOCKED.value:
            raise MatchActionError("Match is blocked")
        self._record_action(actor_id, MatchStatus.DISLIKED.value)
        self.status = MatchStatus.DISLIKED.value
        self.can_communicate = False
        self.expires_at = utcnow()

    def block(self, actor_id: str) -> None:
        self._record_action(actor_id, MatchStatus.BLOCKED.value)
        self.status = MatchStatus.BLOCKED.value
        self.can_communicate = False

    def apply_action(self, actor_id: str, action: MatchAction) -> None:
        if action == MatchAction.LIKE:
            self.like(actor_id)
        elif action == MatchAction.SUPER_LIKE:
            self.like(actor_id, super_like=True)
        elif action == MatchAction.DISLIKE:
            self.dislike(actor_id)
        elif action == MatchAction.BLOCK:
            self.block(actor_id)
        else:
            raise MatchActionError(f"Unknown action: {action}", status_code=400)

    def record_view(self) -> None:
        self.profile_views = (self.profile_views or 0) + 1
        self.last_viewed_at = utcnow()

    # ==================== State ====================

    def is_mutual(self) -> bool:
        return self.user_action in POSITIVE_ACTIONS and self.matched_user_action in POSITIVE_ACTIONS

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        expires_at = _aware(self.expires_at)
        return expires_at is not None and expires_at <= (now or utcnow())

    def is_active(self, now: Optional[datetime] = None) -> bool:
        return self.status in ACTIVE_STATUSES and not self.is_expired(now)

    def extend_expiry(self, days: int) -> None:
        self.expires_at = utcnow() + timedelta(days=days)
