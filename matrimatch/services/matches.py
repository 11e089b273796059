"""
Match persistence: scoring a pair into a UserMatch row and applying
user actions to it.
"""

import logging
import uuid
from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from matrimatch.config import settings
from matrimatch.core.exceptions import MatchNotFoundError
from matrimatch.models.match import MatchAction, MatchStatus, MatchType, UserMatch
from matrimatch.schemas.compatibility import CompatibilityResult
from matrimatch.schemas.records import UserRecord
from matrimatch.scoring.scorer import CompatibilityScorer


logger = logging.getLogger(__name__)


class MatchRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, match_id: uuid.UUID) -> Optional[UserMatch]:
        return await self.session.get(UserMatch, match_id)

    async def get_for_pair(self, user_id: str, matched_user_id: str) -> Optional[UserMatch]:
        result = await self.session.execute(
            select(UserMatch).where(
                UserMatch.user_id == user_id,
                UserMatch.matched_user_id == matched_user_id,
            )
        )
        return result.scalar_one_or_none()

    async def add(self, match: UserMatch) -> UserMatch:
        self.session.add(match)
        await self.session.flush()
        return match


class MatchService:
    def __init__(self, session: AsyncSession, scorer: CompatibilityScorer):
        self.repository = MatchRepository(session)
        self.session = session
        self.scorer = scorer

    async def score_and_store(
        self,
        user: UserRecord,
        candidate: UserRecord,
        match_type: MatchType = MatchType.AI_SUGGESTION,
        today: Optional[date] = None,
    ) -> UserMatch:
        """Score the pair and create or refresh the user's match row."""
        result = self.scorer.score(user, candidate, today)

        match = await self.repository.get_for_pair(user.id, candidate.id)
        if match is not None:
            return await self._rescore(match, result)

        match = UserMatch(
            id=uuid.uuid4(),
            user_id=user.id,
            matched_user_id=candidate.id,
            match_type=match_type.value,
            status=MatchStatus.PENDING.value,
            can_communicate=False,
            profile_views=0,
        )
        match.extend_expiry(settings.MATCH_EXPIRY_DAYS)
        match.apply_result(result)
        try:
            async with self.session.begin_nested():
                await self.repository.add(match)
        except IntegrityError:
            # Another request inserted the pair after our lookup
            existing = await self.repository.get_for_pair(user.id, candidate.id)
            if existing is None:
                raise
            logger.info("Match for %s -> %s was created concurrently", user.id, candidate.id)
            return await self._rescore(existing, result)

        logger.info(
            "Created match %s for %s -> %s (score %.2f)",
            match.id,
            user.id,
            candidate.id,
            result.compatibility_score,
        )
        return match

    async def _rescore(self, match: UserMatch, result: CompatibilityResult) -> UserMatch:
        match.apply_result(result)
        await self.session.flush()
        logger.info("Rescored match %s (score %.2f)", match.id, result.compatibility_score)
        return match

    async def get(self, match_id: uuid.UUID) -> UserMatch:
        match = await self.repository.get_by_id(match_id)
        if match is None:
            raise MatchNotFoundError("Match not found")
        return match

    async def view(self, match_id: uuid.UUID) -> UserMatch:
        match = await self.get(match_id)
        match.record_view()
        await self.session.flush()
        return match

    async def act(self, match_id: uuid.UUID, actor_id: str, action: MatchAction) -> UserMatch:
        match = await self.get(match_id)
        match.apply_action(actor_id, action)
        await self.session.flush()
        logger.info("Match %s: %s by %s -> %s", match.id, action.value, actor_id, match.status)
        return match
