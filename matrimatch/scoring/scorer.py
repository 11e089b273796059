"""
Compatibility Scorer

Combines the four sub-scores into the final compatibility score:

    final = w_profile * profile + w_preference * preference
          + w_horoscope * horoscope + w_ai * ai

with default weights 0.4 / 0.3 / 0.2 / 0.1. Each sub-score is computed
independently; none of them reads another's result.

When either user has no horoscope the horoscope term is None. Under the
"zero_fill" policy it contributes nothing, so such pairs top out at 80, and
the result is flagged with horoscope_missing. Under "renormalize" the other
weights are scaled up to sum to 1.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from matrimatch.config import settings
from matrimatch.core.exceptions import InvalidMatchError
from matrimatch.schemas.compatibility import CompatibilityResult
from matrimatch.schemas.records import UserRecord
from matrimatch.scoring.ai import AIScorer, HeuristicAIScorer
from matrimatch.scoring.factors import matching_factors
from matrimatch.scoring.grading import clamp_score, grade, match_quality, round_half_up
from matrimatch.scoring.horoscope import horoscope_score
from matrimatch.scoring.preference import (
    matches_preferences,
    mutual_preference_score,
    preference_match_score,
)
from matrimatch.scoring.profile import profile_compatibility


logger = logging.getLogger(__name__)

ZERO_FILL = "zero_fill"
RENORMALIZE = "renormalize"


@dataclass(frozen=True)
class Weights:
    profile: float = 0.4
    preference: float = 0.3
    horoscope: float = 0.2
    ai: float = 0.1

    def __post_init__(self):
        values = (self.profile, self.preference, self.horoscope, self.ai)
        if any(w < 0 for w in values):
            raise ValueError("weights must be non-negative")
        if abs(sum(values) - 1.0) > 1e-6:
            raise ValueError("weights must sum to 1.0")

    def without_horoscope(self) -> "Weights":
        """Profile, preference and ai weights rescaled to sum to 1."""
        remaining = self.profile + self.preference + self.ai
        if remaining == 0:
            raise ValueError("cannot renormalize: all weight is on the horoscope term")
        return Weights(
            profile=self.profile / remaining,
            preference=self.preference / remaining,
            horoscope=0.0,
            ai=self.ai / remaining,
        )


class CompatibilityScorer:
    """Scores pairs of users and ranks candidates for a user."""

    def __init__(
        self,
        weights: Optional[Weights] = None,
        missing_horoscope_policy: str = ZERO_FILL,
        ai_scorer: Optional[AIScorer] = None,
    ):
        if missing_horoscope_policy not in (ZERO_FILL, RENORMALIZE):
            raise ValueError(f"Unknown missing horoscope policy: {missing_horoscope_policy}")
        self.weights = weights or Weights()
        self.missing_horoscope_policy = missing_horoscope_policy
        self.ai_scorer = ai_scorer or HeuristicAIScorer()

    @classmethod
    def from_settings(cls) -> "CompatibilityScorer":
        return cls(
            weights=Weights(
                profile=settings.PROFILE_WEIGHT,
                preference=settings.PREFERENCE_WEIGHT,
                horoscope=settings.HOROSCOPE_WEIGHT,
                ai=settings.AI_WEIGHT,
            ),
            missing_horoscope_policy=settings.MISSING_HOROSCOPE_POLICY,
        )

    def score(
        self,
        user: UserRecord,
        candidate: UserRecord,
        today: Optional[date] = None,
    ) -> CompatibilityResult:
        """Compatibility of `candidate` for `user`."""
        if user.id == candidate.id:
            raise InvalidMatchError("A user cannot be matched with themselves")

        profile = profile_compatibility(user, candidate)
        preference = mutual_preference_score(user, candidate, today)
        horoscope = horoscope_score(user.horoscope, candidate.horoscope)
        ai = self.ai_scorer.score(user, candidate, today)

        horoscope_missing = horoscope is None
        weights = self.weights
        if horoscope_missing and self.missing_horoscope_policy == RENORMALIZE:
            weights = weights.without_horoscope()

        terms = {
            "profile": (profile.score, weights.profile, profile.components),
            "preference": (preference.score, weights.preference, preference.components),
            "horoscope": (
                horoscope.score if horoscope else None,
                weights.horoscope,
                {name: f.score for name, f in horoscope.analysis.items()} if horoscope else {},
            ),
            "ai": (ai.score, weights.ai, ai.components),
        }

        breakdown: Dict[str, dict] = {}
        total = 0.0
        for name, (term_score, weight, components) in terms.items():
            contribution = (term_score or 0.0) * weight
            total += contribution
            breakdown[name] = {
                "score": term_score,
                "weight": round(weight, 4),
                "contribution": round_half_up(contribution),
                "components": components,
            }
        if horoscope is not None:
            breakdown["horoscope"]["grade"] = horoscope.grade
            breakdown["horoscope"]["recommendations"] = horoscope.recommendations

        final = round_half_up(clamp_score(total))
        if horoscope_missing:
            logger.debug(
                "Horoscope missing for %s/%s, applied %s",
                user.id,
                candidate.id,
                self.missing_horoscope_policy,
            )

        return CompatibilityResult(
            user_id=user.id,
            candidate_id=candidate.id,
            compatibility_score=final,
            grade=grade(final),
            match_quality=match_quality(final),
            profile_score=profile.score,
            preference_score=preference.score,
            horoscope_score=horoscope.score if horoscope else None,
            ai_score=ai.score,
            user_preference_fit=(
                preference_match_score(user.preferences, candidate, today)
                if user.preferences
                else None
            ),
            candidate_preference_fit=(
                preference_match_score(candidate.preferences, user, today)
                if candidate.preferences
                else None
            ),
            horoscope_missing=horoscope_missing,
            missing_horoscope_policy=self.missing_horoscope_policy,
            matching_factors=matching_factors(user, candidate, horoscope),
            breakdown=breakdown,
        )

    def passes_deal_breakers(
        self,
        user: UserRecord,
        candidate: UserRecord,
        today: Optional[date] = None,
    ) -> bool:
        """Hard preference filter plus the horoscope requirement."""
        prefs = user.preferences
        if prefs is None:
            return True
        if not matches_preferences(prefs, candidate, today):
            return False
        if prefs.require_horoscope_match:
            report = horoscope_score(user.horoscope, candidate.horoscope)
            if report is None:
                return False
            if prefs.min_horoscope_score is not None and report.score < prefs.min_horoscope_score:
                return False
        return True

    def rank_candidates(
        self,
        user: UserRecord,
        candidates: Sequence[UserRecord],
        limit: int = 10,
        apply_filters: bool = True,
        today: Optional[date] = None,
    ) -> Tuple[List[CompatibilityResult], int]:
        """
        Score candidates for a user, best first.

        Returns the top `limit` results and how many candidates were dropped
        (the user themselves, or candidates failing the user's deal breakers).
        """
        results = []
        filtered_out = 0
        for candidate in candidates:
            if candidate.id == user.id:
                filtered_out += 1
                continue
            if apply_filters and not self.passes_deal_breakers(user, candidate, today):
                filtered_out += 1
                continue
            results.append(self.score(user, candidate, today))

        results.sort(key=lambda r: (-r.compatibility_score, r.candidate_id))
        logger.info(
            "Ranked %d candidates for %s (%d filtered out)",
            len(results),
            user.id,
            filtered_out,
        )
        return results[:limit], filtered_out
