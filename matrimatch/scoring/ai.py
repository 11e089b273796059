"""
Heuristic "AI" compatibility term.

There is no trained model behind this score. It blends how complete both
profiles are, how recently both users were active and, when available, how
they behave in conversations. Any object with a matching `score` method can
replace HeuristicAIScorer in CompatibilityScorer.
"""

from datetime import date, datetime, timezone
from typing import Optional, Protocol

from matrimatch.schemas.compatibility import SubScore
from matrimatch.schemas.records import MessagingStats, UserRecord
from matrimatch.scoring.grading import clamp_score, round_half_up
from matrimatch.scoring.profile import completion_percentage


# Last activity unknown is treated as this many days ago
UNKNOWN_INACTIVITY_DAYS = 30

# (upper bound, score) buckets
RESPONSE_TIME_BUCKETS = (
    (5 * 60, 100),
    (60 * 60, 80),
    (6 * 60 * 60, 60),
    (24 * 60 * 60, 40),
)
# (lower bound, score) buckets
MESSAGE_LENGTH_BUCKETS = (
    (20, 100),
    (10, 80),
    (5, 60),
    (1, 40),
)
BUCKET_FLOOR = 20


class AIScorer(Protocol):
    def score(self, user: UserRecord, candidate: UserRecord, today: Optional[date] = None) -> SubScore:
        ...


def days_inactive(user: UserRecord, today: date) -> int:
    if user.last_active_at is None:
        return UNKNOWN_INACTIVITY_DAYS
    last_active = user.last_active_at
    if last_active.tzinfo is not None:
        last_active = last_active.astimezone(timezone.utc)
    return max(0, (today - last_active.date()).days)


def activity_score(user: UserRecord, today: date) -> float:
    """Recency of activity, weighted with completeness and photos."""
    base = 100 - min(days_inactive(user, today) * 2, 50)
    score = base * 0.6 + completion_percentage(user) * 0.3
    if user.approved_photo_count > 0:
        score += 10
    return clamp_score(score)


def response_time_score(seconds: Optional[float]) -> float:
    if seconds is None:
        return BUCKET_FLOOR
    for limit, score in RESPONSE_TIME_BUCKETS:
        if seconds <= limit:
            return score
    return BUCKET_FLOOR


def message_length_score(words: Optional[float]) -> float:
    if words is None:
        return BUCKET_FLOOR
    for minimum, score in MESSAGE_LENGTH_BUCKETS:
        if words >= minimum:
            return score
    return BUCKET_FLOOR


def reply_balance_score(stats: MessagingStats) -> float:
    """100 when a user sends as much as they receive."""
    busiest = max(stats.messages_sent, stats.messages_received)
    if busiest == 0:
        return 0.0
    return min(stats.messages_sent, stats.messages_received) / busiest * 100


def messaging_score(stats: MessagingStats) -> float:
    return (
        response_time_score(stats.avg_response_time_seconds)
        + message_length_score(stats.avg_message_words)
        + reply_balance_score(stats)
    ) / 3


class HeuristicAIScorer:
    """Hand-tuned blend of confidence, activity and messaging behaviour."""

    def __init__(
        self,
        confidence_weight: float = 0.4,
        activity_weight: float = 0.3,
        messaging_weight: float = 0.3,
    ):
        self.confidence_weight = confidence_weight
        self.activity_weight = activity_weight
        self.messaging_weight = messaging_weight

    def score(self, user: UserRecord, candidate: UserRecord, today: Optional[date] = None) -> SubScore:
        today = today or datetime.now(timezone.utc).date()

        avg_completion = (completion_percentage(user) + completion_percentage(candidate)) / 2
        confidence = avg_completion * 0.8 + 20
        activity = (activity_score(user, today) + activity_score(candidate, today)) / 2

        messaging_scores = [
            messaging_score(record.messaging)
            for record in (user, candidate)
            if record.messaging is not None
        ]

        components = {
            "confidence": round_half_up(confidence),
            "activity": round_half_up(activity),
        }
        if messaging_scores:
            messaging = sum(messaging_scores) / len(messaging_scores)
            components["messaging"] = round_half_up(messaging)
            total = (
                self.confidence_weight * confidence
                + self.activity_weight * activity
                + self.messaging_weight * messaging
            )
        else:
            # Without conversation data, the messaging weight is split evenly
            total = 0.5 * confidence + 0.5 * activity

        return SubScore(score=round_half_up(clamp_score(total)), components=components)
