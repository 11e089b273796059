from __future__ import annotations

from datetime import datetime, timezone

import pytest

from factories import TODAY, make_profile, make_user
from matrimatch.schemas.records import MessagingStats
from matrimatch.scoring.ai import (
    HeuristicAIScorer,
    activity_score,
    days_inactive,
    message_length_score,
    messaging_score,
    reply_balance_score,
    response_time_score,
)


def _complete(user_id: str, percentage: float, **overrides):
    return make_user(
        user_id,
        profile=make_profile(profile_completion_percentage=percentage),
        **overrides,
    )


def test_complete_recent_users_score_full() -> None:
    active_today = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)
    a = _complete("a", 100, last_active_at=active_today)
    b = _complete("b", 100, last_active_at=active_today)

    result = HeuristicAIScorer().score(a, b, TODAY)

    assert result.components == {"confidence": 100.0, "activity": 100.0}
    assert result.score == 100.0


def test_unknown_activity_counts_as_thirty_days() -> None:
    user = _complete("a", 50, last_active_at=None, approved_photo_count=0)

    assert days_inactive(user, TODAY) == 30
    # (100 - 50) * 0.6 + 50 * 0.3
    assert activity_score(user, TODAY) == pytest.approx(45.0)


def test_activity_penalty_is_capped() -> None:
    long_gone = datetime(2020, 1, 1, tzinfo=timezone.utc)
    user = _complete("a", 0, last_active_at=long_gone, approved_photo_count=1)

    assert activity_score(user, TODAY) == pytest.approx(40.0)


def test_blend_without_messaging() -> None:
    a = _complete("a", 50, last_active_at=None, approved_photo_count=0)
    b = _complete("b", 50, last_active_at=None, approved_photo_count=0)

    result = HeuristicAIScorer().score(a, b, TODAY)

    # confidence 60, activity 45
    assert result.score == pytest.approx(52.5)
    assert "messaging" not in result.components


def test_blend_with_messaging() -> None:
    stats = MessagingStats(
        messages_sent=10,
        messages_received=10,
        avg_response_time_seconds=120,
        avg_message_words=25,
    )
    a = _complete("a", 50, last_active_at=None, approved_photo_count=0, messaging=stats)
    b = _complete("b", 50, last_active_at=None, approved_photo_count=0)

    result = HeuristicAIScorer().score(a, b, TODAY)

    # 0.4 * 60 + 0.3 * 45 + 0.3 * 100
    assert result.components["messaging"] == 100.0
    assert result.score == pytest.approx(67.5)


@pytest.mark.parametrize(
    "seconds, expected",
    [(60, 100), (300, 100), (301, 80), (3600, 80), (7200, 60), (86400, 40), (86401, 20), (None, 20)],
)
def test_response_time_buckets(seconds, expected) -> None:
    assert response_time_score(seconds) == expected


@pytest.mark.parametrize(
    "words, expected",
    [(25, 100), (20, 100), (12, 80), (5, 60), (1, 40), (0.5, 20), (None, 20)],
)
def test_message_length_buckets(words, expected) -> None:
    assert message_length_score(words) == expected


def test_reply_balance() -> None:
    assert reply_balance_score(MessagingStats(messages_sent=10, messages_received=5)) == 50.0
    assert reply_balance_score(MessagingStats()) == 0.0


def test_messaging_score_averages_the_three_signals() -> None:
    stats = MessagingStats(
        messages_sent=4,
        messages_received=8,
        avg_response_time_seconds=1800,
        avg_message_words=6,
    )

    # (80 + 60 + 50) / 3
    assert messaging_score(stats) == pytest.approx(190 / 3)


def test_ai_score_stays_in_bounds() -> None:
    stats = MessagingStats(messages_sent=0, messages_received=50)
    a = make_user("a", messaging=stats, last_active_at=None, approved_photo_count=0, profile=None)
    b = make_user("b", last_active_at=None, approved_photo_count=0, profile=None)

    result = HeuristicAIScorer().score(a, b, TODAY)

    assert 0.0 <= result.score <= 100.0
