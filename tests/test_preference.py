from __future__ import annotations

import pytest
from pydantic import ValidationError

from factories import TODAY, make_preferences, make_profile, make_user
from matrimatch.schemas.records import PreferenceRecord
from matrimatch.scoring.preference import (
    deal_breakers,
    matches_preferences,
    mutual_preference_score,
    preference_match_score,
)


def test_mutual_score_saturates_at_100() -> None:
    result = mutual_preference_score(make_user("a"), make_user("b"), TODAY)

    # 30 age + 10 height + 20 location + 20 religion + 20 education + 10 income
    assert sum(result.components.values()) == 110
    assert result.score == 100.0


def test_missing_preferences_give_neutral_score() -> None:
    a = make_user("a")
    b = make_user("b", preferences=None)

    result = mutual_preference_score(a, b, TODAY)

    assert result.score == 50.0
    assert mutual_preference_score(b, a, TODAY).score == 50.0


def test_missing_profile_gives_neutral_score() -> None:
    result = mutual_preference_score(make_user("a"), make_user("b", profile=None), TODAY)

    assert result.score == 50.0


def test_height_check_only_runs_from_the_user_side() -> None:
    short_range = make_preferences(min_height_cm=150, max_height_cm=160)
    a = make_user("a", preferences=short_range)
    b = make_user("b")

    # a's range excludes b's 170cm; b's range includes a's
    assert mutual_preference_score(a, b, TODAY).components["height"] == 0.0
    assert mutual_preference_score(a, b, TODAY).score == 100.0
    assert mutual_preference_score(b, a, TODAY).components["height"] == 10.0


def test_height_needs_both_bounds() -> None:
    a = make_user("a", preferences=make_preferences(max_height_cm=None))

    assert mutual_preference_score(a, make_user("b"), TODAY).components["height"] == 0.0


def test_age_outside_range_loses_points_in_that_direction() -> None:
    older = make_user("a", date_of_birth=None, age=40)
    b = make_user("b")

    result = mutual_preference_score(older, b, TODAY)

    assert result.components["age"] == 15.0


def test_mutual_score_counts_only_stated_preferences() -> None:
    open_prefs = PreferenceRecord()
    a = make_user("a", preferences=open_prefs)
    b = make_user("b", preferences=open_prefs)

    assert mutual_preference_score(a, b, TODAY).score == 0.0


def test_one_sided_fit_is_full_at_range_centre() -> None:
    # candidate is 30, the centre of 25-35
    assert preference_match_score(make_preferences(), make_user("b"), TODAY) == 100.0


def test_one_sided_fit_falls_off_towards_range_edge() -> None:
    candidate = make_user("b", date_of_birth=None, age=35)

    # age earns 7.5 of 15; everything else is satisfied
    assert preference_match_score(make_preferences(), candidate, TODAY) == 92.5


def test_one_sided_fit_with_unset_preferences_is_full() -> None:
    assert preference_match_score(PreferenceRecord(), make_user("b", profile=None), TODAY) == 100.0


def test_one_sided_fit_penalises_mismatches() -> None:
    candidate = make_user("b", country="Nepal", profile=make_profile(religion="Buddhist"))

    # loses location 10 and religion 15
    assert preference_match_score(make_preferences(), candidate, TODAY) == 75.0


def test_matches_preferences_accepts_fitting_candidate() -> None:
    assert matches_preferences(make_preferences(), make_user("b"), TODAY) is True


@pytest.mark.parametrize(
    "prefs, candidate_overrides",
    [
        ({"preferred_genders": ["male"]}, {}),
        ({"min_age": 31}, {}),
        ({"preferred_religions": ["Sikh"]}, {}),
        ({"preferred_diets": ["vegan"]}, {}),
        ({"accept_with_children": False}, {"profile": make_profile(have_children=True, children_count=1)}),
        ({"max_children_count": 1}, {"profile": make_profile(have_children=True, children_count=2)}),
        ({"accept_physically_challenged": False}, {"physically_challenged": True}),
        ({"show_only_verified_profiles": True}, {}),
        ({"max_income_usd": 40000}, {}),
    ],
)
def test_matches_preferences_rejects(prefs, candidate_overrides) -> None:
    candidate = make_user("b", **candidate_overrides)

    assert matches_preferences(make_preferences(**prefs), candidate, TODAY) is False


def test_matches_preferences_rejects_unknown_height_when_range_is_set() -> None:
    candidate = make_user("b", profile=make_profile(height_cm=None))

    assert matches_preferences(make_preferences(), candidate, TODAY) is False


def test_education_preference_understands_aliases() -> None:
    prefs = make_preferences(preferred_education_levels=["Masters"])

    assert matches_preferences(prefs, make_user("b"), TODAY) is True


def test_deal_breakers() -> None:
    prefs = make_preferences(
        accept_with_children=False,
        require_horoscope_match=True,
        show_only_verified_profiles=True,
    )

    assert deal_breakers(prefs) == ["no_children", "horoscope_required", "verified_only"]
    assert deal_breakers(PreferenceRecord()) == []


def test_inverted_ranges_are_rejected() -> None:
    with pytest.raises(ValidationError):
        PreferenceRecord(min_age=40, max_age=30)
    with pytest.raises(ValidationError):
        PreferenceRecord(min_height_cm=180, max_height_cm=160)
