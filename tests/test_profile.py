from __future__ import annotations

import pytest

from factories import make_profile, make_user
from matrimatch.scoring.profile import (
    completion_percentage,
    education_points,
    education_rank,
    profile_compatibility,
)


def test_identical_profiles_score_every_component() -> None:
    result = profile_compatibility(make_user("a"), make_user("b"))

    assert result.components == {
        "location": 20.0,
        "religion": 15.0,
        "education": 15.0,
        "lifestyle": 20.0,
        "family": 15.0,
        "languages": 6.0,
        "interests": 2.0,
    }
    assert result.score == 93.0


def test_location_points_are_nested() -> None:
    a = make_user("a")
    other_state_same_city_name = make_user("b", state="Gujarat", city="Mumbai")
    other_city = make_user("c", city="Pune")
    other_country = make_user("d", country="Nepal")

    assert profile_compatibility(a, other_state_same_city_name).components["location"] == 10.0
    assert profile_compatibility(a, other_city).components["location"] == 15.0
    assert profile_compatibility(a, other_country).components["location"] == 0.0


def test_missing_values_never_match() -> None:
    a = make_user("a", profile=make_profile(diet=None, smoking=None, caste=None))
    b = make_user("b", profile=make_profile(diet=None, smoking=None, caste=None))

    result = profile_compatibility(a, b)

    assert result.components["lifestyle"] == 6.0
    assert result.components["religion"] == 10.0


def test_comparisons_ignore_case_and_whitespace() -> None:
    a = make_user("a", profile=make_profile(religion="hindu ", diet="Vegetarian"))
    b = make_user("b")

    result = profile_compatibility(a, b)

    assert result.components["religion"] == 15.0
    assert result.components["lifestyle"] == 20.0


def test_missing_profile_scores_location_only() -> None:
    result = profile_compatibility(make_user("a", profile=None), make_user("b"))

    assert result.score == 20.0
    assert result.components["religion"] == 0.0


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("master", "master", 15),
        ("master", "bachelor", 10),
        ("phd", "bachelor", 5),
        ("phd", "high_school", 0),
        ("Masters", "doctorate", 10),
        ("diploma", "master", 0),
        (None, "master", 0),
    ],
)
def test_education_points(a, b, expected) -> None:
    assert education_points(a, b) == expected


def test_education_aliases() -> None:
    assert education_rank("High School") == 1
    assert education_rank("bachelor's") == 2
    assert education_rank("Post-Graduate") == 3


def test_language_and_hobby_points_are_capped() -> None:
    many = ["Hindi", "English", "Marathi", "Tamil"]
    hobbies = ["reading", "travel", "music", "chess", "yoga", "cooking"]
    a = make_user("a", profile=make_profile(languages_known=many, hobbies=hobbies))
    b = make_user("b", profile=make_profile(languages_known=many, hobbies=hobbies))

    result = profile_compatibility(a, b)

    assert result.components["languages"] == 10.0
    assert result.components["interests"] == 5.0


def test_profile_score_is_symmetric() -> None:
    a = make_user("a", profile=make_profile(education_level="phd", drinking="socially"))
    b = make_user("b", city="Pune", profile=make_profile(hobbies=["music"]))

    assert profile_compatibility(a, b).score == profile_compatibility(b, a).score


def test_completion_percentage_counts_weighted_fields() -> None:
    # 12 required fields (18) + 5 optional + 3 photos bonus = 25 of 34
    assert completion_percentage(make_user("a")) == 74.0


def test_completion_percentage_with_verification_bonus() -> None:
    user = make_user("a", profile=make_profile(profile_verified=True))

    # 27 of 34
    assert completion_percentage(user) == 79.0


def test_completion_percentage_without_profile() -> None:
    user = make_user("a", profile=None, city=None, country=None, approved_photo_count=0)

    assert completion_percentage(user) == 0.0


def test_explicit_completion_percentage_wins() -> None:
    user = make_user("a", profile=make_profile(profile_completion_percentage=42))

    assert completion_percentage(user) == 42.0
