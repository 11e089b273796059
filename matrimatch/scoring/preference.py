"""
Stated-preference checks between users.

mutual_preference_score is the term used in the final compatibility score.
preference_match_score and matches_preferences look in one direction only:
how well a candidate fits one user's preferences.
"""

from datetime import date
from typing import Callable, Iterable, List, Optional

from matrimatch.schemas.compatibility import SubScore
from matrimatch.schemas.records import PreferenceRecord, UserRecord
from matrimatch.scoring.grading import clamp_score, round_half_up
from matrimatch.scoring.profile import normalize, education_rank


NEUTRAL_PREFERENCE_SCORE = 50.0


def _education_key(value: Optional[str]) -> Optional[str]:
    rank = education_rank(value)
    return str(rank) if rank is not None else normalize(value)


def _in(value: Optional[str], options: Iterable[str], key: Callable = normalize) -> bool:
    """Whether value is one of options; a missing value never is."""
    value = key(value)
    return value is not None and value in {key(option) for option in options}


def _allowed(value: Optional[str], options: List[str], key: Callable = normalize) -> bool:
    """An empty option list accepts anything."""
    return not options or _in(value, options, key)


def _within(value: Optional[float], low: Optional[float], high: Optional[float]) -> bool:
    """Range check where an unset bound is open and a missing value fails a set bound."""
    if low is None and high is None:
        return True
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def _age_in_range(age: Optional[int], prefs: PreferenceRecord) -> bool:
    """Only counts when the preference names an age range."""
    if prefs.min_age is None and prefs.max_age is None:
        return False
    return _within(age, prefs.min_age, prefs.max_age)


def mutual_preference_score(
    user: UserRecord, candidate: UserRecord, today: Optional[date] = None
) -> SubScore:
    """
    How well the two users fit each other's preferences, 0-100.

    Points are awarded in both directions; only the height check is one-sided
    (candidate's height against the user's range, when both bounds are set).
    The raw total can reach 110 and saturates at 100. When either side has no
    preferences or no profile the neutral score of 50 is returned.
    """
    user_prefs, cand_prefs = user.preferences, candidate.preferences
    user_profile, cand_profile = user.profile, candidate.profile

    if user_prefs is None or cand_prefs is None or user_profile is None or cand_profile is None:
        return SubScore(score=NEUTRAL_PREFERENCE_SCORE, components={"neutral": NEUTRAL_PREFERENCE_SCORE})

    user_age, cand_age = user.age_on(today), candidate.age_on(today)
    components = {
        "age": 0.0,
        "height": 0.0,
        "location": 0.0,
        "religion": 0.0,
        "education": 0.0,
        "income": 0.0,
    }

    if _age_in_range(user_age, cand_prefs):
        components["age"] += 15
    if _age_in_range(cand_age, user_prefs):
        components["age"] += 15

    if (
        user_prefs.min_height_cm is not None
        and user_prefs.max_height_cm is not None
        and _within(cand_profile.height_cm, user_prefs.min_height_cm, user_prefs.max_height_cm)
    ):
        components["height"] = 10

    if _in(candidate.country, user_prefs.preferred_countries):
        components["location"] += 10
    if _in(user.country, cand_prefs.preferred_countries):
        components["location"] += 10

    if _in(cand_profile.religion, user_prefs.preferred_religions):
        components["religion"] += 10
    if _in(user_profile.religion, cand_prefs.preferred_religions):
        components["religion"] += 10

    if _in(cand_profile.education_level, user_prefs.preferred_education_levels, _education_key):
        components["education"] += 10
    if _in(user_profile.education_level, cand_prefs.preferred_education_levels, _education_key):
        components["education"] += 10

    if _meets_min_income(cand_profile.annual_income_usd, user_prefs.min_income_usd):
        components["income"] += 5
    if _meets_min_income(user_profile.annual_income_usd, cand_prefs.min_income_usd):
        components["income"] += 5

    return SubScore(
        score=round_half_up(clamp_score(sum(components.values()))),
        components=components,
    )


def _meets_min_income(income: Optional[float], minimum: Optional[float]) -> bool:
    return minimum is not None and income is not None and income >= minimum


def _age_points(age: Optional[int], prefs: PreferenceRecord) -> float:
    """Full 15 at the centre of the range, falling off towards the edges."""
    if prefs.min_age is None and prefs.max_age is None:
        return 15.0
    if not _within(age, prefs.min_age, prefs.max_age):
        return 0.0
    if prefs.min_age is None or prefs.max_age is None:
        return 15.0
    age_range = prefs.max_age - prefs.min_age
    if age_range == 0:
        return 15.0
    centre = (prefs.min_age + prefs.max_age) / 2
    return max(0.0, 15 - abs(age - centre) / age_range * 15)


def preference_match_score(
    prefs: PreferenceRecord, candidate: UserRecord, today: Optional[date] = None
) -> float:
    """
    How well a candidate fits one set of preferences, 0-100.
    A preference left unset counts as satisfied.
    """
    profile = candidate.profile
    religion = profile.religion if profile else None
    education = profile.education_level if profile else None
    diet = profile.diet if profile else None
    smoking = profile.smoking if profile else None
    drinking = profile.drinking if profile else None
    marital_status = profile.marital_status if profile else None
    height = profile.height_cm if profile else None
    income = profile.annual_income_usd if profile else None

    score = _age_points(candidate.age_on(today), prefs)
    max_score = 15

    max_score += 10
    if _allowed(candidate.country, prefs.preferred_countries):
        score += 10

    max_score += 15
    if _allowed(religion, prefs.preferred_religions):
        score += 15

    max_score += 10
    if _allowed(education, prefs.preferred_education_levels, _education_key):
        score += 10

    max_score += 20
    if _allowed(diet, prefs.preferred_diets):
        score += 7
    if _allowed(smoking, prefs.preferred_smoking_habits):
        score += 7
    if _allowed(drinking, prefs.preferred_drinking_habits):
        score += 6

    max_score += 10
    if _allowed(marital_status, prefs.preferred_marital_status):
        score += 10

    max_score += 10
    if _children_acceptable(prefs, candidate):
        score += 10

    max_score += 5
    if _within(height, prefs.min_height_cm, prefs.max_height_cm):
        score += 5

    max_score += 5
    if _within(income, prefs.min_income_usd, prefs.max_income_usd):
        score += 5

    return round_half_up(score / max_score * 100)


def _children_acceptable(prefs: PreferenceRecord, candidate: UserRecord) -> bool:
    profile = candidate.profile
    has_children = bool(profile and profile.have_children)
    children_count = profile.children_count if profile else 0
    if not prefs.accept_with_children and has_children:
        return False
    if prefs.max_children_count is not None and children_count > prefs.max_children_count:
        return False
    return True


def matches_preferences(
    prefs: PreferenceRecord, candidate: UserRecord, today: Optional[date] = None
) -> bool:
    """Hard filter: does the candidate satisfy every preference that is set."""
    profile = candidate.profile

    if not _within(candidate.age_on(today), prefs.min_age, prefs.max_age):
        return False
    if not _allowed(candidate.gender, prefs.preferred_genders):
        return False
    if not _allowed(candidate.country, prefs.preferred_countries):
        return False
    if not prefs.accept_physically_challenged and candidate.physically_challenged:
        return False
    if prefs.show_only_verified_profiles and not candidate.is_verified:
        return False
    if not _children_acceptable(prefs, candidate):
        return False

    if not _within(profile.height_cm if profile else None, prefs.min_height_cm, prefs.max_height_cm):
        return False
    if not _within(
        profile.annual_income_usd if profile else None,
        prefs.min_income_usd,
        prefs.max_income_usd,
    ):
        return False

    checks = (
        ("religion", prefs.preferred_religions, normalize),
        ("education_level", prefs.preferred_education_levels, _education_key),
        ("marital_status", prefs.preferred_marital_status, normalize),
        ("diet", prefs.preferred_diets, normalize),
        ("smoking", prefs.preferred_smoking_habits, normalize),
        ("drinking", prefs.preferred_drinking_habits, normalize),
    )
    for field, options, key in checks:
        value = getattr(profile, field) if profile else None
        if not _allowed(value, options, key):
            return False

    return True


def deal_breakers(prefs: PreferenceRecord) -> List[str]:
    """Preferences that are absolute requirements."""
    breakers = []
    if not prefs.accept_with_children:
        breakers.append("no_children")
    if not prefs.accept_physically_challenged:
        breakers.append("no_physical_challenges")
    if prefs.require_horoscope_match:
        breakers.append("horoscope_required")
    if prefs.show_only_verified_profiles:
        breakers.append("verified_only")
    return breakers
