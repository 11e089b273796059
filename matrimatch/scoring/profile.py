"""
Profile overlap between two users, scored out of 100 points.

    location   20  country 10, then state 5, then city 5
    religion   15  religion 10, then caste 5
    education  15  by distance between education levels
    lifestyle  20  diet 7, smoking 7, drinking 6
    family     15  family type 8, marital status 7
    languages  10  3 per shared language
    interests   5  1 per shared hobby
"""

from typing import Iterable, Optional

from matrimatch.schemas.compatibility import SubScore
from matrimatch.schemas.records import ProfileRecord, UserRecord
from matrimatch.scoring.grading import clamp_score, round_half_up


EDUCATION_LEVELS = {
    "high_school": 1,
    "bachelor": 2,
    "master": 3,
    "phd": 4,
}

EDUCATION_ALIASES = {
    "highschool": "high_school",
    "secondary": "high_school",
    "bachelors": "bachelor",
    "undergraduate": "bachelor",
    "graduate": "bachelor",
    "masters": "master",
    "postgraduate": "master",
    "doctorate": "phd",
    "doctoral": "phd",
}

# Level distance -> points
EDUCATION_POINTS = {0: 15, 1: 10, 2: 5}

REQUIRED_FIELDS = (
    "height_cm", "body_type", "current_city", "current_country",
    "education_level", "occupation", "religion", "mother_tongue",
    "family_type", "diet", "marital_status", "about_me",
)
OPTIONAL_FIELDS = (
    "weight_kg", "complexion", "blood_group", "education_field", "company",
    "annual_income_usd", "caste", "smoking", "drinking", "hobbies",
    "looking_for", "family_details",
)
REQUIRED_FIELD_WEIGHT = 1.5
VERIFIED_BONUS = 2
PHOTOS_BONUS = 2
MIN_PHOTOS_FOR_BONUS = 3
MAX_COMPLETION_POINTS = (
    len(REQUIRED_FIELDS) * REQUIRED_FIELD_WEIGHT
    + len(OPTIONAL_FIELDS)
    + VERIFIED_BONUS
    + PHOTOS_BONUS
)


def normalize(value: Optional[str]) -> Optional[str]:
    """Lower-cased, stripped text; blank becomes None."""
    if value is None:
        return None
    value = value.strip().lower()
    return value or None


def same(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive equality; two missing values are not a match."""
    a, b = normalize(a), normalize(b)
    return a is not None and a == b


def common_items(a: Iterable[str], b: Iterable[str]) -> set:
    return {normalize(x) for x in a if normalize(x)} & {normalize(x) for x in b if normalize(x)}


def education_rank(level: Optional[str]) -> Optional[int]:
    key = normalize(level)
    if key is None:
        return None
    key = key.replace(" ", "_").replace("-", "_").replace("'", "")
    key = EDUCATION_ALIASES.get(key.replace("_", ""), key)
    return EDUCATION_LEVELS.get(key)


def location_points(user: UserRecord, candidate: UserRecord) -> float:
    if not same(user.country, candidate.country):
        return 0
    points = 10
    if same(user.state, candidate.state):
        points += 5
        if same(user.city, candidate.city):
            points += 5
    return points


def education_points(a: Optional[str], b: Optional[str]) -> float:
    rank_a, rank_b = education_rank(a), education_rank(b)
    if rank_a is None or rank_b is None:
        return 0
    return EDUCATION_POINTS.get(abs(rank_a - rank_b), 0)


def profile_compatibility(user: UserRecord, candidate: UserRecord) -> SubScore:
    """Symmetric profile overlap score in [0, 100]."""
    components = {
        "location": location_points(user, candidate),
        "religion": 0.0,
        "education": 0.0,
        "lifestyle": 0.0,
        "family": 0.0,
        "languages": 0.0,
        "interests": 0.0,
    }

    mine, theirs = user.profile, candidate.profile
    if mine is not None and theirs is not None:
        if same(mine.religion, theirs.religion):
            components["religion"] = 10 + (5 if same(mine.caste, theirs.caste) else 0)

        components["education"] = education_points(mine.education_level, theirs.education_level)

        components["lifestyle"] = (
            (7 if same(mine.diet, theirs.diet) else 0)
            + (7 if same(mine.smoking, theirs.smoking) else 0)
            + (6 if same(mine.drinking, theirs.drinking) else 0)
        )

        components["family"] = (
            (8 if same(mine.family_type, theirs.family_type) else 0)
            + (7 if same(mine.marital_status, theirs.marital_status) else 0)
        )

        components["languages"] = min(
            10, len(common_items(mine.languages_known, theirs.languages_known)) * 3
        )
        components["interests"] = min(5, len(common_items(mine.hobbies, theirs.hobbies)))

    components = {name: float(points) for name, points in components.items()}
    return SubScore(score=clamp_score(sum(components.values())), components=components)


def completion_percentage(user: UserRecord) -> float:
    """
    How complete a user's profile is, 0-100.
    An explicit percentage on the profile wins over the computed one.
    """
    profile = user.profile
    if profile is not None and profile.profile_completion_percentage is not None:
        return float(profile.profile_completion_percentage)

    values = _completion_values(user, profile)
    completed = sum(
        REQUIRED_FIELD_WEIGHT for field in REQUIRED_FIELDS if _filled(values.get(field))
    )
    completed += sum(1 for field in OPTIONAL_FIELDS if _filled(values.get(field)))

    if profile is not None and profile.profile_verified:
        completed += VERIFIED_BONUS
    if user.approved_photo_count >= MIN_PHOTOS_FOR_BONUS:
        completed += PHOTOS_BONUS

    return float(min(100, round_half_up(completed / MAX_COMPLETION_POINTS * 100, 0)))


def _completion_values(user: UserRecord, profile: Optional[ProfileRecord]) -> dict:
    values = profile.model_dump() if profile is not None else {}
    values["current_city"] = user.city
    values["current_country"] = user.country
    return values


def _filled(value) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list)):
        return len(value) > 0
    return True
