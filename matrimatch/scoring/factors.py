from typing import List, Optional

from matrimatch.schemas.compatibility import HoroscopeReport
from matrimatch.schemas.records import UserRecord
from matrimatch.scoring.profile import common_items, education_rank, same


def matching_factors(
    user: UserRecord,
    candidate: UserRecord,
    horoscope: Optional[HoroscopeReport] = None,
) -> List[str]:
    """Short labels for what the two users have in common."""
    factors = []

    if same(user.country, candidate.country):
        factors.append("same_country")
        if same(user.city, candidate.city):
            factors.append("same_city")

    mine, theirs = user.profile, candidate.profile
    if mine is not None and theirs is not None:
        if same(mine.religion, theirs.religion):
            factors.append("same_religion")
            if same(mine.caste, theirs.caste):
                factors.append("same_caste")

        rank_a, rank_b = education_rank(mine.education_level), education_rank(theirs.education_level)
        if rank_a is not None and rank_b is not None and rank_a == rank_b:
            factors.append("similar_education")

        if common_items(mine.languages_known, theirs.languages_known):
            factors.append("common_languages")
        if same(mine.diet, theirs.diet):
            factors.append("same_diet")
        if same(mine.smoking, theirs.smoking):
            factors.append("same_smoking_habits")
        if same(mine.family_type, theirs.family_type):
            factors.append("similar_family_background")

    if horoscope is not None:
        if horoscope.analysis["zodiac"].compatible:
            factors.append("compatible_zodiac")
        if horoscope.analysis["manglik"].compatible:
            factors.append("manglik_compatible")

    return factors
