"""
Reference tables for horoscope matching.

Zodiac signs follow the tropical calendar date ranges. Nakshatras are the 27
lunar mansions in their traditional order, Ashwini first.
"""

from datetime import date
from typing import Dict, List, Optional, Tuple


ZODIAC_SIGNS: List[str] = [
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
]

NAKSHATRAS: List[str] = [
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira", "Ardra",
    "Punarvasu", "Pushya", "Ashlesha", "Magha", "Purva Phalguni",
    "Uttara Phalguni", "Hasta", "Chitra", "Swati", "Vishakha", "Anuradha",
    "Jyeshtha", "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana",
    "Dhanishta", "Shatabhisha", "Purva Bhadrapada", "Uttara Bhadrapada",
    "Revati",
]

# Nakshatras that earn full moon-sign points
FAVOURED_NAKSHATRAS = frozenset(NAKSHATRAS[:9])

DOSHAS: List[str] = ["kuja", "shani", "rahu", "ketu", "guru", "budh", "shukra"]

# Koot name -> maximum points; totals 36
KOOT_MAXIMA: Dict[str, int] = {
    "varna": 1,
    "vashya": 2,
    "tara": 3,
    "yoni": 4,
    "graha_maitri": 5,
    "gana": 6,
    "bhakoot": 7,
    "nadi": 8,
}
ASHTAKOOT_MAX = sum(KOOT_MAXIMA.values())

COMPATIBLE_SIGNS: Dict[str, List[str]] = {
    "Aries": ["Gemini", "Leo", "Sagittarius", "Aquarius"],
    "Taurus": ["Cancer", "Virgo", "Capricorn", "Pisces"],
    "Gemini": ["Aries", "Leo", "Libra", "Aquarius"],
    "Cancer": ["Taurus", "Virgo", "Scorpio", "Pisces"],
    "Leo": ["Aries", "Gemini", "Libra", "Sagittarius"],
    "Virgo": ["Taurus", "Cancer", "Scorpio", "Capricorn"],
    "Libra": ["Gemini", "Leo", "Sagittarius", "Aquarius"],
    "Scorpio": ["Cancer", "Virgo", "Capricorn", "Pisces"],
    "Sagittarius": ["Aries", "Leo", "Libra", "Aquarius"],
    "Capricorn": ["Taurus", "Virgo", "Scorpio", "Pisces"],
    "Aquarius": ["Aries", "Gemini", "Libra", "Sagittarius"],
    "Pisces": ["Taurus", "Cancer", "Scorpio", "Capricorn"],
}

INCOMPATIBLE_SIGNS: Dict[str, List[str]] = {
    "Aries": ["Cancer", "Capricorn"],
    "Taurus": ["Leo", "Aquarius"],
    "Gemini": ["Virgo", "Pisces"],
    "Cancer": ["Aries", "Libra"],
    "Leo": ["Taurus", "Scorpio"],
    "Virgo": ["Gemini", "Sagittarius"],
    "Libra": ["Cancer", "Capricorn"],
    "Scorpio": ["Leo", "Aquarius"],
    "Sagittarius": ["Virgo", "Pisces"],
    "Capricorn": ["Aries", "Libra"],
    "Aquarius": ["Taurus", "Scorpio"],
    "Pisces": ["Gemini", "Sagittarius"],
}

ELEMENTS: Dict[str, str] = {
    "Aries": "Fire", "Leo": "Fire", "Sagittarius": "Fire",
    "Taurus": "Earth", "Virgo": "Earth", "Capricorn": "Earth",
    "Gemini": "Air", "Libra": "Air", "Aquarius": "Air",
    "Cancer": "Water", "Scorpio": "Water", "Pisces": "Water",
}

QUALITIES: Dict[str, str] = {
    "Aries": "Cardinal", "Cancer": "Cardinal", "Libra": "Cardinal", "Capricorn": "Cardinal",
    "Taurus": "Fixed", "Leo": "Fixed", "Scorpio": "Fixed", "Aquarius": "Fixed",
    "Gemini": "Mutable", "Virgo": "Mutable", "Sagittarius": "Mutable", "Pisces": "Mutable",
}

# (month, last day) boundaries; a date belongs to the first sign whose
# boundary it does not pass
_SIGN_BOUNDARIES: List[Tuple[int, int, str]] = [
    (1, 19, "Capricorn"),
    (2, 18, "Aquarius"),
    (3, 20, "Pisces"),
    (4, 19, "Aries"),
    (5, 20, "Taurus"),
    (6, 20, "Gemini"),
    (7, 22, "Cancer"),
    (8, 22, "Leo"),
    (9, 22, "Virgo"),
    (10, 22, "Libra"),
    (11, 21, "Scorpio"),
    (12, 21, "Sagittarius"),
    (12, 31, "Capricorn"),
]

_SIGN_LOOKUP = {sign.lower(): sign for sign in ZODIAC_SIGNS}
_NAKSHATRA_LOOKUP = {name.lower().replace(" ", ""): name for name in NAKSHATRAS}


def normalize_sign(value: Optional[str]) -> Optional[str]:
    """Return the canonical sign name, or raise ValueError for unknown names."""
    if value is None or not value.strip():
        return None
    sign = _SIGN_LOOKUP.get(value.strip().lower())
    if sign is None:
        raise ValueError(f"Unknown zodiac sign: {value}")
    return sign


def normalize_nakshatra(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    key = value.strip().lower().replace(" ", "").replace("_", "").replace("-", "")
    name = _NAKSHATRA_LOOKUP.get(key)
    if name is None:
        raise ValueError(f"Unknown nakshatra: {value}")
    return name


def zodiac_sign_for(birth_date: date) -> str:
    """Sun sign for a birth date."""
    for month, last_day, sign in _SIGN_BOUNDARIES:
        if (birth_date.month, birth_date.day) <= (month, last_day):
            return sign
    return "Capricorn"


def zodiac_element(sign: Optional[str]) -> str:
    return ELEMENTS.get(sign or "", "Unknown")


def zodiac_quality(sign: Optional[str]) -> str:
    return QUALITIES.get(sign or "", "Unknown")


def compatible_signs(sign: Optional[str]) -> List[str]:
    return list(COMPATIBLE_SIGNS.get(sign or "", []))


def incompatible_signs(sign: Optional[str]) -> List[str]:
    return list(INCOMPATIBLE_SIGNS.get(sign or "", []))


def compatible_moon_signs(moon_sign: Optional[str]) -> List[str]:
    """Moon signs (rashi) that harmonise with the given one."""
    return compatible_signs(moon_sign)


def interpret_ashtakoot(total: float) -> str:
    """Traditional reading of a 36-point Guna Milan total."""
    if total >= 33:
        return "Excellent match"
    if total >= 25:
        return "Very good match"
    if total >= 18:
        return "Average match, acceptable"
    return "Not recommended without remedies"
