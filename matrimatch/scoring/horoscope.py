"""
Vedic horoscope compatibility scored out of 100 points.

    zodiac     25  compatible sign 25, incompatible 5, otherwise 15
    moon_sign  20  favoured birth nakshatra 20, otherwise 10
    manglik    20  same manglik status 20, otherwise 5
    dosha      15  no dosha in common 15, otherwise 5
    ashtakoot  20  Guna Milan points scaled from 36 to 20
"""

from typing import Optional

from matrimatch.schemas.compatibility import HoroscopeFactor, HoroscopeReport
from matrimatch.schemas.records import HoroscopeRecord
from matrimatch.scoring.grading import grade, round_half_up
from matrimatch.scoring.vedic import (
    ASHTAKOOT_MAX,
    DOSHAS,
    FAVOURED_NAKSHATRAS,
    compatible_moon_signs,
    compatible_signs,
    incompatible_signs,
    interpret_ashtakoot,
)


COMPATIBLE_THRESHOLD = 60


def zodiac_points(own: HoroscopeRecord, other: HoroscopeRecord) -> int:
    if other.zodiac_sign in compatible_signs(own.zodiac_sign):
        return 25
    if other.zodiac_sign in incompatible_signs(own.zodiac_sign):
        return 5
    return 15


def moon_sign_points(other: HoroscopeRecord) -> int:
    return 20 if other.birth_nakshatra in FAVOURED_NAKSHATRAS else 10


def manglik_points(own: HoroscopeRecord, other: HoroscopeRecord) -> int:
    return 20 if own.manglik == other.manglik else 5


def dosha_points(own: HoroscopeRecord, other: HoroscopeRecord) -> int:
    return 5 if own.doshas & other.doshas else 15


def ashtakoot_source(own: HoroscopeRecord, other: HoroscopeRecord) -> Optional[HoroscopeRecord]:
    """The record whose Guna Milan points are used: own first, then other."""
    for record in (own, other):
        if record.ashtakoot_total is not None:
            return record
    return None


def ashtakoot_points(total: float) -> int:
    """Scale a 36-point Guna Milan total down to 20 points."""
    return int(round_half_up(total / ASHTAKOOT_MAX * 20, 0))


def horoscope_compatibility(own: HoroscopeRecord, other: HoroscopeRecord) -> HoroscopeReport:
    """Compatibility of `own` with `other`, as seen from `own`."""
    source = ashtakoot_source(own, other)
    koot_total = source.ashtakoot_total if source is not None else 0.0
    breakdown = (
        source.ashtakoot.model_dump()
        if source is not None and source.ashtakoot is not None
        else None
    )

    analysis = {
        "zodiac": HoroscopeFactor(
            score=zodiac_points(own, other),
            max_score=25,
            compatible=other.zodiac_sign in compatible_signs(own.zodiac_sign),
        ),
        "moon_sign": HoroscopeFactor(
            score=moon_sign_points(other),
            max_score=20,
            compatible=other.birth_nakshatra in FAVOURED_NAKSHATRAS,
        ),
        "manglik": HoroscopeFactor(
            score=manglik_points(own, other),
            max_score=20,
            compatible=own.manglik == other.manglik,
        ),
        "dosha": HoroscopeFactor(
            score=dosha_points(own, other),
            max_score=15,
            compatible=not (own.doshas & other.doshas),
        ),
        "ashtakoot": HoroscopeFactor(
            score=ashtakoot_points(koot_total),
            max_score=20,
            compatible=koot_total >= 18,
        ),
    }

    score = sum(factor.score for factor in analysis.values())
    moon_signs_compatible = None
    if own.moon_sign and other.moon_sign:
        moon_signs_compatible = other.moon_sign in compatible_moon_signs(own.moon_sign)

    return HoroscopeReport(
        score=score,
        grade=grade(score),
        compatible=score >= COMPATIBLE_THRESHOLD,
        analysis=analysis,
        ashtakoot_points=koot_total,
        ashtakoot_breakdown=breakdown,
        ashtakoot_interpretation=interpret_ashtakoot(koot_total),
        common_doshas=[d for d in DOSHAS if d in own.doshas & other.doshas],
        moon_signs_compatible=moon_signs_compatible,
        recommendations=recommendations(analysis),
    )


def recommendations(analysis) -> list:
    tips = []
    if analysis["zodiac"].score < 15:
        tips.append("Consider zodiac compatibility for better harmony")
    if analysis["manglik"].score < 15:
        tips.append("Manglik compatibility should be addressed through remedies")
    if analysis["dosha"].score < 10:
        tips.append("Dosha remedies may be beneficial for compatibility")
    if analysis["ashtakoot"].score < 15:
        tips.append("Ashtakoot compatibility can be improved with specific remedies")
    return tips


def horoscope_score(own: Optional[HoroscopeRecord], other: Optional[HoroscopeRecord]) -> Optional[HoroscopeReport]:
    """Report for two optional horoscopes; None when either is missing."""
    if own is None or other is None:
        return None
    return horoscope_compatibility(own, other)
