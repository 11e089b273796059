from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from factories import make_horoscope
from matrimatch.schemas.records import AshtakootScores, HoroscopeRecord
from matrimatch.scoring.horoscope import (
    ashtakoot_points,
    horoscope_compatibility,
    horoscope_score,
)
from matrimatch.scoring.vedic import (
    compatible_moon_signs,
    interpret_ashtakoot,
    zodiac_element,
    zodiac_quality,
    zodiac_sign_for,
)


def test_well_matched_horoscopes() -> None:
    own = make_horoscope(zodiac_sign="Aries", guna_milan_score=27)
    other = make_horoscope(zodiac_sign="Leo", birth_nakshatra="Rohini")

    report = horoscope_compatibility(own, other)

    assert {name: f.score for name, f in report.analysis.items()} == {
        "zodiac": 25,
        "moon_sign": 20,
        "manglik": 20,
        "dosha": 15,
        "ashtakoot": 15,
    }
    assert report.score == 95
    assert report.grade == "Excellent"
    assert report.compatible is True
    assert report.recommendations == []


def test_poorly_matched_horoscopes_get_every_recommendation() -> None:
    own = make_horoscope(zodiac_sign="Aries", manglik=True, kuja=True)
    other = make_horoscope(zodiac_sign="Cancer", birth_nakshatra="Magha", kuja=True)

    report = horoscope_compatibility(own, other)

    # 5 zodiac + 10 moon + 5 manglik + 5 dosha + 0 ashtakoot
    assert report.score == 25
    assert report.grade == "Poor"
    assert report.compatible is False
    assert report.common_doshas == ["kuja"]
    assert len(report.recommendations) == 4


def test_neutral_zodiac_pair() -> None:
    report = horoscope_compatibility(
        make_horoscope(zodiac_sign="Aries"), make_horoscope(zodiac_sign="Aries")
    )

    assert report.analysis["zodiac"].score == 15


def test_compatible_threshold_is_60() -> None:
    own = make_horoscope(zodiac_sign="Aries", guna_milan_score=0)
    other = make_horoscope(zodiac_sign="Aries", birth_nakshatra="Magha")

    # 15 + 10 + 20 + 15 + 0
    report = horoscope_compatibility(own, other)

    assert report.score == 60
    assert report.compatible is True
    assert report.grade == "Good"


def test_ashtakoot_from_koot_flags() -> None:
    koots = AshtakootScores(
        varna=True, vashya=True, tara=True, yoni=True,
        graha_maitri=True, gana=True, bhakoot=True, nadi=False,
    )
    own = make_horoscope(ashtakoot=koots)

    report = horoscope_compatibility(own, make_horoscope())

    assert report.ashtakoot_points == 28
    assert report.analysis["ashtakoot"].score == 16
    assert report.ashtakoot_breakdown["nadi"] == 0


def test_ashtakoot_falls_back_to_the_other_record() -> None:
    other = make_horoscope(guna_milan_score=36)

    report = horoscope_compatibility(make_horoscope(), other)

    assert report.analysis["ashtakoot"].score == 20


def test_koot_values_are_clamped() -> None:
    koots = AshtakootScores(varna=5, nadi=-2, gana=3.5)

    assert koots.varna == 1
    assert koots.nadi == 0
    assert koots.total == 4.5


@pytest.mark.parametrize("value", ["nan", float("nan"), "inf", float("-inf")])
def test_non_finite_koot_values_are_rejected(value) -> None:
    with pytest.raises(ValidationError):
        AshtakootScores(nadi=value)


def test_non_finite_guna_score_is_rejected() -> None:
    with pytest.raises(ValidationError):
        HoroscopeRecord(zodiac_sign="Aries", guna_milan_score=float("nan"))


@pytest.mark.parametrize("total, points", [(36, 20), (27, 15), (18, 10), (9, 5), (0, 0), (1, 1)])
def test_ashtakoot_scaling(total, points) -> None:
    assert ashtakoot_points(total) == points


def test_missing_horoscope_returns_none() -> None:
    assert horoscope_score(None, make_horoscope()) is None
    assert horoscope_score(make_horoscope(), None) is None


@pytest.mark.parametrize(
    "birth_date, sign",
    [
        (date(1990, 3, 21), "Aries"),
        (date(1990, 4, 19), "Aries"),
        (date(1990, 4, 20), "Taurus"),
        (date(1990, 1, 19), "Capricorn"),
        (date(1990, 1, 20), "Aquarius"),
        (date(1990, 2, 19), "Pisces"),
        (date(1990, 11, 22), "Sagittarius"),
        (date(1990, 12, 25), "Capricorn"),
    ],
)
def test_zodiac_sign_for(birth_date, sign) -> None:
    assert zodiac_sign_for(birth_date) == sign


def test_zodiac_sign_is_derived_from_birth_date() -> None:
    record = HoroscopeRecord(birth_date=date(1992, 8, 1))

    assert record.zodiac_sign == "Leo"


def test_names_are_normalised() -> None:
    record = HoroscopeRecord(zodiac_sign="leo", moon_sign=" PISCES ", birth_nakshatra="purva phalguni")

    assert record.zodiac_sign == "Leo"
    assert record.moon_sign == "Pisces"
    assert record.birth_nakshatra == "Purva Phalguni"


def test_unknown_names_are_rejected() -> None:
    with pytest.raises(ValidationError):
        HoroscopeRecord(zodiac_sign="Ophiuchus")
    with pytest.raises(ValidationError):
        HoroscopeRecord(birth_nakshatra="Nowhere")


def test_moon_signs_compatibility_is_reported() -> None:
    own = make_horoscope(moon_sign="Taurus")
    other = make_horoscope(moon_sign="Virgo")

    assert horoscope_compatibility(own, other).moon_signs_compatible is True
    assert horoscope_compatibility(make_horoscope(), other).moon_signs_compatible is None


def test_sign_lookups() -> None:
    assert zodiac_element("Scorpio") == "Water"
    assert zodiac_quality("Leo") == "Fixed"
    assert zodiac_element(None) == "Unknown"
    assert compatible_moon_signs("Aries") == ["Gemini", "Leo", "Sagittarius", "Aquarius"]


def test_interpret_ashtakoot() -> None:
    assert interpret_ashtakoot(34) == "Excellent match"
    assert interpret_ashtakoot(12) == "Not recommended without remedies"
