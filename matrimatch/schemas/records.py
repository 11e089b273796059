import math
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Set
from datetime import date, datetime

from matrimatch.scoring.vedic import (
    DOSHAS,
    KOOT_MAXIMA,
    normalize_nakshatra,
    normalize_sign,
    zodiac_sign_for,
)


def calculate_age(birth_date: date, today: Optional[date] = None) -> int:
    """Calculate age in whole years on the given day."""
    today = today or date.today()
    return today.year - birth_date.year - (
        (today.month, today.day) < (birth_date.month, birth_date.day)
    )


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# ==================== Profile ====================

class ProfileRecord(BaseModel):
    """Self-described profile attributes of a user."""

    # Physical
    height_cm: Optional[int] = Field(None, ge=50, le=275)
    weight_kg: Optional[float] = Field(None, ge=20, le=400)
    body_type: Optional[str] = None
    complexion: Optional[str] = None
    blood_group: Optional[str] = None

    # Cultural
    religion: Optional[str] = None
    caste: Optional[str] = None
    mother_tongue: Optional[str] = None
    languages_known: List[str] = []

    # Education & Career
    education_level: Optional[str] = None
    education_field: Optional[str] = None
    occupation: Optional[str] = None
    company: Optional[str] = None
    annual_income_usd: Optional[float] = Field(None, ge=0)

    # Lifestyle
    diet: Optional[str] = None
    smoking: Optional[str] = None
    drinking: Optional[str] = None
    hobbies: List[str] = []

    # Family
    family_type: Optional[str] = None
    family_details: Optional[str] = None
    marital_status: Optional[str] = None
    have_children: bool = False
    children_count: int = Field(0, ge=0)

    # About
    about_me: Optional[str] = None
    looking_for: Optional[str] = None
    profile_verified: bool = False
    profile_completion_percentage: Optional[float] = Field(None, ge=0, le=100)

    @field_validator(
        "body_type", "complexion", "blood_group", "religion", "caste",
        "mother_tongue", "education_level", "education_field", "occupation",
        "company", "diet", "smoking", "drinking", "family_type",
        "family_details", "marital_status", "about_me", "looking_for",
    )
    @classmethod
    def strip_blank(cls, v):
        return _clean(v)


# ==================== Preferences ====================

class PreferenceRecord(BaseModel):
    """What a user is looking for in a partner."""

    min_age: Optional[int] = Field(None, ge=18, le=100)
    max_age: Optional[int] = Field(None, ge=18, le=100)
    min_height_cm: Optional[int] = Field(None, ge=50, le=275)
    max_height_cm: Optional[int] = Field(None, ge=50, le=275)

    preferred_genders: List[str] = []
    preferred_countries: List[str] = []
    preferred_religions: List[str] = []
    preferred_education_levels: List[str] = []
    preferred_marital_status: List[str] = []
    preferred_diets: List[str] = []
    preferred_smoking_habits: List[str] = []
    preferred_drinking_habits: List[str] = []

    min_income_usd: Optional[float] = Field(None, ge=0)
    max_income_usd: Optional[float] = Field(None, ge=0)

    accept_with_children: bool = True
    max_children_count: Optional[int] = Field(None, ge=0)
    accept_physically_challenged: bool = True

    # Deal breakers
    require_horoscope_match: bool = False
    min_horoscope_score: Optional[float] = Field(None, ge=0, le=100)
    show_only_verified_profiles: bool = False

    @model_validator(mode="after")
    def check_ranges(self) -> "PreferenceRecord":
        if self.min_age is not None and self.max_age is not None and self.min_age > self.max_age:
            raise ValueError("min_age must not exceed max_age")
        if (
            self.min_height_cm is not None
            and self.max_height_cm is not None
            and self.min_height_cm > self.max_height_cm
        ):
            raise ValueError("min_height_cm must not exceed max_height_cm")
        if (
            self.min_income_usd is not None
            and self.max_income_usd is not None
            and self.min_income_usd > self.max_income_usd
        ):
            raise ValueError("min_income_usd must not exceed max_income_usd")
        return self


# ==================== Horoscope ====================

class AshtakootScores(BaseModel):
    """
    Points earned on each of the eight koots.
    True means full points for that koot, False none; numbers are clamped
    into the koot's range.
    """

    varna: float = 0
    vashya: float = 0
    tara: float = 0
    yoni: float = 0
    graha_maitri: float = 0
    gana: float = 0
    bhakoot: float = 0
    nadi: float = 0

    @field_validator("*", mode="before")
    @classmethod
    def to_points(cls, v, info):
        maximum = KOOT_MAXIMA[info.field_name]
        if v is None:
            return 0
        if isinstance(v, bool):
            return maximum if v else 0
        points = float(v)
        if not math.isfinite(points):
            raise ValueError(f"{info.field_name} must be a finite number")
        return min(max(points, 0.0), float(maximum))

    @property
    def total(self) -> float:
        return sum(getattr(self, koot) for koot in KOOT_MAXIMA)


class HoroscopeRecord(BaseModel):
    """Astrological data attached to a user."""

    birth_date: Optional[date] = None
    zodiac_sign: Optional[str] = None
    moon_sign: Optional[str] = None
    birth_nakshatra: Optional[str] = None

    manglik: bool = False

    kuja: bool = False
    shani: bool = False
    rahu: bool = False
    ketu: bool = False
    guru: bool = False
    budh: bool = False
    shukra: bool = False

    ashtakoot: Optional[AshtakootScores] = None
    guna_milan_score: Optional[float] = Field(None, ge=0, le=36, allow_inf_nan=False)

    @field_validator("zodiac_sign", "moon_sign")
    @classmethod
    def validate_sign(cls, v):
        return normalize_sign(v)

    @field_validator("birth_nakshatra")
    @classmethod
    def validate_nakshatra(cls, v):
        return normalize_nakshatra(v)

    @model_validator(mode="after")
    def derive_zodiac(self) -> "HoroscopeRecord":
        if self.zodiac_sign is None and self.birth_date is not None:
            self.zodiac_sign = zodiac_sign_for(self.birth_date)
        return self

    @property
    def doshas(self) -> Set[str]:
        return {dosha for dosha in DOSHAS if getattr(self, dosha)}

    @property
    def ashtakoot_total(self) -> Optional[float]:
        """Guna Milan points out of 36, if this record carries any."""
        if self.ashtakoot is not None:
            return self.ashtakoot.total
        return self.guna_milan_score


# ==================== Messaging ====================

class MessagingStats(BaseModel):
    """Aggregated messaging behaviour of a user."""

    messages_sent: int = Field(0, ge=0)
    messages_received: int = Field(0, ge=0)
    avg_response_time_seconds: Optional[float] = Field(None, ge=0)
    avg_message_words: Optional[float] = Field(None, ge=0)


# ==================== User ====================

class UserRecord(BaseModel):
    """
    A fully-loaded user as sent by the caller.
    Profile, preferences, horoscope and messaging are all optional.
    """

    id: str = Field(..., min_length=1, max_length=64)
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    age: Optional[int] = Field(None, ge=18, le=120)

    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None

    last_active_at: Optional[datetime] = None
    approved_photo_count: int = Field(0, ge=0)
    physically_challenged: bool = False

    profile: Optional[ProfileRecord] = None
    preferences: Optional[PreferenceRecord] = None
    horoscope: Optional[HoroscopeRecord] = None
    messaging: Optional[MessagingStats] = None

    @field_validator("id")
    @classmethod
    def strip_id(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("id must not be blank")
        return v

    @field_validator("gender", "country", "state", "city")
    @classmethod
    def strip_blank(cls, v):
        return _clean(v)

    def age_on(self, today: Optional[date] = None) -> Optional[int]:
        """Age on the given day; an explicit age wins over date of birth."""
        if self.age is not None:
            return self.age
        if self.date_of_birth is not None:
            return calculate_age(self.date_of_birth, today)
        return None

    @property
    def is_verified(self) -> bool:
        return bool(self.profile and self.profile.profile_verified)
