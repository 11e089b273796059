from __future__ import annotations

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="matrimatch-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/matrimatch.db"
os.environ["UPSTASH_REDIS_URL"] = ""
os.environ["UPSTASH_REDIS_TOKEN"] = ""
os.environ["MISSING_HOROSCOPE_POLICY"] = "zero_fill"

import pytest  # noqa: E402

from factories import make_horoscope, make_user  # noqa: E402
from matrimatch.schemas.records import UserRecord  # noqa: E402


@pytest.fixture
def user() -> UserRecord:
    return make_user(
        "user-a",
        horoscope=make_horoscope(zodiac_sign="Aries", guna_milan_score=27),
    )


@pytest.fixture
def candidate() -> UserRecord:
    return make_user(
        "user-b",
        gender="male",
        horoscope=make_horoscope(zodiac_sign="Leo", birth_nakshatra="Rohini"),
    )
