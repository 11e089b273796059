"""
Score-to-label mappings and numeric helpers shared by the scorers.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Tuple


GRADE_EXCELLENT = "Excellent"
GRADE_GOOD = "Good"
GRADE_AVERAGE = "Average"
GRADE_POOR = "Poor"
GRADE_INCOMPATIBLE = "Incompatible"

# Lower bound (inclusive) -> label, checked top-down
GRADE_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (80, GRADE_EXCELLENT),
    (60, GRADE_GOOD),
    (40, GRADE_AVERAGE),
    (20, GRADE_POOR),
)

QUALITY_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (85, "excellent"),
    (70, "very_good"),
    (55, "good"),
    (40, "fair"),
)


def grade(score: float) -> str:
    """Map a 0-100 score to its compatibility grade."""
    for threshold, label in GRADE_THRESHOLDS:
        if score >= threshold:
            return label
    return GRADE_INCOMPATIBLE


def match_quality(score: float) -> str:
    """Display label used on match cards."""
    for threshold, label in QUALITY_THRESHOLDS:
        if score >= threshold:
            return label
    return "poor"


def clamp_score(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, ndigits: int = 2) -> float:
    """Round halves away from zero, as stored decimal scores are."""
    quantum = Decimal(1).scaleb(-ndigits)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
