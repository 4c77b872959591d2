"""Readiness Score - HRV, resting heart rate and sleep combined into 0-100.

Each factor is banded on its own, its band mapped to a sub-score, and the
sub-scores weighted into the composite. Advice is looked up, never generated,
so the same inputs always give the same text.
"""

from . import constants
from .errors import parse_input
from .models import FactorReading, ReadinessInput, ReadinessResult
from .thresholds import classify_level


BAND_SCORES = {"optimal": 100, "borderline": 50, "poor": 0}

RECOMMENDATIONS = {
    "excellent": [
        "You're well recovered. A good day for high-intensity or long training.",
        "Keep your current sleep and hydration routine.",
    ],
    "good": [
        "Moderate training is fine today; keep hard efforts short.",
        "Aim for at least 7 hours of sleep tonight.",
    ],
    "fair": [
        "Favor light activity such as walking, mobility or easy cardio.",
        "Prioritize an early night and steady hydration.",
    ],
    "poor": [
        "Take a rest or active-recovery day.",
        "Focus on sleep, hydration and a balanced meal before training again.",
    ],
}

FACTOR_NOTES = {
    "hrv": "HRV is below your optimal range; limit intense sessions.",
    "resting_hr": "Resting heart rate is elevated; watch for stress or illness.",
    "sleep": "Sleep was short; consider a nap or an earlier bedtime.",
}


def _hrv_band(hrv: float) -> tuple[str, str]:
    if hrv >= constants.HRV_GOOD_MIN_MS:
        return "good", "optimal"
    if hrv >= constants.HRV_MODERATE_MIN_MS:
        return "moderate", "borderline"
    return "low", "poor"


def _resting_hr_band(resting_hr: float) -> tuple[str, str]:
    if resting_hr <= constants.RESTING_HR_GOOD_MAX_BPM:
        return "good", "optimal"
    if resting_hr <= constants.RESTING_HR_ELEVATED_MAX_BPM:
        return "elevated", "borderline"
    return "high", "poor"


def _sleep_band(sleep_hours: float) -> tuple[str, str]:
    if sleep_hours >= constants.SLEEP_ADEQUATE_MIN_HOURS:
        return "adequate", "optimal"
    if sleep_hours >= constants.SLEEP_SHORT_MIN_HOURS:
        return "short", "borderline"
    return "insufficient", "poor"


def _reading(value: float, band: tuple[str, str]) -> FactorReading:
    status, grade = band
    return FactorReading(value=value, status=status, score=BAND_SCORES[grade])


def score_readiness(hrv: float, resting_hr: float, sleep_hours: float) -> ReadinessResult:
    """Score training readiness for a morning's measurements.

    Args:
        hrv: Heart rate variability in ms
        resting_hr: Resting heart rate in bpm
        sleep_hours: Hours slept last night

    Returns:
        ReadinessResult with composite score, level, per-factor status
        and recommendations

    Raises:
        ValidationError: If a measurement is outside its plausible range
    """
    reading = parse_input(
        ReadinessInput, {"hrv": hrv, "resting_hr": resting_hr, "sleep_hours": sleep_hours}
    )
    factors = {
        "hrv": _reading(reading.hrv, _hrv_band(reading.hrv)),
        "resting_hr": _reading(reading.resting_hr, _resting_hr_band(reading.resting_hr)),
        "sleep": _reading(reading.sleep_hours, _sleep_band(reading.sleep_hours)),
    }

    score = round(sum(
        factors[name].score * weight
        for name, weight in constants.READINESS_WEIGHTS.items()
    ))
    level = classify_level(score)

    recommendations = list(RECOMMENDATIONS[level])
    recommendations.extend(
        FACTOR_NOTES[name] for name, factor in factors.items()
        if factor.score < BAND_SCORES["optimal"]
    )

    return ReadinessResult(
        score=score,
        level=level,
        factors=factors,
        recommendations=recommendations,
    )
