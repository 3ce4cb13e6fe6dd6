from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext

from domain.entities import BMICategory


ACTIVITY_LEVELS = {
    1.2: "sedentary",
    1.375: "light",
    1.55: "moderate",
    1.725: "active",
    1.9: "very_active",
}


def round_half_away(value: float, digits: int = 0) -> float:
    """Fixed-point rounding with ties away from zero.

    Works on the exact binary value of ``value`` (like ``Number.toFixed``),
    so 2301.75 -> 2302 but 1.005 stays 1.00 at two digits. Non-finite values
    and magnitudes of 1e21 or more are returned unchanged.
    """
    if not math.isfinite(value) or abs(value) >= 1e21:
        return value
    quantum = Decimal(1).scaleb(-digits)
    with localcontext() as ctx:
        ctx.prec = 64
        return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def _whole(value: float) -> int:
    # inf and nan have no int form; pass them through
    return int(value) if math.isfinite(value) else value  # type: ignore[return-value]


def compute_bmi(weight: float, height: float) -> float:
    if height <= 0:
        return 0.0
    height_m = height / 100
    return round_half_away(weight / (height_m * height_m), 1)


def compute_bmr(weight: float, height: float, age: int, gender: str) -> int:
    # Mifflin-St Jeor
    if gender == "male":
        return _whole(round_half_away(10 * weight + 6.25 * height - 5 * age + 5))
    return _whole(round_half_away(10 * weight + 6.25 * height - 5 * age - 161))


def compute_tdee(bmr: float, activity: float) -> int:
    return _whole(round_half_away(bmr * activity))


def categorize(bmi: float) -> BMICategory:
    if bmi < 18.5:
        return "Niedowaga"
    if bmi < 25:
        return "Norma"
    if bmi < 30:
        return "Nadwaga"
    return "Otyłość"
