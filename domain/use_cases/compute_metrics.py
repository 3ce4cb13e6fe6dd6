from __future__ import annotations

from domain.calculations import categorize, compute_bmi, compute_bmr, compute_tdee
from domain.entities import DerivedMetrics, ProfileInput


def compute_metrics(profile: ProfileInput) -> DerivedMetrics:
    bmi = compute_bmi(profile.weight, profile.height)
    bmr = compute_bmr(profile.weight, profile.height, profile.age, profile.gender)
    # TDEE scales the already rounded BMR
    tdee = compute_tdee(bmr, profile.activity)
    return DerivedMetrics(bmi=bmi, bmr=bmr, tdee=tdee, category=categorize(bmi))
