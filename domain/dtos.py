from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from domain.entities import DerivedMetrics, ProfileInput


@dataclass
class AnalysisRequestDTO:
    weight: float
    height: float
    age: int
    gender: Literal["male", "female"]
    activity: float
    bmi: float
    bmr: int
    tdee: int

    @classmethod
    def from_parts(cls, profile: ProfileInput, metrics: DerivedMetrics) -> "AnalysisRequestDTO":
        return cls(
            weight=profile.weight,
            height=profile.height,
            age=profile.age,
            gender=profile.gender,
            activity=profile.activity,
            bmi=metrics.bmi,
            bmr=metrics.bmr,
            tdee=metrics.tdee,
        )
