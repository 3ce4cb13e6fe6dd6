from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


Gender = Literal["male", "female"]
BMICategory = Literal["Niedowaga", "Norma", "Nadwaga", "Otyłość"]


@dataclass(frozen=True)
class ProfileInput:
    weight: float  # kg
    height: float  # cm
    age: int
    gender: Gender
    activity: float  # one of ACTIVITY_LEVELS


@dataclass(frozen=True)
class DerivedMetrics:
    bmi: float
    bmr: int
    tdee: int
    category: BMICategory


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    date: str  # DD.MM
    bmi: float
    bmr: int
    tdee: int
    weight: float
