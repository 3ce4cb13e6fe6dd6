from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from domain.dtos import AnalysisRequestDTO


class AnalyzeRequest(BaseModel):
    weight: float = Field(..., examples=[70])
    height: float = Field(..., examples=[175])
    age: int = Field(..., examples=[30])
    gender: Literal["male", "female"] = Field(..., examples=["male"])
    activity: float = Field(..., examples=[1.375])
    bmi: float = Field(..., examples=[22.9])
    bmr: int = Field(..., examples=[1649])
    tdee: int = Field(..., examples=[2267])

    def to_dto(self) -> AnalysisRequestDTO:
        return AnalysisRequestDTO(**self.model_dump())


class AnalyzeResponse(BaseModel):
    analysis: str


class ErrorResponse(BaseModel):
    error: str
