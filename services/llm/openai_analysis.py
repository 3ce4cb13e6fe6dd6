from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

import structlog
from openai import OpenAI

from core.config import Settings
from domain.dtos import AnalysisRequestDTO
from domain.errors import AIUnavailableError


log = structlog.get_logger(__name__)


ANALYSIS_PROMPT_TEMPLATE = """Jesteś ekspertem ds. zdrowia metabolicznego i dietetyki. 
    Przeanalizuj poniższe dane użytkownika i podaj:
    1. AI-Score (ocena zdrowia metabolicznego 1-100).
    2. Krótkie podsumowanie obecnego stanu.
    3. Konkretne, spersonalizowane rekomendacje dotyczące:
       - Żywienia (ile białka, tłuszczu, węglowodanów)
       - Aktywności fizycznej (jaki rodzaj treningu)
       - Stylu życia

    Dane użytkownika:
    - Płeć: {gender_label}
    - Wiek: {age} lat
    - Waga: {weight} kg
    - Wzrost: {height} cm
    - BMI: {bmi}
    - BMR: {bmr} kcal
    - TDEE: {tdee} kcal
    - Poziom aktywności (mnożnik): {activity}

    Odpowiedz w języku polskim, używając profesjonalnego, ale przystępnego tonu."""


def _fmt(value: Any) -> str:
    # 70.0 -> "70", as a JSON number would print
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_analysis_prompt(req: AnalysisRequestDTO) -> str:
    return ANALYSIS_PROMPT_TEMPLATE.format(
        gender_label="Mężczyzna" if req.gender == "male" else "Kobieta",
        age=_fmt(req.age),
        weight=_fmt(req.weight),
        height=_fmt(req.height),
        bmi=_fmt(req.bmi),
        bmr=_fmt(req.bmr),
        tdee=_fmt(req.tdee),
        activity=_fmt(req.activity),
    )


@dataclass(frozen=True)
class AnalysisConfig:
    api_key: str | None
    model: str
    base_url: str
    referer: str | None = None
    title: str | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnalysisConfig":
        return cls(
            api_key=settings.openrouter_api_key,
            model=settings.openrouter_model,
            base_url=settings.openrouter_base_url,
            referer=settings.openrouter_referer,
            title=settings.openrouter_title,
        )

    def default_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        if self.title:
            headers["X-Title"] = self.title
        return headers


def _make_openai_client(config: AnalysisConfig) -> Any:
    return OpenAI(
        api_key=config.api_key,
        base_url=config.base_url,
        default_headers=config.default_headers(),
    )


class AnalysisRelay:
    """Renders the analysis prompt and forwards it to a chat-completion API."""

    def __init__(
        self,
        config: AnalysisConfig,
        client_factory: Callable[[AnalysisConfig], Any] = _make_openai_client,
    ) -> None:
        self.config = config
        self._client_factory = client_factory
        self._client: Any = None

    @property
    def configured(self) -> bool:
        return bool(self.config.api_key)

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory(self.config)
        return self._client

    def analyze(self, req: AnalysisRequestDTO) -> str:
        if not self.configured:
            raise AIUnavailableError("OPENROUTER_API_KEY is not configured")
        prompt = build_analysis_prompt(req)
        try:
            resp = self._get_client().chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise AIUnavailableError(f"completion request failed: {e}") from e
        choices = getattr(resp, "choices", None) or []
        if not choices:
            raise AIUnavailableError("completion response has no choices")
        content = getattr(getattr(choices[0], "message", None), "content", None)
        if not isinstance(content, str):
            raise AIUnavailableError("completion response has no text content")
        usage = getattr(resp, "usage", None)
        log.info(
            "analysis_completed",
            model=self.config.model,
            prompt_tokens=getattr(usage, "prompt_tokens", None),
            completion_tokens=getattr(usage, "completion_tokens", None),
        )
        return content
