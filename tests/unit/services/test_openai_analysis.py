"""Unit tests for the analysis relay.

The chat-completion client is replaced by a MagicMock; no network calls.
"""

from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from domain.dtos import AnalysisRequestDTO
from domain.errors import AIUnavailableError
from services.llm.openai_analysis import (
    AnalysisConfig,
    AnalysisRelay,
    build_analysis_prompt,
)
from tests.helpers import make_completion


@pytest.fixture
def request_dto() -> AnalysisRequestDTO:
    return AnalysisRequestDTO(
        weight=70.0, height=175.0, age=30, gender="male", activity=1.375, bmi=22.9, bmr=1649, tdee=2267
    )


@pytest.fixture
def config() -> AnalysisConfig:
    return AnalysisConfig(
        api_key="test-key",
        model="qwen/qwen3-4b:free",
        base_url="https://openrouter.ai/api/v1",
        referer="https://replit.com",
        title="MetabolicAI",
    )


def _relay(config: AnalysisConfig, client: Any) -> AnalysisRelay:
    return AnalysisRelay(config, client_factory=lambda _cfg: client)


class TestPrompt:
    def test_embeds_all_values(self, request_dto):
        prompt = build_analysis_prompt(request_dto)
        for line in (
            "- Płeć: Mężczyzna",
            "- Wiek: 30 lat",
            "- Waga: 70 kg",
            "- Wzrost: 175 cm",
            "- BMI: 22.9",
            "- BMR: 1649 kcal",
            "- TDEE: 2267 kcal",
            "- Poziom aktywności (mnożnik): 1.375",
        ):
            assert line in prompt

    def test_female_label(self, request_dto):
        request_dto.gender = "female"
        assert "- Płeć: Kobieta" in build_analysis_prompt(request_dto)

    def test_polish_instructions(self, request_dto):
        prompt = build_analysis_prompt(request_dto)
        assert prompt.startswith("Jesteś ekspertem ds. zdrowia metabolicznego i dietetyki.")
        assert "AI-Score" in prompt
        assert prompt.endswith("Odpowiedz w języku polskim, używając profesjonalnego, ale przystępnego tonu.")


class TestAnalysisRelay:
    def test_returns_first_choice_verbatim(self, config, request_dto):
        client = MagicMock()
        client.chat.completions.create.return_value = make_completion("  **AI-Score: 82**\n")

        assert _relay(config, client).analyze(request_dto) == "  **AI-Score: 82**\n"

    def test_single_turn_request(self, config, request_dto):
        client = MagicMock()
        client.chat.completions.create.return_value = make_completion("ok")

        _relay(config, client).analyze(request_dto)

        client.chat.completions.create.assert_called_once()
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "qwen/qwen3-4b:free"
        assert kwargs["messages"] == [{"role": "user", "content": build_analysis_prompt(request_dto)}]

    def test_missing_key_raises_without_calling(self, config, request_dto):
        factory = MagicMock()
        relay = AnalysisRelay(
            AnalysisConfig(api_key=None, model=config.model, base_url=config.base_url), client_factory=factory
        )

        assert relay.configured is False
        with pytest.raises(AIUnavailableError):
            relay.analyze(request_dto)
        factory.assert_not_called()

    def test_upstream_error_wrapped(self, config, request_dto):
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("connection reset")

        with pytest.raises(AIUnavailableError) as exc:
            _relay(config, client).analyze(request_dto)
        assert exc.value.code == "E_AI_UNAVAILABLE"

    def test_no_retry(self, config, request_dto):
        client = MagicMock()
        client.chat.completions.create.side_effect = RuntimeError("boom")

        with pytest.raises(AIUnavailableError):
            _relay(config, client).analyze(request_dto)
        assert client.chat.completions.create.call_count == 1

    @pytest.mark.parametrize("choices", [[], None])
    def test_empty_choices_raise(self, config, request_dto, choices):
        client = MagicMock()
        resp = make_completion("x")
        resp.choices = choices
        client.chat.completions.create.return_value = resp

        with pytest.raises(AIUnavailableError):
            _relay(config, client).analyze(request_dto)

    def test_missing_content_raises(self, config, request_dto):
        client = MagicMock()
        client.chat.completions.create.return_value = make_completion(None)

        with pytest.raises(AIUnavailableError):
            _relay(config, client).analyze(request_dto)

    def test_default_client_uses_configured_endpoint(self, config):
        with patch("services.llm.openai_analysis.OpenAI") as openai_cls:
            AnalysisRelay(config)._get_client()

        openai_cls.assert_called_once_with(
            api_key="test-key",
            base_url="https://openrouter.ai/api/v1",
            default_headers={"HTTP-Referer": "https://replit.com", "X-Title": "MetabolicAI"},
        )
