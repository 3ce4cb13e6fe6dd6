from __future__ import annotations

import logging
from typing import Any

import pytest

from core.config import Settings
from core.logging import HANDLER_NAME
from domain.entities import DerivedMetrics, ProfileInput
from infra.storage.history_storage import MemoryHistoryStorage


@pytest.fixture
def test_settings(tmp_path: Any) -> Settings:
    return Settings(
        _env_file=None,
        openrouter_api_key="test-key",
        static_dir=str(tmp_path / "no-dist"),
        history_backend="memory",
        history_dir=str(tmp_path / "data"),
    )


@pytest.fixture
def profile() -> ProfileInput:
    return ProfileInput(weight=70, height=175, age=30, gender="male", activity=1.375)


@pytest.fixture
def metrics() -> DerivedMetrics:
    return DerivedMetrics(bmi=22.9, bmr=1649, tdee=2267, category="Norma")


@pytest.fixture
def memory_storage() -> MemoryHistoryStorage:
    return MemoryHistoryStorage()


@pytest.fixture(autouse=True)
def _detach_log_handler():
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if handler.get_name() == HANDLER_NAME:
            root.removeHandler(handler)
