from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock


def make_completion(content: Any) -> MagicMock:
    """Chat-completion response shaped like the openai SDK object."""
    resp = MagicMock()
    resp.choices = [MagicMock(message=MagicMock(content=content))]
    resp.usage = MagicMock(prompt_tokens=250, completion_tokens=400)
    return resp
