from __future__ import annotations

from dataclasses import asdict
from typing import Any

import httpx
import structlog

from domain.dtos import AnalysisRequestDTO
from domain.entities import DerivedMetrics, ProfileInput
from domain.errors import AnalysisClientError


log = structlog.get_logger(__name__)


class AnalysisClient:
    """Calls the analysis relay the way the web front end does."""

    def __init__(self, base_url: str, timeout: float | None = 60.0, transport: httpx.BaseTransport | None = None) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport

    def analyze(self, profile: ProfileInput, metrics: DerivedMetrics) -> str:
        payload = asdict(AnalysisRequestDTO.from_parts(profile, metrics))
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        try:
            with httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self._transport) as client:
                resp = client.post("/api/analyze", json=payload, headers=headers)
        except httpx.HTTPError as e:
            log.error("analysis_request_failed", error=str(e))
            raise AnalysisClientError(f"request failed: {e}") from e

        content_type = resp.headers.get("content-type") or ""
        if "application/json" not in content_type:
            log.error("analysis_bad_content_type", status=resp.status_code, content_type=content_type)
            raise AnalysisClientError("Błąd formatu danych serwera.")

        try:
            body: Any = resp.json()
        except ValueError as e:
            raise AnalysisClientError("Błąd formatu danych serwera.") from e

        if resp.status_code >= 400:
            error = body.get("error") if isinstance(body, dict) else None
            log.error("analysis_rejected", status=resp.status_code, error=error)
            raise AnalysisClientError(error or f"HTTP {resp.status_code}")

        analysis = body.get("analysis") if isinstance(body, dict) else None
        if not isinstance(analysis, str):
            raise AnalysisClientError("response has no analysis text")
        return analysis
