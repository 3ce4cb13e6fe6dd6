from __future__ import annotations

import uuid
from pathlib import Path

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from core.config import Settings, settings as default_settings
from core.logging import configure_logging
from domain.errors import AIUnavailableError
from services.llm.openai_analysis import AnalysisConfig, AnalysisRelay
from .schemas import AnalyzeRequest, AnalyzeResponse, ErrorResponse


ANALYSIS_FAILED = "Failed to analyze health data"
INVALID_PAYLOAD = "Invalid analysis payload"


def create_app(settings: Settings | None = None, relay: AnalysisRelay | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)
    log = structlog.get_logger("api")

    relay = relay or AnalysisRelay(AnalysisConfig.from_settings(settings))
    if not relay.configured:
        log.warning("ai_key_missing", detail="Brak klucza OPENROUTER_API_KEY. Analiza AI nie będzie działać.")

    app = FastAPI(title="MetabolicAI API", version="0.1.0")
    app.state.relay = relay

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def trace_requests(request: Request, call_next):
        trace_id = request.headers.get("X-Trace-Id") or uuid.uuid4().hex[:12]
        structlog.contextvars.bind_contextvars(trace_id=trace_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("trace_id")
        response.headers["X-Trace-Id"] = trace_id
        return response

    @app.exception_handler(RequestValidationError)
    async def on_invalid_payload(request: Request, exc: RequestValidationError) -> JSONResponse:
        log.info("invalid_payload", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(status_code=422, content={"error": INVALID_PAYLOAD})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(
        "/api/analyze",
        response_model=AnalyzeResponse,
        responses={500: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    )
    def analyze(payload: AnalyzeRequest):
        try:
            text = app.state.relay.analyze(payload.to_dto())
        except AIUnavailableError as e:
            log.error("analysis_failed", code=e.code, error=str(e))
            return JSONResponse(status_code=500, content={"error": ANALYSIS_FAILED})
        except Exception:
            log.exception("analysis_failed", code="E_UNEXPECTED")
            return JSONResponse(status_code=500, content={"error": ANALYSIS_FAILED})
        return AnalyzeResponse(analysis=text)

    # Built front-end (single-page app) if present
    static_root = Path(settings.static_dir).resolve()
    if static_root.is_dir():

        @app.get("/{full_path:path}", include_in_schema=False)
        def spa(full_path: str) -> FileResponse:
            if full_path.startswith("api/"):
                raise HTTPException(status_code=404, detail="Not Found")
            candidate = (static_root / full_path).resolve()
            if full_path and candidate.is_file() and static_root in candidate.parents:
                return FileResponse(candidate)
            index = static_root / "index.html"
            if not index.is_file():
                raise HTTPException(status_code=404, detail="Not Found")
            return FileResponse(index)

    return app
