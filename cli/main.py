from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict

import structlog

from core.config import Settings, settings as default_settings
from core.logging import configure_logging
from domain.calculations import ACTIVITY_LEVELS
from domain.entities import ProfileInput
from domain.errors import AnalysisClientError, StorageUnavailableError
from domain.history import HistoryStore
from domain.use_cases import compute_metrics
from infra.storage.history_storage import make_history_storage
from services.api.analysis_client import AnalysisClient


log = structlog.get_logger(__name__)


def _add_profile_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--weight", type=float, default=70.0, help="kg")
    p.add_argument("--height", type=float, default=175.0, help="cm")
    p.add_argument("--age", type=int, default=30)
    p.add_argument("--gender", choices=["male", "female"], default="male")
    p.add_argument("--activity", type=float, choices=sorted(ACTIVITY_LEVELS), default=1.375)


def _profile_from_args(args: argparse.Namespace) -> ProfileInput:
    return ProfileInput(
        weight=args.weight,
        height=args.height,
        age=args.age,
        gender=args.gender,
        activity=args.activity,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="metabolic-ai", description="BMI / BMR / TDEE calculator with AI analysis")
    sub = parser.add_subparsers(dest="command", required=True)

    p_metrics = sub.add_parser("metrics", help="Compute BMI, BMR and TDEE")
    _add_profile_args(p_metrics)
    p_metrics.add_argument("--save", action="store_true", help="Append the result to history")

    p_history = sub.add_parser("history", help="Show saved results")
    p_history.add_argument("--clear", action="store_true", help="Remove all saved results")

    p_analyze = sub.add_parser("analyze", help="Ask the relay for an AI analysis")
    _add_profile_args(p_analyze)

    p_serve = sub.add_parser("serve", help="Run the HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)
    return parser


def cmd_metrics(args: argparse.Namespace, settings: Settings) -> int:
    profile = _profile_from_args(args)
    metrics = compute_metrics(profile)
    out = asdict(metrics)
    if args.save:
        store = HistoryStore(make_history_storage(settings))
        try:
            out["saved"] = asdict(store.save(metrics, profile.weight))
        except StorageUnavailableError as e:
            print(f"Nie udało się zapisać wyniku: {e}", file=sys.stderr)
            return 1
    print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0


def cmd_history(args: argparse.Namespace, settings: Settings) -> int:
    store = HistoryStore(make_history_storage(settings))
    if args.clear:
        try:
            store.clear()
        except StorageUnavailableError as e:
            print(f"Nie udało się wyczyścić historii: {e}", file=sys.stderr)
            return 1
        print("Historia wyczyszczona.")
        return 0
    # newest first
    print(json.dumps([asdict(e) for e in reversed(store.entries)], ensure_ascii=False, indent=2))
    return 0


def cmd_analyze(args: argparse.Namespace, settings: Settings) -> int:
    profile = _profile_from_args(args)
    metrics = compute_metrics(profile)
    client = AnalysisClient(settings.api_base_url, timeout=settings.api_timeout_seconds)
    try:
        text = client.analyze(profile, metrics)
    except AnalysisClientError as e:
        log.error("analysis_client_failed", error=str(e))
        print(e.user_message, file=sys.stderr)
        return 1
    print(text)
    return 0


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    import uvicorn

    from infra.api.app import create_app

    uvicorn.run(create_app(settings), host=args.host or settings.host, port=args.port or settings.port)
    return 0


COMMANDS = {
    "metrics": cmd_metrics,
    "history": cmd_history,
    "analyze": cmd_analyze,
    "serve": cmd_serve,
}


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    settings = settings or default_settings
    configure_logging(settings.log_level, stream=sys.stderr)
    args = build_parser().parse_args(argv)
    return COMMANDS[args.command](args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
