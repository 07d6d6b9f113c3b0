from __future__ import annotations

import argparse
import os
from typing import List, Optional

import uvicorn

from ..protocol.http.app import create_app


LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in ("0", "false", "no", "off", "")


def build_parser() -> argparse.ArgumentParser:
    # String defaults from the environment go through `type`, so a bad
    # CHESS_PORT is reported by argparse like a bad --port
    parser = argparse.ArgumentParser(description="Serve the chess rules API over HTTP")
    parser.add_argument("--host", default=os.environ.get("CHESS_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=os.environ.get("CHESS_PORT", "8000"))
    parser.add_argument(
        "--log-level",
        type=str.lower,
        default=os.environ.get("CHESS_LOG_LEVEL", "info"),
        choices=LOG_LEVELS,
    )
    castling = parser.add_mutually_exclusive_group()
    castling.add_argument(
        "--strict-castling",
        dest="strict_castling",
        action="store_true",
        help="Reject castling out of or through check (default)",
    )
    castling.add_argument(
        "--loose-castling",
        dest="strict_castling",
        action="store_false",
        help="Only reject castling that ends in check",
    )
    parser.set_defaults(strict_castling=_env_flag("CHESS_STRICT_CASTLING", True))
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse `argv`, also validating settings that came from the environment."""
    parser = build_parser()
    args = parser.parse_args(argv)
    # argparse skips `choices` for defaults
    if args.log_level not in LOG_LEVELS:
        parser.error(
            f"invalid log level {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})"
        )
    return args


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    app = create_app(strict_castling=args.strict_castling, log_level=args.log_level.upper())
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
