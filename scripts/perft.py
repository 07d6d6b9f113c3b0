#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import time
import os
import sys

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo root (which contains `src/`) to sys.path.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from src.engine.board import STARTPOS_PLACEMENT, GameState
from src.engine.perft import divide, perft
from src.engine.piece import Color


def main() -> None:
    parser = argparse.ArgumentParser(description="Run perft on a piece placement and depth")
    parser.add_argument(
        "--placement",
        type=str,
        default=STARTPOS_PLACEMENT,
        help="FEN piece-placement field (default: start position)",
    )
    parser.add_argument("--side", choices=("w", "b"), default="w", help="Side to move")
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument("--divide", action="store_true", help="Print per-move node counts")
    parser.add_argument(
        "--loose-castling",
        action="store_true",
        help="Allow castling out of or through check (destination still checked)",
    )
    args = parser.parse_args()

    state = GameState.from_placement(args.placement, Color(args.side))
    strict = not args.loose_castling
    start = time.perf_counter()
    if args.divide:
        counts = divide(state, args.depth, strict_castling=strict)
        for move, n in sorted(counts.items()):
            print(f"{move}: {n}")
        nodes = sum(counts.values())
    else:
        nodes = perft(state, args.depth, strict_castling=strict)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
