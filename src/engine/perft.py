from __future__ import annotations

from typing import Dict

from .board import GameState
from .make import make_move
from .movegen import all_legal_moves


def perft(state: GameState, depth: int, *, strict_castling: bool = True) -> int:
    """Compute perft node count for `state` at `depth`.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Promotions count once per destination (the default Queen), so positions
    with promoting pawns report fewer nodes than the usual reference tables.
    The state is restored from a snapshot after each child.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for from_sq, to_sq in all_legal_moves(state, strict_castling=strict_castling):
        if depth == 1:
            nodes += 1
            continue
        snap = state.snapshot()
        make_move(state, from_sq, to_sq)
        nodes += perft(state, depth - 1, strict_castling=strict_castling)
        state.restore(snap)
    return nodes


def divide(state: GameState, depth: int, *, strict_castling: bool = True) -> Dict[str, int]:
    """Per-root-move perft breakdown, keyed by ``"e2e4"``-style move strings."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    out: Dict[str, int] = {}
    for from_sq, to_sq in all_legal_moves(state, strict_castling=strict_castling):
        snap = state.snapshot()
        make_move(state, from_sq, to_sq)
        out[from_sq + to_sq] = perft(state, depth - 1, strict_castling=strict_castling)
        state.restore(snap)
    return out
