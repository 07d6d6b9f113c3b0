from __future__ import annotations

from typing import Optional

from .board import GameState
from .move import in_bounds, to_internal
from .piece import Color, PieceType


KNIGHT_OFFSETS = ((-2, -1), (-2, 1), (-1, -2), (-1, 2), (1, -2), (1, 2), (2, -1), (2, 1))
KING_OFFSETS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1))
ORTHOGONALS = ((-1, 0), (1, 0), (0, -1), (0, 1))
DIAGONALS = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def find_king(state: GameState, color: Color) -> Optional[str]:
    """Return the square of ``color``'s king, or ``None`` if it has none."""
    for square, piece in state.pieces(color):
        if piece.piece_type is PieceType.KING:
            return square
    return None


def is_attacked(state: GameState, square: str, by_color: Color) -> bool:
    """Return True if a piece of ``by_color`` attacks ``square`` on the current grid.

    Works outward from ``square`` rather than generating the attacker's moves:
    pawn capture origins, knight offsets, orthogonal and diagonal rays (first
    blocker only), and adjacent king squares.
    """
    r, c = to_internal(square)
    grid = state.grid

    def holds(row: int, col: int, *types: PieceType) -> bool:
        piece = grid[row][col]
        return piece is not None and piece.color is by_color and piece.piece_type in types

    # Pawn attacks: an attacking pawn sits one row behind the square from its own side
    pr = r - by_color.forward
    for dc in (-1, 1):
        if in_bounds(pr, c + dc) and holds(pr, c + dc, PieceType.PAWN):
            return True

    # Knight attacks
    for dr, dc in KNIGHT_OFFSETS:
        if in_bounds(r + dr, c + dc) and holds(r + dr, c + dc, PieceType.KNIGHT):
            return True

    # Slider attacks: first occupied square on each ray decides
    for dirs, types in (
        (ORTHOGONALS, (PieceType.ROOK, PieceType.QUEEN)),
        (DIAGONALS, (PieceType.BISHOP, PieceType.QUEEN)),
    ):
        for dr, dc in dirs:
            tr, tc = r + dr, c + dc
            while in_bounds(tr, tc):
                if grid[tr][tc] is not None:
                    if holds(tr, tc, *types):
                        return True
                    break
                tr += dr
                tc += dc

    # King attacks
    for dr, dc in KING_OFFSETS:
        if in_bounds(r + dr, c + dc) and holds(r + dr, c + dc, PieceType.KING):
            return True

    return False


def in_check(state: GameState, color: Color) -> bool:
    """Return True if ``color``'s king is attacked; a missing king is never in check."""
    king_sq = find_king(state, color)
    if king_sq is None:
        return False
    return is_attacked(state, king_sq, color.opponent)
