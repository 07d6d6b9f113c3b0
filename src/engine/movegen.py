from __future__ import annotations

from typing import List, Tuple

from .attacks import DIAGONALS, KING_OFFSETS, KNIGHT_OFFSETS, ORTHOGONALS, in_check, is_attacked
from .board import KING_HOME, ROOK_HOME, GameState
from .make import apply_move
from .move import in_bounds, to_internal, to_square
from .piece import Color, Piece, PieceType


SLIDER_DIRECTIONS = {
    PieceType.BISHOP: DIAGONALS,
    PieceType.ROOK: ORTHOGONALS,
    PieceType.QUEEN: DIAGONALS + ORTHOGONALS,
}


def pseudo_moves(state: GameState, from_sq: str) -> List[str]:
    """Return destination squares for the piece on ``from_sq``, ignoring self-check.

    Blocking, captures, en passant and castling preconditions (flags, empty
    squares between king and rook) are honoured; attacked squares are not.
    Whose turn it is is not checked here.

    Args:
        from_sq (str): Origin square.

    Returns:
        List[str]: Destination squares; empty when ``from_sq`` is empty.
    """
    piece = state.piece_at(from_sq)
    if piece is None:
        return []
    r, c = to_internal(from_sq)
    if piece.piece_type is PieceType.PAWN:
        return _pawn_moves(state, piece.color, r, c)
    if piece.piece_type is PieceType.KNIGHT:
        return _step_moves(state, piece.color, r, c, KNIGHT_OFFSETS)
    if piece.piece_type is PieceType.KING:
        moves = _step_moves(state, piece.color, r, c, KING_OFFSETS)
        moves.extend(_castling_moves(state, piece.color, from_sq))
        return moves
    return _slide_moves(state, piece.color, r, c, SLIDER_DIRECTIONS[piece.piece_type])


def _pawn_moves(state: GameState, color: Color, r: int, c: int) -> List[str]:
    grid = state.grid
    d = color.forward
    moves: List[str] = []

    # Pushes
    if in_bounds(r + d, c) and grid[r + d][c] is None:
        moves.append(to_square(r + d, c))
        if r == color.pawn_row and grid[r + 2 * d][c] is None:
            moves.append(to_square(r + 2 * d, c))

    # Captures, including onto the en-passant target on the opponent's third row
    ep_row = color.opponent.pawn_row + color.opponent.forward
    for dc in (-1, 1):
        rr, cc = r + d, c + dc
        if not in_bounds(rr, cc):
            continue
        target = grid[rr][cc]
        if target is not None:
            if target.color is not color:
                moves.append(to_square(rr, cc))
        elif rr == ep_row and state.en_passant == to_square(rr, cc):
            moves.append(to_square(rr, cc))
    return moves


def _step_moves(state: GameState, color: Color, r: int, c: int, offsets) -> List[str]:
    moves: List[str] = []
    for dr, dc in offsets:
        tr, tc = r + dr, c + dc
        if in_bounds(tr, tc):
            target = state.grid[tr][tc]
            if target is None or target.color is not color:
                moves.append(to_square(tr, tc))
    return moves


def _slide_moves(state: GameState, color: Color, r: int, c: int, directions) -> List[str]:
    moves: List[str] = []
    for dr, dc in directions:
        tr, tc = r + dr, c + dc
        while in_bounds(tr, tc):
            target = state.grid[tr][tc]
            if target is not None and target.color is color:
                break
            moves.append(to_square(tr, tc))
            if target is not None:
                break
            tr += dr
            tc += dc
    return moves


def _castling_moves(state: GameState, color: Color, from_sq: str) -> List[str]:
    flags = state.castling
    if flags.king_moved(color) or from_sq != KING_HOME[color]:
        return []
    row = color.home_row
    grid = state.grid
    rook = Piece(PieceType.ROOK, color)
    moves: List[str] = []
    # King side: f and g files empty
    if (
        not flags.rook_moved(color, "h")
        and state.piece_at(ROOK_HOME[(color, "h")]) == rook
        and grid[row][5] is None
        and grid[row][6] is None
    ):
        moves.append(to_square(row, 6))
    # Queen side: b, c and d files empty
    if (
        not flags.rook_moved(color, "a")
        and state.piece_at(ROOK_HOME[(color, "a")]) == rook
        and grid[row][1] is None
        and grid[row][2] is None
        and grid[row][3] is None
    ):
        moves.append(to_square(row, 2))
    return moves


def _is_castle(piece: Piece, from_sq: str, to_sq: str) -> bool:
    if piece.piece_type is not PieceType.KING:
        return False
    return abs(to_internal(to_sq)[1] - to_internal(from_sq)[1]) == 2


def _castle_path_safe(state: GameState, from_sq: str, to_sq: str, color: Color) -> bool:
    """King may not castle out of check or across an attacked square."""
    fr, fc = to_internal(from_sq)
    _, tc = to_internal(to_sq)
    transit = to_square(fr, (fc + tc) // 2)
    opponent = color.opponent
    return not is_attacked(state, from_sq, opponent) and not is_attacked(state, transit, opponent)


def legal_moves(state: GameState, from_sq: str, *, strict_castling: bool = True) -> List[str]:
    """Return the destinations from ``from_sq`` that do not leave the mover in check.

    Each pseudo move is applied to the live state, the mover's king is tested
    against the opponent, and the state is restored from a snapshot.

    Args:
        from_sq (str): Origin square.
        strict_castling (bool): Also reject castling out of check or through
            an attacked square. When False only the destination is checked.

    Returns:
        List[str]: Legal destinations; empty if the piece on ``from_sq`` does
            not belong to the side to move.
    """
    piece = state.piece_at(from_sq)
    if piece is None or piece.color is not state.side_to_move:
        return []
    color = piece.color
    legal: List[str] = []
    for to_sq in pseudo_moves(state, from_sq):
        if (
            strict_castling
            and _is_castle(piece, from_sq, to_sq)
            and not _castle_path_safe(state, from_sq, to_sq, color)
        ):
            continue
        snap = state.snapshot()
        try:
            apply_move(state, from_sq, to_sq)
            exposed = in_check(state, color)
        finally:
            state.restore(snap)
        if not exposed:
            legal.append(to_sq)
    return legal


def all_legal_moves(state: GameState, *, strict_castling: bool = True) -> List[Tuple[str, str]]:
    """Return every ``(from, to)`` pair available to the side to move."""
    moves: List[Tuple[str, str]] = []
    for from_sq, _piece in list(state.pieces(state.side_to_move)):
        for to_sq in legal_moves(state, from_sq, strict_castling=strict_castling):
            moves.append((from_sq, to_sq))
    return moves


def has_legal_moves(state: GameState, *, strict_castling: bool = True) -> bool:
    for from_sq, _piece in list(state.pieces(state.side_to_move)):
        if legal_moves(state, from_sq, strict_castling=strict_castling):
            return True
    return False
