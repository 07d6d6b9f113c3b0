from __future__ import annotations

from typing import Optional

from .board import ROOK_HOME, GameState
from .move import to_internal, to_square
from .piece import PROMOTION_TYPES, Piece, PieceType


def apply_move(
    state: GameState, from_sq: str, to_sq: str, promotion: Optional[PieceType] = None
) -> None:
    """Apply a move to ``state`` in place without validating it.

    Handles en passant, castling rook relocation, castling flags, captures,
    promotion (Queen when ``promotion`` is missing or unsupported) and the
    en-passant target. The side to move is left unchanged; see
    :func:`make_move`.

    Raises:
        ValueError: If ``from_sq`` is empty.
    """
    piece = state.piece_at(from_sq)
    if piece is None:
        raise ValueError(f"no piece to move from {from_sq}")
    color = piece.color
    fr, fc = to_internal(from_sq)
    tr, tc = to_internal(to_sq)
    flags = state.castling

    # En passant: pawn moving diagonally onto an empty square
    if piece.piece_type is PieceType.PAWN and fc != tc and state.piece_at(to_sq) is None:
        cap_sq = to_square(fr, tc)
        cap = state.piece_at(cap_sq)
        if cap is not None:
            state.captured.append(cap)
            state.set_piece(cap_sq, None)

    # King moves (including castling rook relocation)
    if piece.piece_type is PieceType.KING:
        flags = flags.with_king_moved(color)
        if abs(tc - fc) == 2:
            wing = "h" if tc > fc else "a"
            rook_from = ROOK_HOME[(color, wing)]
            rook_to = to_square(fr, (fc + tc) // 2)  # f-file or d-file
            state.set_piece(rook_to, state.piece_at(rook_from))
            state.set_piece(rook_from, None)
            flags = flags.with_rook_moved(color, wing)

    # Rook leaving its home corner
    if piece.piece_type is PieceType.ROOK:
        for wing in ("a", "h"):
            if from_sq == ROOK_HOME[(color, wing)]:
                flags = flags.with_rook_moved(color, wing)

    # Ordinary capture; a rook taken on its corner loses that wing for its side
    target = state.piece_at(to_sq)
    if target is not None:
        state.captured.append(target)
        if target.piece_type is PieceType.ROOK:
            for wing in ("a", "h"):
                if to_sq == ROOK_HOME[(target.color, wing)]:
                    flags = flags.with_rook_moved(target.color, wing)
    state.castling = flags

    state.set_piece(to_sq, piece)
    state.set_piece(from_sq, None)

    if piece.piece_type is PieceType.PAWN and tr == color.last_row:
        ptype = promotion if promotion in PROMOTION_TYPES else PieceType.QUEEN
        state.set_piece(to_sq, Piece(ptype, color))

    # En-passant target lives for exactly one reply
    state.en_passant = None
    if piece.piece_type is PieceType.PAWN and abs(tr - fr) == 2:
        state.en_passant = to_square((fr + tr) // 2, fc)


def make_move(
    state: GameState, from_sq: str, to_sq: str, promotion: Optional[PieceType] = None
) -> None:
    """Apply a move and hand the turn to the opponent."""
    apply_move(state, from_sq, to_sq, promotion)
    state.side_to_move = state.side_to_move.opponent
