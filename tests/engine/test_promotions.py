from __future__ import annotations

from src.engine.game import Game
from src.engine.piece import Color, Piece, PieceType


def test_white_pawn_promotes_to_queen_by_default() -> None:
    game = Game.from_placement("k7/4P3/8/8/8/8/8/4K3")
    result = game.attempt_move("e7", "e8")
    assert result.applied
    assert game.state.piece_at("e8") == Piece(PieceType.QUEEN, Color.WHITE)
    assert game.state.piece_at("e7") is None


def test_resolver_choice_is_used() -> None:
    calls = []

    def resolver(from_sq: str, to_sq: str, color: Color) -> PieceType:
        calls.append((from_sq, to_sq, color))
        return PieceType.KNIGHT

    game = Game.from_placement("3rk3/4P3/8/8/8/8/8/4K3")
    assert game.attempt_move("e7", "d8", resolver).applied
    assert calls == [("e7", "d8", Color.WHITE)]
    assert game.state.piece_at("d8") == Piece(PieceType.KNIGHT, Color.WHITE)
    assert game.captures() == [Piece(PieceType.ROOK, Color.BLACK)]
    assert game.move_history_uci() == ["e7d8n"]


def test_black_promotion_and_unsupported_choice_defaults_to_queen() -> None:
    game = Game.from_placement("4k3/8/8/8/8/8/3p4/K7", Color.BLACK)
    assert game.attempt_move("d2", "d1", lambda *_: PieceType.KING).applied
    assert game.state.piece_at("d1") == Piece(PieceType.QUEEN, Color.BLACK)


def test_resolver_returning_none_defaults_to_queen() -> None:
    game = Game.from_placement("k7/4P3/8/8/8/8/8/4K3")
    assert game.attempt_move("e7", "e8", lambda *_: None).applied
    assert game.state.piece_at("e8") == Piece(PieceType.QUEEN, Color.WHITE)


def test_resolver_not_called_for_ordinary_or_illegal_moves() -> None:
    def resolver(*_args):
        raise AssertionError("resolver should not be consulted")

    game = Game.new()
    assert game.attempt_move("e2", "e4", resolver).applied
    # Blocked pawn on the seventh rank: illegal, so no promotion prompt
    blocked = Game.from_placement("4n2k/4P3/8/8/8/8/8/4K3")
    assert not blocked.attempt_move("e7", "e8", resolver).applied


def test_undo_promotion_restores_pawn() -> None:
    game = Game.from_placement("k7/4P3/8/8/8/8/8/4K3")
    game.attempt_move("e7", "e8", lambda *_: PieceType.ROOK)
    assert game.undo()
    assert game.state.piece_at("e7") == Piece(PieceType.PAWN, Color.WHITE)
    assert game.state.piece_at("e8") is None


def test_is_promotion_only_for_pawns_reaching_last_rank() -> None:
    game = Game.from_placement("k7/4P3/8/8/8/8/3p4/4K2R")
    assert game.is_promotion("e7", "e8")
    assert game.is_promotion("d2", "d1")
    assert not game.is_promotion("h1", "h8")
    assert not game.is_promotion("a3", "a4")
    assert not Game.new().is_promotion("e2", "e4")
