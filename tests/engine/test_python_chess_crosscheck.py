from __future__ import annotations

import random
from collections import defaultdict

import chess

from src.engine.game import Game, GameStatus


def _reference_moves(board: chess.Board) -> dict[str, set[str]]:
    out: dict[str, set[str]] = defaultdict(set)
    for mv in board.legal_moves:
        # Promotions collapse to one destination
        out[chess.square_name(mv.from_square)].add(chess.square_name(mv.to_square))
    return out


def _our_moves(game: Game) -> dict[str, set[str]]:
    out: dict[str, set[str]] = defaultdict(set)
    for from_sq, to_sq in game.all_legal_moves():
        out[from_sq].add(to_sq)
    return out


def test_legal_moves_match_python_chess_over_random_games() -> None:
    rng = random.Random(7)
    for _ in range(6):
        game = Game.new()
        ref = chess.Board()
        for _ply in range(120):
            ours = _our_moves(game)
            assert ours == _reference_moves(ref), ref.fen()
            if not ours:
                expected = GameStatus.CHECKMATE if ref.is_check() else GameStatus.STALEMATE
                assert game.status() is expected
                break

            from_sq = rng.choice(sorted(ours))
            to_sq = rng.choice(sorted(ours[from_sq]))
            assert game.attempt_move(from_sq, to_sq).applied
            piece = ref.piece_at(chess.parse_square(from_sq))
            promo = (
                chess.QUEEN
                if piece is not None
                and piece.piece_type == chess.PAWN
                and to_sq[1] in ("1", "8")
                else None
            )
            ref.push(chess.Move(chess.parse_square(from_sq), chess.parse_square(to_sq), promo))
            assert game.state.placement() == ref.board_fen()
