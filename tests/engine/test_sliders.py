from __future__ import annotations

from src.engine.board import GameState
from src.engine.movegen import legal_moves, pseudo_moves
from src.engine.piece import Color


def test_rook_basic_moves() -> None:
    # White: rook a1, king e1; Black: king e8. Open a-file and rank 1 up to the king.
    s = GameState.from_placement("4k3/8/8/8/8/8/8/R3K3")
    ms = set(legal_moves(s, "a1"))
    assert {"a2", "a8", "b1", "d1"}.issubset(ms)
    assert "e1" not in ms  # own king blocks


def test_bishop_basic_moves() -> None:
    s = GameState.from_placement("4k3/8/8/8/8/8/8/2B1K3")
    assert set(legal_moves(s, "c1")) == {"b2", "a3", "d2", "e3", "f4", "g5", "h6"}


def test_queen_basic_moves() -> None:
    s = GameState.from_placement("4k3/8/8/8/8/8/8/3QK3")
    ms = set(legal_moves(s, "d1"))
    assert {"d2", "d8", "c1", "a1", "c2", "h5"}.issubset(ms)
    assert len(ms) == 17


def test_slider_stops_on_enemy_piece() -> None:
    # Black knight on a5 blocks the a-file; it can be captured but not jumped
    s = GameState.from_placement("4k3/8/8/n7/8/8/8/R3K3")
    ms = set(pseudo_moves(s, "a1"))
    assert "a5" in ms
    assert "a6" not in ms


def test_knight_moves_skip_own_pieces() -> None:
    s = GameState.initial()
    assert set(pseudo_moves(s, "g1")) == {"f3", "h3"}
    assert set(pseudo_moves(s, "b8")) == {"a6", "c6"}


def test_pinned_rook_move_filtered() -> None:
    # Black rook e8 pins the white rook on e2 against the king on e1
    s = GameState.from_placement("4r3/8/8/8/8/8/4R3/4K3")
    ms = set(legal_moves(s, "e2"))
    assert "d2" not in ms and "f2" not in ms
    # Moving along the e-file keeps the pin blocked; capturing the pinner is fine
    assert {"e3", "e8"}.issubset(ms)


def test_legal_moves_empty_for_side_not_to_move() -> None:
    s = GameState.initial()
    assert legal_moves(s, "e7") == []
    s.side_to_move = Color.BLACK
    assert set(legal_moves(s, "e7")) == {"e6", "e5"}


def test_empty_square_has_no_moves() -> None:
    s = GameState.initial()
    assert pseudo_moves(s, "e4") == []
    assert legal_moves(s, "e4") == []
