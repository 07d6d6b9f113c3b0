from __future__ import annotations

import pytest

from src.engine.board import GameState
from src.engine.perft import divide, perft


# Kiwipete (castling, en passant and pins; no promotions within two plies)
KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R"


def test_perft_depth0_is_one() -> None:
    assert perft(GameState.initial(), 0) == 1


def test_perft_negative_depth_raises() -> None:
    with pytest.raises(ValueError):
        perft(GameState.initial(), -1)


@pytest.mark.parametrize(("depth", "expected"), [(1, 20), (2, 400), (3, 8902)])
def test_perft_startpos(depth: int, expected: int) -> None:
    s = GameState.initial()
    assert perft(s, depth) == expected
    # Counting leaves the position untouched
    assert s == GameState.initial()


@pytest.mark.parametrize(("depth", "expected"), [(1, 48), (2, 2039)])
def test_perft_kiwipete(depth: int, expected: int) -> None:
    assert perft(GameState.from_placement(KIWIPETE), depth) == expected


def test_divide_sums_to_perft() -> None:
    s = GameState.initial()
    counts = divide(s, 2)
    assert len(counts) == 20
    assert all(n == 20 for n in counts.values())
    assert sum(counts.values()) == perft(s, 2)
