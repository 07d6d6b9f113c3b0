from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


PROMOTION_PIECES = {"q", "r", "b", "n"}

FILES = "abcdefgh"


class InvalidSquare(ValueError):
    """Raised when a square identifier or grid index is out of range."""


def to_internal(square: str) -> Tuple[int, int]:
    """Convert algebraic notation into ``(row, col)`` grid indices.

    Row 0 is rank 8 and row 7 is rank 1; column 0 is file ``a``.

    Args:
        square (str): Square name such as ``"e4"``.

    Returns:
        Tuple[int, int]: Grid indices for ``square``.

    Raises:
        InvalidSquare: If ``square`` is not one of the 64 board squares.
    """
    if (
        not isinstance(square, str)
        or len(square) != 2
        or square[0] not in FILES
        or square[1] < "1"
        or square[1] > "8"
    ):
        raise InvalidSquare(f"invalid square: {square!r}")
    return 8 - int(square[1]), FILES.index(square[0])


def to_square(row: int, col: int) -> str:
    """Convert grid indices back into algebraic notation.

    Args:
        row (int): Row index in range 0..7 (0 = rank 8).
        col (int): Column index in range 0..7 (0 = file a).

    Returns:
        str: Algebraic notation for the square.

    Raises:
        InvalidSquare: If either index is outside the board.
    """
    if not (0 <= row < 8 and 0 <= col < 8):
        raise InvalidSquare(f"invalid grid index: ({row}, {col})")
    return FILES[col] + str(8 - row)


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < 8 and 0 <= col < 8


# Row-major from the top-left corner: a8, b8, ..., h1
ALL_SQUARES: List[str] = [to_square(r, c) for r in range(8) for c in range(8)]


@dataclass(frozen=True)
class Move:
    """Wire-level move representation.

    Attributes:
        from_sq (str): Origin square, e.g. ``"e7"``.
        to_sq (str): Destination square, e.g. ``"e8"``.
        promotion (Optional[str]): Lowercase promotion letter, if any.
    """

    from_sq: str
    to_sq: str
    promotion: Optional[str] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        return self.from_sq + self.to_sq + (self.promotion or "")


def parse_uci(uci: str) -> Move:
    """Parse a UCI move string.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = uci[0:2]
    to_sq = uci[2:4]
    # Validate both squares up front
    to_internal(from_sq)
    to_internal(to_sq)
    promo: Optional[str] = None
    if len(uci) == 5:
        promo = uci[4].lower()
        if promo not in PROMOTION_PIECES:
            raise ValueError(f"invalid promotion piece: {promo!r}")
    return Move(from_sq, to_sq, promo)
