from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional


class Color(Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def forward(self) -> int:
        """Row delta of a pawn advance (row 0 is rank 8)."""
        return -1 if self is Color.WHITE else 1

    @property
    def home_row(self) -> int:
        return 7 if self is Color.WHITE else 0

    @property
    def pawn_row(self) -> int:
        return 6 if self is Color.WHITE else 1

    @property
    def last_row(self) -> int:
        return 0 if self is Color.WHITE else 7


class PieceType(Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)

_LETTER_TO_TYPE: Dict[str, PieceType] = {t.value: t for t in PieceType}


@dataclass(frozen=True)
class Piece:
    """Immutable chess piece value: a type and a color, nothing else."""

    piece_type: PieceType
    color: Color

    @property
    def symbol(self) -> str:
        """Conventional letter, uppercase for White and lowercase for Black."""
        letter = self.piece_type.value
        return letter.upper() if self.color is Color.WHITE else letter

    @classmethod
    def from_symbol(cls, ch: str) -> "Piece":
        ptype = _LETTER_TO_TYPE.get(ch.lower()) if len(ch) == 1 else None
        if ptype is None:
            raise ValueError(f"invalid piece symbol: {ch!r}")
        return cls(ptype, Color.WHITE if ch.isupper() else Color.BLACK)

    def __str__(self) -> str:
        return self.symbol


def promotion_type_from_letter(letter: Optional[str]) -> Optional[PieceType]:
    """Map a lowercase promotion letter (``q``, ``r``, ``b``, ``n``) to a type."""
    if letter is None:
        return None
    ptype = _LETTER_TO_TYPE.get(letter.lower())
    return ptype if ptype in PROMOTION_TYPES else None
