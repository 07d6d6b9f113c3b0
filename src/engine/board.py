from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional, Tuple

from .move import to_internal, to_square
from .piece import Color, Piece, PieceType


STARTPOS_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

KING_HOME: Dict[Color, str] = {Color.WHITE: "e1", Color.BLACK: "e8"}
# (color, wing) -> rook home square; wing is the rook's file
ROOK_HOME: Dict[Tuple[Color, str], str] = {
    (Color.WHITE, "a"): "a1",
    (Color.WHITE, "h"): "h1",
    (Color.BLACK, "a"): "a8",
    (Color.BLACK, "h"): "h8",
}

Grid = List[List[Optional[Piece]]]


@dataclass(frozen=True)
class CastlingFlags:
    """Conservative castling bookkeeping: once a piece has moved, its flag stays set.

    Flags only ever go from False to True; they are reset by restoring a
    snapshot or starting a new game.
    """

    white_king_moved: bool = False
    white_rook_a_moved: bool = False
    white_rook_h_moved: bool = False
    black_king_moved: bool = False
    black_rook_a_moved: bool = False
    black_rook_h_moved: bool = False

    def king_moved(self, color: Color) -> bool:
        return getattr(self, f"{color.name.lower()}_king_moved")

    def rook_moved(self, color: Color, wing: str) -> bool:
        return getattr(self, f"{color.name.lower()}_rook_{wing}_moved")

    def with_king_moved(self, color: Color) -> "CastlingFlags":
        return replace(self, **{f"{color.name.lower()}_king_moved": True})

    def with_rook_moved(self, color: Color, wing: str) -> "CastlingFlags":
        return replace(self, **{f"{color.name.lower()}_rook_{wing}_moved": True})

    def as_dict(self) -> Dict[str, bool]:
        return {
            "white_king_moved": self.white_king_moved,
            "white_rook_a_moved": self.white_rook_a_moved,
            "white_rook_h_moved": self.white_rook_h_moved,
            "black_king_moved": self.black_king_moved,
            "black_rook_a_moved": self.black_rook_a_moved,
            "black_rook_h_moved": self.black_rook_h_moved,
        }


@dataclass(frozen=True)
class Snapshot:
    """Immutable full copy of a :class:`GameState`.

    Built from tuples and frozen values only, so nothing mutable is shared
    with the live state it was taken from.
    """

    grid: Tuple[Tuple[Optional[Piece], ...], ...]
    side_to_move: Color
    en_passant: Optional[str]
    castling: CastlingFlags
    captured: Tuple[Piece, ...]


@dataclass
class GameState:
    """Board grid plus the auxiliary state needed to judge and apply moves.

    Notes:
    - ``grid[row][col]`` with row 0 = rank 8 and col 0 = file a.
    - ``captured`` lists removed pieces oldest first.
    """

    grid: Grid
    side_to_move: Color = Color.WHITE
    en_passant: Optional[str] = None
    castling: CastlingFlags = field(default_factory=CastlingFlags)
    captured: List[Piece] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "GameState":
        return cls(grid=[[None] * 8 for _ in range(8)])

    @classmethod
    def initial(cls) -> "GameState":
        """Create the standard starting position with White to move.

        Returns:
            GameState: Fresh state with no castling flags set, no en-passant
                target and an empty capture list.
        """
        return cls.from_placement(STARTPOS_PLACEMENT, Color.WHITE)

    @classmethod
    def from_placement(cls, placement: str, side_to_move: Color = Color.WHITE) -> "GameState":
        """Build a position from a FEN piece-placement field.

        Only the placement field is understood (e.g. ``"7k/5Q2/6K1/8/8/8/8/8"``).
        Castling flags are inferred from home squares: a king or rook that is
        not standing on its home square is treated as having moved.

        Args:
            placement (str): Ranks 8..1 separated by ``/``; digits count empty
                squares, letters are pieces (uppercase = White).
            side_to_move (Color): Side to move in the resulting position.

        Returns:
            GameState: Position with no en-passant target and no captures.

        Raises:
            ValueError: If the placement is malformed.
        """
        if not placement or not isinstance(placement, str):
            raise ValueError("placement must be a non-empty string")
        ranks = placement.strip().split("/")
        if len(ranks) != 8:
            raise ValueError("placement must have 8 ranks")
        state = cls.empty()
        state.side_to_move = side_to_move
        for row, rank in enumerate(ranks):
            col = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in placement rank")
                    col += n
                else:
                    if col >= 8:
                        raise ValueError("too many squares in placement rank")
                    state.grid[row][col] = Piece.from_symbol(ch)
                    col += 1
            if col != 8:
                raise ValueError("rank does not sum to 8 squares in placement")

        flags = CastlingFlags()
        for color in Color:
            if state.piece_at(KING_HOME[color]) != Piece(PieceType.KING, color):
                flags = flags.with_king_moved(color)
            for wing in ("a", "h"):
                if state.piece_at(ROOK_HOME[(color, wing)]) != Piece(PieceType.ROOK, color):
                    flags = flags.with_rook_moved(color, wing)
        state.castling = flags
        return state

    def placement(self) -> str:
        """Serialize the grid into a FEN piece-placement field."""
        ranks: List[str] = []
        for row in self.grid:
            run = 0
            out: List[str] = []
            for piece in row:
                if piece is None:
                    run += 1
                    continue
                if run:
                    out.append(str(run))
                    run = 0
                out.append(piece.symbol)
            if run:
                out.append(str(run))
            ranks.append("".join(out))
        return "/".join(ranks)

    # --- Square access ---
    def piece_at(self, square: str) -> Optional[Piece]:
        row, col = to_internal(square)
        return self.grid[row][col]

    def set_piece(self, square: str, value: Optional[Piece]) -> None:
        # No validation: callers are trusted engine components
        row, col = to_internal(square)
        self.grid[row][col] = value

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[str, Piece]]:
        """Yield ``(square, piece)`` for occupied squares, optionally of one color."""
        for row in range(8):
            for col in range(8):
                piece = self.grid[row][col]
                if piece is not None and (color is None or piece.color is color):
                    yield to_square(row, col), piece

    # --- Snapshot / restore ---
    def snapshot(self) -> Snapshot:
        return Snapshot(
            grid=tuple(tuple(row) for row in self.grid),
            side_to_move=self.side_to_move,
            en_passant=self.en_passant,
            castling=self.castling,
            captured=tuple(self.captured),
        )

    def restore(self, snap: Snapshot) -> None:
        """Replace every field of this state with the values held by ``snap``."""
        self.grid = [list(row) for row in snap.grid]
        self.side_to_move = snap.side_to_move
        self.en_passant = snap.en_passant
        self.castling = snap.castling
        self.captured = list(snap.captured)

    def copy(self) -> "GameState":
        clone = GameState.empty()
        clone.restore(self.snapshot())
        return clone
