from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .attacks import in_check
from .board import GameState, Snapshot
from .make import make_move
from .move import Move, to_internal
from .movegen import all_legal_moves, has_legal_moves, legal_moves
from .piece import PROMOTION_TYPES, Color, Piece, PieceType


logger = logging.getLogger(__name__)

# Called with (origin, destination, color) for a promoting move; returns the piece type
PromotionResolver = Callable[[str, str, Color], Optional[PieceType]]


class GameStatus(str, Enum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


def evaluate(state: GameState, *, strict_castling: bool = True) -> GameStatus:
    """Classify the position for the side to move. Does not mutate ``state``."""
    checked = in_check(state, state.side_to_move)
    moves = has_legal_moves(state, strict_castling=strict_castling)
    if moves:
        return GameStatus.CHECK if checked else GameStatus.PLAYING
    return GameStatus.CHECKMATE if checked else GameStatus.STALEMATE


@dataclass(frozen=True)
class MoveRecord:
    from_sq: str
    to_sq: str
    before: Snapshot
    promotion: Optional[PieceType] = None

    def to_move(self) -> Move:
        return Move(self.from_sq, self.to_sq, self.promotion.value if self.promotion else None)


@dataclass(frozen=True)
class MoveResult:
    applied: bool
    status: GameStatus
    reason: Optional[str] = None


@dataclass
class Game:
    """Game wrapper around a :class:`GameState` with undo history.

    Responsibility: gate moves through the legality filter, commit them,
    record snapshots for undo, and report the resulting status.
    """

    state: GameState
    strict_castling: bool = True
    history: List[MoveRecord] = field(default_factory=list)

    @classmethod
    def new(cls, *, strict_castling: bool = True) -> "Game":
        return cls(state=GameState.initial(), strict_castling=strict_castling)

    @classmethod
    def from_placement(
        cls, placement: str, side_to_move: Color = Color.WHITE, *, strict_castling: bool = True
    ) -> "Game":
        return cls(
            state=GameState.from_placement(placement, side_to_move),
            strict_castling=strict_castling,
        )

    def new_game(self) -> None:
        """Reset to the standard starting position and drop the history."""
        self.state = GameState.initial()
        self.history.clear()

    def legal_moves(self, square: str) -> List[str]:
        return legal_moves(self.state, square, strict_castling=self.strict_castling)

    def all_legal_moves(self) -> List[Tuple[str, str]]:
        return all_legal_moves(self.state, strict_castling=self.strict_castling)

    def status(self) -> GameStatus:
        return evaluate(self.state, strict_castling=self.strict_castling)

    def is_promotion(self, from_sq: str, to_sq: str) -> bool:
        """True if ``from_sq`` holds a pawn and ``to_sq`` is on its last rank."""
        piece = self.state.piece_at(from_sq)
        return piece is not None and _is_promotion(piece, to_sq)

    def attempt_move(
        self,
        from_sq: str,
        to_sq: str,
        promotion_resolver: Optional[PromotionResolver] = None,
    ) -> MoveResult:
        """Validate and commit a move.

        Illegal requests leave the state untouched and come back with
        ``applied=False`` and a reason. The resolver is consulted only for a
        legal pawn move onto the last rank; anything other than Queen, Rook,
        Bishop or Knight (or no resolver at all) promotes to a Queen.

        Raises:
            InvalidSquare: If either square is malformed.
        """
        to_internal(to_sq)
        piece = self.state.piece_at(from_sq)
        if piece is None:
            return self._reject(from_sq, to_sq, "no piece on square")
        if piece.color is not self.state.side_to_move:
            return self._reject(from_sq, to_sq, "not your turn")
        if to_sq not in self.legal_moves(from_sq):
            return self._reject(from_sq, to_sq, "illegal move")

        promotion: Optional[PieceType] = None
        if _is_promotion(piece, to_sq):
            choice = promotion_resolver(from_sq, to_sq, piece.color) if promotion_resolver else None
            if choice is not None and choice not in PROMOTION_TYPES:
                logger.warning("unsupported promotion choice %r, promoting to queen", choice)
            promotion = choice if choice in PROMOTION_TYPES else PieceType.QUEEN

        record = MoveRecord(from_sq, to_sq, self.state.snapshot(), promotion)
        make_move(self.state, from_sq, to_sq, promotion)
        self.history.append(record)

        status = self.status()
        if status in (GameStatus.CHECKMATE, GameStatus.STALEMATE):
            logger.info("game over after %s: %s", record.to_move().to_uci(), status.value)
        return MoveResult(applied=True, status=status)

    def undo(self) -> bool:
        """Restore the position before the last move; False if there is nothing to undo."""
        if not self.history:
            return False
        last = self.history.pop()
        self.state.restore(last.before)
        return True

    def captures(self) -> List[Piece]:
        return list(self.state.captured)

    def move_history_uci(self) -> List[str]:
        return [r.to_move().to_uci() for r in self.history]

    def _reject(self, from_sq: str, to_sq: str, reason: str) -> MoveResult:
        logger.debug("rejected %s%s: %s", from_sq, to_sq, reason)
        return MoveResult(applied=False, status=self.status(), reason=reason)


def _is_promotion(piece: Piece, to_sq: str) -> bool:
    return piece.piece_type is PieceType.PAWN and to_internal(to_sq)[0] == piece.color.last_row
