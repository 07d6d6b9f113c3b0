from __future__ import annotations

import logging
from functools import partial
from typing import Dict, Literal, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    invalid_square_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...engine.game import Game, GameStatus
from ...engine.move import InvalidSquare, parse_uci
from ...engine.piece import Color, promotion_type_from_letter
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)


class CreateGameResponse(BaseModel):
    game_id: str
    placement: str
    side_to_move: str


class SetPositionRequest(BaseModel):
    placement: str = Field(..., description="FEN piece-placement field")
    side_to_move: Literal["w", "b"] = Field(default="w", description="Side to move")


class MoveRequest(BaseModel):
    move: str = Field(..., description="UCI move string, e.g., e2e4 or e7e8n")


class GameStateResponse(BaseModel):
    game_id: str
    placement: str
    side_to_move: str
    status: GameStatus
    en_passant: Optional[str]
    castling: Dict[str, bool]
    captures: list[str]
    legal_moves: list[str]
    last_move: Optional[str]
    move_history: list[str]


class MoveResponse(BaseModel):
    applied: bool
    reason: Optional[str] = None
    status: GameStatus
    state: GameStateResponse


class LegalMovesResponse(BaseModel):
    square: str
    destinations: list[str]


def create_app(*, strict_castling: bool = True, log_level: Union[int, str] = logging.INFO) -> FastAPI:
    app = FastAPI(title="Chess Rules API", version="0.1.0")

    # Basic logging setup
    logging.basicConfig(level=log_level)
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(InvalidSquare, invalid_square_handler)
    app.add_exception_handler(Exception, exception_handler)

    # In-memory session store; every new game shares the server's castling rule
    store = InMemorySessionStore(partial(Game.new, strict_castling=strict_castling))

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game_id = store.create()
        game = _require_game(store, game_id)
        logger.info("created game %s", game_id)
        return CreateGameResponse(
            game_id=game_id,
            placement=game.state.placement(),
            side_to_move=game.state.side_to_move.value,
        )

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    @app.get("/api/games/{game_id}/state", response_model=GameStateResponse)
    async def get_state(game_id: str) -> GameStateResponse:
        return _state_response(game_id, _require_game(store, game_id))

    @app.get("/api/games/{game_id}/legal-moves/{square}", response_model=LegalMovesResponse)
    async def get_legal_moves(game_id: str, square: str) -> LegalMovesResponse:
        game = _require_game(store, game_id)
        return LegalMovesResponse(square=square, destinations=game.legal_moves(square))

    @app.post("/api/games/{game_id}/move", response_model=MoveResponse)
    async def make_move(game_id: str, req: MoveRequest) -> MoveResponse:
        game = _require_game(store, game_id)
        try:
            move = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        # A promotion suffix must match a promoting pawn move
        if move.promotion and not game.is_promotion(move.from_sq, move.to_sq):
            logger.debug("rejected %s: promotion on a non-promoting move", req.move)
            return MoveResponse(
                applied=False,
                reason="illegal move",
                status=game.status(),
                state=_state_response(game_id, game),
            )

        result = game.attempt_move(
            move.from_sq,
            move.to_sq,
            lambda _from, _to, _color: promotion_type_from_letter(move.promotion),
        )
        return MoveResponse(
            applied=result.applied,
            reason=result.reason,
            status=result.status,
            state=_state_response(game_id, game),
        )

    @app.post("/api/games/{game_id}/undo", response_model=GameStateResponse)
    async def undo(game_id: str) -> GameStateResponse:
        game = _require_game(store, game_id)
        if not game.undo():
            logger.debug("undo on game %s with empty history", game_id)
        return _state_response(game_id, game)

    @app.post("/api/games/{game_id}/new", response_model=GameStateResponse)
    async def new_game(game_id: str) -> GameStateResponse:
        game = _require_game(store, game_id)
        game.new_game()
        return _state_response(game_id, game)

    @app.post("/api/games/{game_id}/position", response_model=GameStateResponse)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameStateResponse:
        _require_game(store, game_id)
        try:
            game = Game.from_placement(
                req.placement, Color(req.side_to_move), strict_castling=strict_castling
            )
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid placement")
        store.replace(game_id, game)
        return _state_response(game_id, game)

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _state_response(game_id: str, game: Game) -> GameStateResponse:
    state = game.state
    history = game.move_history_uci()
    return GameStateResponse(
        game_id=game_id,
        placement=state.placement(),
        side_to_move=state.side_to_move.value,
        status=game.status(),
        en_passant=state.en_passant,
        castling=state.castling.as_dict(),
        captures=[p.symbol for p in game.captures()],
        legal_moves=[f + t for f, t in game.all_legal_moves()],
        last_move=history[-1] if history else None,
        move_history=history,
    )


# Default app for non-factory servers
app = create_app()
