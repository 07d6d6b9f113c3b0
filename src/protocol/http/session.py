from __future__ import annotations

import threading
import uuid
from typing import Callable, Dict, Optional

from ...engine.game import Game


class InMemorySessionStore:
    """Thread-safe in-memory store of games keyed by `game_id`.

    Each game owns its own state; nothing is shared between sessions.
    New games are built by `factory`, so per-server rule options (such as
    strict castling) apply to every session.
    """

    def __init__(self, factory: Callable[[], Game] = Game.new) -> None:
        self._lock = threading.RLock()
        self._games: Dict[str, Game] = {}
        self._factory = factory

    def create(self, game: Optional[Game] = None) -> str:
        """Register `game` (or a fresh one) and return its new `game_id`."""
        gid = str(uuid.uuid4())
        with self._lock:
            self._games[gid] = game if game is not None else self._factory()
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def replace(self, game_id: str, game: Game) -> None:
        with self._lock:
            if game_id not in self._games:
                raise KeyError(game_id)
            self._games[game_id] = game

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
