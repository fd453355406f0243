"""
In-memory store
Holds one SessionController per running game. Nothing survives a process restart.
"""

import logging
from typing import Dict, Optional

from .config import GameSettings
from .controller import CodeFactory, SessionController
from .random_client import sample_code
from .scheduler import Scheduler
from .session import PRESETS
from .types import Code, Difficulty

logger = logging.getLogger(__name__)


class GameStore:
    def __init__(
        self,
        scheduler: Scheduler,
        settings: Optional[GameSettings] = None,
        code_factory: Optional[CodeFactory] = None,
    ) -> None:
        self._games: Dict[str, SessionController] = {}
        self._scheduler = scheduler
        self._settings = settings or GameSettings()
        self._code_factory = code_factory or sample_code

    def draw_secret(self, difficulty: Difficulty = "easy") -> Code:
        """May block on the network (random.org source); run it off the event loop."""
        return self._code_factory(PRESETS[difficulty].code_length)

    def create(self, difficulty: Difficulty = "easy", secret: Optional[Code] = None) -> SessionController:
        game = SessionController(
            self._scheduler,
            settings=self._settings,
            code_factory=self._code_factory,
            difficulty=difficulty,
            secret=secret,
        )
        self._games[game.game_id] = game
        return game

    def get(self, game_id: str) -> Optional[SessionController]:
        return self._games.get(game_id)

    def discard(self, game_id: str) -> bool:
        game = self._games.pop(game_id, None)
        if game is None:
            return False
        game.close()
        logger.info("game %s: discarded", game_id)
        return True

    def __len__(self) -> int:
        return len(self._games)
