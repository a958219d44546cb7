from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, List, Optional

from trivia.config import GameConfig, GameMode, Timings
from trivia.exceptions import GameNotFoundError
from trivia.game import create_game
from trivia.player import Player
from trivia.scheduler import AsyncioScheduler
from trivia.settings import get_settings

from server.runner import GameRunner

logger = logging.getLogger(__name__)

MODES = {"turns": GameMode.TURN_BASED, "questions": GameMode.QUESTION_BASED}


class GameRegistry:
    """In-memory registry of running games."""

    def __init__(self, timings: Optional[Timings] = None):
        self._games: Dict[str, GameRunner] = {}
        self._lock = asyncio.Lock()
        self._timings = timings

    async def create_game(
        self,
        *,
        players: List[Player],
        mode: str = "turns",
        max_turns: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> str:
        timings = self._timings or get_settings().build_timings()
        config = GameConfig(game_mode=MODES[mode], max_turns=max_turns, seed=seed, timings=timings)
        game = create_game(config, players, scheduler=AsyncioScheduler())

        game_id = uuid.uuid4().hex[:12]
        async with self._lock:
            self._games[game_id] = GameRunner(game_id, game)
        logger.info("Created game %s with %d players (%s)", game_id, len(players), mode)
        return game_id

    async def get(self, game_id: str) -> GameRunner:
        runner = self._games.get(game_id)
        if runner is None:
            raise GameNotFoundError(game_id)
        return runner

    async def stop(self, game_id: str) -> None:
        async with self._lock:
            runner = self._games.pop(game_id, None)
        if runner is None:
            raise GameNotFoundError(game_id)
        await runner.stop()

    async def stop_all(self) -> None:
        async with self._lock:
            runners = list(self._games.values())
            self._games.clear()
        for runner in runners:
            await runner.stop()

    def __len__(self) -> int:
        return len(self._games)
