from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from snapshot import serialize_snapshot
from trivia.game import GameState

logger = logging.getLogger(__name__)

# Commands the presentation layer may send, mapped to engine calls.
COMMANDS: Dict[str, Callable[..., None]] = {
    "roll_dice": lambda game, **_: game.roll_dice(),
    "answer_question": lambda game, option_index=None, **_: game.answer_question(option_index),
    "acknowledge_tile_effect": lambda game, **_: game.acknowledge_tile_effect(),
    "acknowledge_question": lambda game, **_: game.acknowledge_question(),
    "force_move": lambda game, player_index=None, tile_delta=None, **_: game.force_move(player_index, tile_delta),
    "end_game_now": lambda game, **_: game.end_game_now(),
    "restart": lambda game, **_: game.restart(),
}

CLIENT_QUEUE_SIZE = 256


class GameRunner:
    """Owns a single GameState on the event loop and fans its snapshots out.

    Responsibilities:
    - Dispatch presentation commands to the engine
    - Broadcast a snapshot to subscribed WebSocket clients after every publish
    - Dispose the engine when the game is removed
    """

    def __init__(self, game_id: str, game: GameState):
        self.game_id = game_id
        self.game = game
        self._clients: Set[asyncio.Queue] = set()  # each client gets a queue of outbound messages
        self._publish_count = 0
        game.add_listener(self._on_publish)

    def _message(self) -> Dict[str, Any]:
        return {
            "type": "snapshot",
            "game_id": self.game_id,
            "sequence": self._publish_count,
            "snapshot": serialize_snapshot(self.game),
        }

    def _on_publish(self, game: GameState) -> None:
        self._publish_count += 1
        if not self._clients:
            return
        payload = self._message()
        for q in list(self._clients):
            try:
                q.put_nowait(payload)
            except asyncio.QueueFull:
                # Drop client if it cannot keep up
                logger.debug("Dropping slow subscriber of game %s", self.game_id)
                self._clients.discard(q)

    # Subscription management for WS
    async def subscribe(self) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue(maxsize=CLIENT_QUEUE_SIZE)
        self._clients.add(q)
        await q.put(self._message())
        return q

    async def unsubscribe(self, q: asyncio.Queue) -> None:
        self._clients.discard(q)

    @property
    def subscriber_count(self) -> int:
        return len(self._clients)

    async def dispatch(
        self,
        command: str,
        option_index: Optional[int] = None,
        player_index: Optional[int] = None,
        tile_delta: Optional[int] = None,
    ) -> tuple[bool, str]:
        """Send a command to the engine. Returns (accepted, reason).

        Accepted means the command was known and handed over; the engine
        itself ignores commands whose preconditions do not hold.
        """
        handler = COMMANDS.get(command)
        if handler is None:
            return False, f"unknown command: {command}"
        if self.game.is_disposed:
            return False, "game stopped"
        handler(self.game, option_index=option_index, player_index=player_index, tile_delta=tile_delta)
        return True, ""

    async def stop(self) -> None:
        self.game.dispose()
        self._clients.clear()
        logger.info("Game %s stopped", self.game_id)

    async def status(self) -> Dict[str, Any]:
        state = self.game.snapshot()
        return {
            "game_id": self.game_id,
            "phase": state.phase.value,
            "current_turn": state.current_turn,
            "current_player_id": self.game.get_current_player().player_id,
            "is_game_ended": state.is_game_ended,
            "winner_id": state.winner_id,
            "subscribers": self.subscriber_count,
            "events": len(self.game.event_log.events),
        }

    async def get_events_since(self, since_index: int) -> List[Dict[str, Any]]:
        start = max(since_index + 1, 0)
        evs = self.game.event_log.since(start)
        return [
            {
                "sequence_number": start + i,
                "event_type": ev.event_type.value,
                "player_id": ev.player_id,
                "payload": dict(ev.details),
            }
            for i, ev in enumerate(evs)
        ]
