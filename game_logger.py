"""
JSONL logger for trivia game events.

Each engine event becomes one JSON line, enriched with player names and the
turn it happened in, so a finished game can be replayed or analyzed later.
"""

import json
from datetime import datetime
from typing import Any, Dict, Optional


class GameLogger:
    """Logger that writes game events to a JSONL file."""

    def __init__(self, log_file: Optional[str] = None):
        """
        Initialize game logger.

        Args:
            log_file: Path to log file. If None, generates timestamped filename.
        """
        if log_file is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = f"trivia_game_{timestamp}.jsonl"

        self.log_file = log_file
        self.event_count = 0
        self._engine_last_idx = 0  # last flushed index from engine's EventLog

        # Create/clear log file
        with open(self.log_file, "w", encoding="utf-8"):
            pass

    def log_event(self, event_type: str, **kwargs: Any) -> None:
        """Append one event line."""
        event = {
            "event_id": self.event_count,
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            **kwargs,
        }
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(event, ensure_ascii=False) + "\n")
        self.event_count += 1

    def flush_engine_events(self, game) -> int:
        """Write engine events logged since the last flush.

        Returns the number of events written.
        """
        events = game.event_log.since(self._engine_last_idx)
        if not events:
            return 0

        names: Dict[int, str] = {p.player_id: p.name for p in game.players}
        wrote = 0
        for event in events:
            data = event.to_dict()
            etype = data.pop("event_type")
            data.setdefault("turn_number", game.state.current_turn)
            if "player_id" in data:
                data["player_name"] = names.get(data["player_id"])
            if data.get("to_player_id") is not None:
                data["to_player_name"] = names.get(data["to_player_id"])
            self.log_event(etype, **data)
            wrote += 1

        self._engine_last_idx += len(events)
        return wrote
