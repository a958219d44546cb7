"""
Public snapshot serialization of GameState.

Produces a sanitized, UI-friendly view of the current game without
exposing hidden information (the correct option of an unanswered
question, the order of the question pool).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from trivia.effects import TileEffect
from trivia.game import GameState, PendingQuestion


def _question_payload(pending: Optional[PendingQuestion]) -> Optional[Dict[str, Any]]:
    if pending is None:
        return None
    question = pending.question
    payload: Dict[str, Any] = {
        "player_id": pending.player_id,
        "tile_index": pending.tile_index,
        "text": question.text,
        "options": list(question.options),
        "difficulty": question.difficulty.value,
        "is_bonus": question.is_bonus,
        "is_sudden_death": pending.is_sudden_death,
        "answered_index": pending.answered_index,
        "is_correct": pending.is_correct,
        "feedback": pending.feedback,
        "requires_ack": True,
    }
    # Revealed only once an answer is in.
    if pending.answered:
        payload["correct_index"] = question.correct_index
    return payload


def _effect_payload(effect: Optional[TileEffect]) -> Optional[Dict[str, Any]]:
    if effect is None:
        return None
    return {
        "tile_index": effect.tile_index,
        "player_id": effect.player_id,
        "kind": effect.kind.value,
        "title": effect.title,
        "message": effect.message,
        "requires_ack": effect.requires_ack,
        "score_changes": {str(pid): delta for pid, delta in effect.score_changes.items()},
    }


def serialize_snapshot(game: GameState) -> Dict[str, Any]:
    """Serialize a GameState into a public, stable JSON dict.

    The snapshot includes:
    - phase, turn counters, mode, current player and dice
    - players in turn order with score, position and counters
    - the 40 tiles with the highlighted one marked
    - pending question or tile effect (no correct index until answered)
    - question pool counts only
    - starting-order and sudden-death sub-states
    """
    state = game.snapshot()

    players: List[Dict[str, Any]] = [
        {
            "player_id": p.player_id,
            "name": p.name,
            "color": p.color,
            "icon": p.icon,
            "score": p.score,
            "position": p.position,
            "bankrupt_count": p.bankrupt_count,
            "bonus_correct_count": p.bonus_correct_count,
        }
        for p in game.players
    ]

    tiles: List[Dict[str, Any]] = [
        {
            "index": tile.index,
            "title": tile.title,
            "type": tile.tile_type.value,
            "highlighted": tile.index == state.highlighted_tile,
        }
        for tile in game.board.tiles
    ]

    duel = state.sudden_death
    order = state.starting_order

    snapshot: Dict[str, Any] = {
        "phase": state.phase.value,
        "game_mode": state.game_mode.value,
        "current_turn": state.current_turn,
        "max_turns": state.max_turns,
        "current_player_id": game.get_current_player().player_id,
        "current_player_index": state.current_player_index,
        "dice_value": state.dice_value,
        "is_dice_rolling": state.is_dice_rolling,
        "can_roll_dice": state.can_roll_dice,
        "highlighted_tile": state.highlighted_tile,
        "turn_feedback": state.turn_feedback,
        "turn_transition_message": state.turn_transition_message,
        "is_game_ended": state.is_game_ended,
        "winner_id": state.winner_id,
        "locks": {
            "effect_in_progress": state.effect_in_progress,
            "planning": state.planning,
        },
        "players": players,
        "tiles": tiles,
        "pending_question": _question_payload(state.pending_question),
        "pending_effect": _effect_payload(state.pending_effect),
        "questions": {
            "available": len(game.pool.available),
            "used": len(game.pool.used),
            "total": len(game.pool.master),
            "recycled": game.pool.recycle_count,
        },
        "starting_order": {
            "active": order.active,
            "rolls": {str(pid): value for pid, value in order.rolls.items()},
            "rolling_player_id": order.rolling_player_id,
        },
        "sudden_death": {
            "active": duel.active,
            "round": duel.round,
            "contender_ids": list(duel.contender_ids),
            "index": duel.index,
            "winner_id": duel.winner_id,
        },
    }

    return snapshot
