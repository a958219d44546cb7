"""
Tile-effect resolution.

The resolver applies the score changes a landing causes and tells the
engine what to show next: an effect panel or a question. Timing, locks and
turn advancement stay in the engine.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from trivia.events import EventLog, EventType
from trivia.player import PlayerState
from trivia.questions import Question, QuestionPool
from trivia.tiles import STAR, BoardTile, EffectKind, TileType

logger = logging.getLogger(__name__)

PANEL_TITLES = {
    TileType.BANKRUPT: "BANKRUPT!",
    TileType.BONUS: "Bonus Tile",
    TileType.PENALTY: "Penalty Tile",
    TileType.QUESTION: "Question Tile",
    TileType.SPECIAL: "Special Tile",
}

NO_QUESTION_MESSAGE = "Question tile - no question available"
NO_BONUS_QUESTION_MESSAGE = "Bonus tile - no bonus question left"


@dataclass
class TileEffect:
    """Outcome of a landing that is reported to the players."""

    tile_index: int
    player_id: int
    kind: EffectKind
    title: str
    message: str
    requires_ack: bool = True
    score_changes: Dict[int, int] = field(default_factory=dict)


@dataclass
class EffectOutcome:
    """Either an effect to report or a question to ask."""

    effect: Optional[TileEffect] = None
    question: Optional[Question] = None


def _adjust(player: PlayerState, delta: int) -> int:
    """Change a score, never below zero. Returns the change actually applied."""
    new_score = max(0, player.score + delta)
    applied = new_score - player.score
    player.score = new_score
    return applied


class TileEffectResolver:
    """Applies the effect of a landing tile to the players."""

    def __init__(self, pool: QuestionPool, event_log: EventLog):
        self.pool = pool
        self.event_log = event_log

    def resolve(self, tile: BoardTile, players: List[PlayerState], mover_index: int) -> EffectOutcome:
        mover = players[mover_index]

        # Bankruptcy wins over every other rule, including a wrong tile type.
        if tile.tile_type == TileType.BANKRUPT or tile.title_denotes_bankruptcy:
            return EffectOutcome(effect=self._bankrupt(tile, mover))

        if tile.tile_type == TileType.START:
            return EffectOutcome(effect=self._effect(tile, mover, "Start tile - no effect", requires_ack=False))
        if tile.tile_type == TileType.PENALTY:
            return EffectOutcome(effect=self._lose(tile, mover))
        if tile.tile_type == TileType.BONUS:
            return self._bonus(tile, players, mover_index)
        if tile.tile_type == TileType.QUESTION:
            question = self._draw(self.pool.draw_regular)
            if question is not None:
                return EffectOutcome(question=question)
            return EffectOutcome(effect=self._effect(tile, mover, NO_QUESTION_MESSAGE))
        return EffectOutcome(effect=self._special(tile, players, mover_index))

    def _draw(self, draw) -> Optional[Question]:
        recycled_before = self.pool.recycle_count
        question = draw()
        if self.pool.recycle_count != recycled_before:
            self.event_log.log(EventType.QUESTIONS_RECYCLED, pool_size=len(self.pool.available))
        return question

    def _effect(
        self,
        tile: BoardTile,
        mover: PlayerState,
        message: str,
        requires_ack: bool = True,
        score_changes: Optional[Dict[int, int]] = None,
        kind: Optional[EffectKind] = None,
    ) -> TileEffect:
        effect = TileEffect(
            tile_index=tile.index,
            player_id=mover.player_id,
            kind=kind or tile.effect,
            title=PANEL_TITLES.get(tile.tile_type, "Tile Effect"),
            message=message,
            requires_ack=requires_ack,
            score_changes={pid: delta for pid, delta in (score_changes or {}).items() if delta},
        )
        self.event_log.log(
            EventType.TILE_EFFECT,
            player_id=mover.player_id,
            tile=tile.index,
            kind=effect.kind.value,
            message=message,
            score_changes=dict(effect.score_changes),
        )
        return effect

    def _transfer(self, source: PlayerState, target: PlayerState, amount: int) -> int:
        amount = min(amount, source.score)
        source.score -= amount
        target.score += amount
        self.event_log.log(
            EventType.TRANSFER,
            player_id=source.player_id,
            to_player_id=target.player_id,
            amount=amount,
        )
        return amount

    def _target(self, tile: BoardTile, players: List[PlayerState], mover_index: int) -> Optional[PlayerState]:
        if tile.target is None:
            return None
        target_index = tile.target.resolve(mover_index, len(players))
        if target_index == mover_index:
            return None
        return players[target_index]

    def _bankrupt(self, tile: BoardTile, mover: PlayerState) -> TileEffect:
        lost = mover.score
        mover.score = 0
        mover.bankrupt_count += 1
        self.event_log.log(
            EventType.BANKRUPTCY,
            player_id=mover.player_id,
            points_lost=lost,
            bankrupt_count=mover.bankrupt_count,
        )
        effect = self._effect(
            tile,
            mover,
            f"BANKRUPT! {mover.name} lost all {lost} points.",
            score_changes={mover.player_id: -lost},
            kind=EffectKind.BANKRUPT,
        )
        effect.title = PANEL_TITLES[TileType.BANKRUPT]
        return effect

    def _lose(self, tile: BoardTile, mover: PlayerState) -> TileEffect:
        if tile.amount <= 0:
            return self._effect(tile, mover, "Penalty tile - nothing to lose")
        lost = -_adjust(mover, -tile.amount)
        return self._effect(
            tile,
            mover,
            f"{STAR} -{lost} points lost (remaining: {mover.score})",
            score_changes={mover.player_id: -lost},
        )

    def _bonus(self, tile: BoardTile, players: List[PlayerState], mover_index: int) -> EffectOutcome:
        mover = players[mover_index]
        if tile.effect != EffectKind.TAKE_FROM:
            question = self._draw(self.pool.draw_bonus)
            if question is not None:
                return EffectOutcome(question=question)
            return EffectOutcome(effect=self._effect(tile, mover, NO_BONUS_QUESTION_MESSAGE))

        if tile.amount <= 0:
            return EffectOutcome(effect=self._effect(tile, mover, "Bonus tile - nothing to take"))
        target = self._target(tile, players, mover_index)
        if target is None:
            won = _adjust(mover, tile.amount)
            return EffectOutcome(
                effect=self._effect(
                    tile,
                    mover,
                    f"{STAR} +{won} points won (total: {mover.score})",
                    score_changes={mover.player_id: won},
                )
            )
        taken = self._transfer(target, mover, tile.amount)
        return EffectOutcome(
            effect=self._effect(
                tile,
                mover,
                f"Took {STAR}{taken} from {target.name} (total: {mover.score})",
                score_changes={mover.player_id: taken, target.player_id: -taken},
            )
        )

    def _special(self, tile: BoardTile, players: List[PlayerState], mover_index: int) -> TileEffect:
        mover = players[mover_index]

        if tile.effect == EffectKind.GIVE_TO:
            if tile.amount <= 0:
                return self._effect(tile, mover, "Special tile - nothing to give")
            target = self._target(tile, players, mover_index)
            if target is None:
                lost = -_adjust(mover, -tile.amount)
                return self._effect(
                    tile,
                    mover,
                    f"{STAR} -{lost} points lost (remaining: {mover.score})",
                    score_changes={mover.player_id: -lost},
                )
            given = self._transfer(mover, target, tile.amount)
            return self._effect(
                tile,
                mover,
                f"Gave {STAR}{given} to {target.name} (remaining: {mover.score})",
                score_changes={mover.player_id: -given, target.player_id: given},
            )

        if tile.effect == EffectKind.GIVE_TO_ALL:
            if tile.amount <= 0:
                return self._effect(tile, mover, "Special tile - nothing to give")
            others = [p for p in players if p.player_id != mover.player_id]
            # The mover pays at most what they have; the split remainder is lost.
            cost = min(tile.amount * len(others), mover.score)
            share = cost // len(others)
            mover.score -= cost
            changes = {mover.player_id: -cost}
            for other in others:
                other.score += share
                changes[other.player_id] = share
            self.event_log.log(
                EventType.TRANSFER,
                player_id=mover.player_id,
                to_player_id=None,
                amount=cost,
                share=share,
            )
            return self._effect(
                tile,
                mover,
                f"Gave {STAR}{share} to everyone (total: -{cost}, remaining: {mover.score})",
                score_changes=changes,
            )

        if tile.effect == EffectKind.INFO:
            return self._effect(tile, mover, "Special: you may ask a bonus question to a player of your choice")

        logger.debug("Tile %d (%s) has no effect", tile.index, tile.title)
        return self._effect(tile, mover, "Special tile - no effect", requires_ack=False)
