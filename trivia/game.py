"""
Main game engine and state management.

The engine is a single-threaded state machine driven by commands from the
presentation layer and by callbacks it schedules for itself (dice ticks,
pawn steps, delayed turn ends). Listeners are notified once after every
command and every callback, so observers always read a consistent state.
"""

import copy
import logging
import random
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from trivia.board import BOARD_SIZE, Board
from trivia.config import GameConfig, GameMode
from trivia.effects import TileEffect, TileEffectResolver
from trivia.events import EventLog, EventType
from trivia.exceptions import InvalidSetupError
from trivia.guard import TurnGuard
from trivia.player import Player, PlayerState
from trivia.questions import Question, QuestionPool, create_question_bank
from trivia.ranking import rank_players
from trivia.scheduler import AsyncioScheduler, Scheduler
from trivia.sudden_death import RoundStep, SuddenDeath, SuddenDeathState

logger = logging.getLogger(__name__)

Listener = Callable[["GameState"], None]


class TurnPhase(Enum):
    """States of the turn state machine."""

    STARTING_ORDER = "starting_order"
    WAITING_FOR_DICE = "waiting_for_dice"
    ROLLING_DICE = "rolling_dice"
    MOVING_PAWN = "moving_pawn"
    RESOLVING_TILE = "resolving_tile"
    SHOWING_POPUP = "showing_popup"
    TIE_BREAK = "tie_break"
    GAME_OVER = "game_over"


@dataclass
class PendingQuestion:
    """A question waiting for an answer and then an acknowledgement."""

    question: Question
    player_id: int
    tile_index: Optional[int] = None
    is_sudden_death: bool = False
    answered_index: Optional[int] = None
    is_correct: Optional[bool] = None
    feedback: Optional[str] = None

    @property
    def answered(self) -> bool:
        return self.answered_index is not None


@dataclass
class StartingOrderState:
    """Progress of the opening dice rolls."""

    active: bool = False
    rolls: Dict[int, int] = field(default_factory=dict)
    rolling_player_id: Optional[int] = None


@dataclass
class EngineState:
    """Everything the presentation layer may read."""

    game_mode: GameMode
    max_turns: int
    phase: TurnPhase = TurnPhase.STARTING_ORDER
    current_player_index: int = 0
    current_turn: int = 1

    dice_value: int = 0
    is_dice_rolling: bool = False
    can_roll_dice: bool = False
    highlighted_tile: Optional[int] = None

    pending_question: Optional[PendingQuestion] = None
    pending_effect: Optional[TileEffect] = None

    is_game_ended: bool = False
    winner_id: Optional[int] = None

    starting_order: StartingOrderState = field(default_factory=StartingOrderState)
    sudden_death: SuddenDeathState = field(default_factory=SuddenDeathState)

    turn_feedback: Optional[str] = None
    turn_transition_message: Optional[str] = None

    effect_in_progress: bool = False
    planning: bool = False


class GameState:
    """
    Represents the complete state of a trivia board game.
    This is the main interface for the game engine.

    Commands (``roll_dice``, ``answer_question``, ``acknowledge_tile_effect``,
    ``acknowledge_question``, ``force_move``, ``end_game_now``, ``restart``)
    never raise and never report failure: a command whose preconditions do
    not hold is ignored and logged at debug level.
    """

    def __init__(
        self,
        config: GameConfig,
        players: Sequence[Player],
        board: Optional[Board] = None,
        questions: Optional[Sequence[Question]] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config
        self.timings = config.timings
        self.board = board or Board()
        self.event_log = EventLog()
        self.scheduler = scheduler or AsyncioScheduler()

        # Game RNG decides every outcome; dice faces shown while rolling are cosmetic.
        self.rng = rng or random.Random(config.seed)
        self.face_rng = random.Random(None if config.seed is None else config.seed + 1)

        self.players: List[PlayerState] = [
            PlayerState(p.player_id, p.name, config.initial_score, color=p.color, icon=p.icon)
            for p in players
        ]

        self.pool = QuestionPool(
            create_question_bank() if questions is None else questions,
            self.rng,
            recycle=config.game_mode == GameMode.TURN_BASED,
        )
        self.resolver = TileEffectResolver(self.pool, self.event_log)
        self.guard = TurnGuard(self.scheduler, self.timings.watchdog, self._on_watchdog_timeout)

        self.state = EngineState(game_mode=config.game_mode, max_turns=config.resolved_max_turns())
        self.sudden_death: Optional[SuddenDeath] = None

        self._listeners: List[Listener] = []
        self._epoch = 0
        self._disposed = False

        self.event_log.log(
            EventType.GAME_START,
            players=[p.name for p in self.players],
            game_mode=config.game_mode.value,
            max_turns=self.state.max_turns,
            seed=config.seed,
        )

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> EngineState:
        """Return a copy of the engine state that callers may keep."""
        self._sync_state()
        return copy.deepcopy(self.state)

    def get_current_player(self) -> PlayerState:
        """Get the current active player."""
        return self.players[self.state.current_player_index]

    def get_player(self, player_id: int) -> PlayerState:
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise KeyError(player_id)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def _sync_state(self) -> None:
        self.state.effect_in_progress = self.guard.effect_in_progress
        self.state.planning = self.guard.planning
        self.state.sudden_death = self.sudden_death.state() if self.sudden_death else SuddenDeathState()

    def _notify(self) -> None:
        if self._disposed:
            return
        self._sync_state()
        for listener in list(self._listeners):
            listener(self)

    def _schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback later unless the engine was disposed or restarted meanwhile."""
        epoch = self._epoch

        def run() -> None:
            if self._disposed or epoch != self._epoch:
                return
            callback()
            self._notify()

        self.scheduler.call_later(delay, run)

    def _reject(self, command: str, reason: str) -> None:
        logger.debug("Ignoring %s: %s", command, reason)

    # ------------------------------------------------------------------
    # Starting order
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin the game by rolling for the starting order."""
        self._begin_starting_order()
        self._notify()

    def _begin_starting_order(self) -> None:
        self.state.starting_order = StartingOrderState(active=True)
        self.state.phase = TurnPhase.STARTING_ORDER
        self.state.can_roll_dice = False
        self.state.turn_feedback = "Determining the starting order..."
        self._schedule(0, self._roll_starting_dice)

    def _roll_starting_dice(self) -> None:
        order = self.state.starting_order
        to_roll = [p for p in self.players if p.player_id not in order.rolls]
        if not to_roll:
            self._check_starting_ties()
            return

        player = to_roll[0]
        value = self.rng.randint(1, 6)
        order.rolls[player.player_id] = value
        order.rolling_player_id = player.player_id
        self.state.turn_feedback = f"{player.name}: rolled {value}"
        self.event_log.log(EventType.STARTING_ROLL, player_id=player.player_id, value=value)
        self._schedule(self.timings.starting_roll, self._roll_starting_dice)

    def _check_starting_ties(self) -> None:
        order = self.state.starting_order
        groups: Dict[int, List[int]] = defaultdict(list)
        for player in self.players:
            groups[order.rolls[player.player_id]].append(player.player_id)

        tied = [pid for ids in groups.values() if len(ids) > 1 for pid in ids]
        if not tied:
            self._finalize_starting_order()
            return

        # Only tied players roll again; everyone else keeps their value.
        for pid in tied:
            del order.rolls[pid]
        order.rolling_player_id = None
        self.state.turn_feedback = "Tie! Rolling again..."
        self.event_log.log(EventType.STARTING_TIE, player_ids=tied)
        self._schedule(self.timings.starting_tie, self._roll_starting_dice)

    def _finalize_starting_order(self) -> None:
        order = self.state.starting_order
        self.players.sort(key=lambda p: order.rolls[p.player_id], reverse=True)
        order.active = False
        order.rolling_player_id = None

        first = self.players[0]
        self.state.phase = TurnPhase.WAITING_FOR_DICE
        self.state.current_player_index = 0
        self.state.can_roll_dice = True
        self.state.turn_feedback = f"{first.name} starts"
        self.event_log.log(
            EventType.STARTING_ORDER,
            order=[p.player_id for p in self.players],
            rolls=dict(order.rolls),
        )
        self.event_log.log(EventType.TURN_START, player_id=first.player_id, turn=self.state.current_turn)
        self._clear_feedback_later(self.timings.starting_message_clear)

    # ------------------------------------------------------------------
    # Dice and movement
    # ------------------------------------------------------------------

    def roll_dice(self) -> None:
        """Roll for the current player. Valid only while waiting for dice."""
        if self.state.is_game_ended:
            return self._reject("roll_dice", "game has ended")
        if self.state.phase != TurnPhase.WAITING_FOR_DICE:
            return self._reject("roll_dice", f"phase is {self.state.phase.value}")
        if not self.state.can_roll_dice:
            return self._reject("roll_dice", "rolling is disabled")

        self.state.can_roll_dice = False
        self.state.phase = TurnPhase.ROLLING_DICE
        self._animate_dice()
        self._notify()

    def _animate_dice(self) -> None:
        final_value = self.rng.randint(1, 6)
        ticks = self.timings.dice_ticks
        self.state.is_dice_rolling = True
        self.state.turn_feedback = "Rolling the dice..."

        def tick(count: int) -> None:
            if count >= ticks:
                self.state.dice_value = final_value
                self.state.is_dice_rolling = False
                self.state.turn_feedback = f"Dice: {final_value}"
                self.event_log.log(
                    EventType.DICE_ROLL,
                    player_id=self.get_current_player().player_id,
                    value=final_value,
                )
                self._schedule(self.timings.dice_settle, self._move_step_by_step)
                return
            self.state.dice_value = self.face_rng.randint(1, 6)
            self.state.turn_feedback = f"Dice: {self.state.dice_value}"
            count += 1
            delay = self.timings.dice_tick_fast if count < ticks / 2 else self.timings.dice_tick_slow
            self._schedule(delay, lambda: tick(count))

        self._schedule(self.timings.dice_first_tick, lambda: tick(0))

    def _move_step_by_step(self) -> None:
        player = self.get_current_player()
        steps = self.state.dice_value
        start = player.position
        target = (start + steps) % BOARD_SIZE

        self.state.phase = TurnPhase.MOVING_PAWN
        self.state.highlighted_tile = None
        self.state.turn_feedback = f"{player.name} is moving..."

        def step(taken: int) -> None:
            if taken >= steps:
                self.state.highlighted_tile = target
                self.state.turn_feedback = f"{player.name} is on tile {target + 1}"
                self.event_log.log(
                    EventType.MOVE,
                    player_id=player.player_id,
                    from_position=start,
                    to_position=target,
                    spaces=steps,
                )
                self._schedule(self.timings.landing_pause, lambda: self._process_tile_effect(target))
                return
            player.position = (player.position + 1) % BOARD_SIZE
            self.state.highlighted_tile = player.position
            self.state.turn_feedback = f"{player.name}: tile {player.position + 1}"
            self._schedule(self.timings.move_step, lambda: step(taken + 1))

        self._schedule(self.timings.move_first_step, lambda: step(0))

    # ------------------------------------------------------------------
    # Tile effects
    # ------------------------------------------------------------------

    def _process_tile_effect(self, position: int) -> None:
        """Resolve the landing tile for the current player, once per landing."""
        if self.state.is_game_ended:
            return self._reject("tile effect", "game has ended")
        if self.guard.busy:
            return self._reject("tile effect", "an effect or turn advance is already in progress")

        player = self.get_current_player()
        tile = self.board.get_tile(position)

        self.guard.begin_effect()
        self.state.phase = TurnPhase.RESOLVING_TILE
        self.state.highlighted_tile = position
        self.state.turn_feedback = f"{player.name}: {tile.title}"
        self.event_log.log(EventType.LAND, player_id=player.player_id, tile=position, title=tile.title)

        outcome = self.resolver.resolve(tile, self.players, self.state.current_player_index)
        if outcome.question is not None:
            self._ask_question(outcome.question, player, tile_index=position)
            return

        effect = outcome.effect
        self.state.turn_feedback = effect.message
        self._schedule(self.timings.highlight_clear, self._clear_highlight)

        if effect.requires_ack:
            self.state.pending_effect = effect
            self.state.phase = TurnPhase.SHOWING_POPUP
            return

        # Nothing to acknowledge: keep the effect lock until the turn advances.
        self.guard.exit_planning()
        delay = self.timings.end_turn_with_effect if effect.score_changes else self.timings.end_turn_no_effect
        self._schedule(delay, self._finish_effect)

    def _finish_effect(self) -> None:
        self.guard.release()
        self._end_turn()

    def _clear_highlight(self) -> None:
        if self.state.phase in (TurnPhase.RESOLVING_TILE, TurnPhase.SHOWING_POPUP):
            self.state.highlighted_tile = None

    def acknowledge_tile_effect(self) -> None:
        """Close the tile-effect panel and advance the turn."""
        if self.state.pending_effect is None:
            return self._reject("acknowledge_tile_effect", "no tile effect pending")
        self.state.pending_effect = None
        self.state.turn_feedback = None
        self.guard.release()
        self._end_turn()
        self._notify()

    def _on_watchdog_timeout(self) -> None:
        """The acknowledgement never arrived: drop the effect panel, keep a question panel."""
        if self._disposed:
            return
        self.event_log.log(
            EventType.WATCHDOG_RELEASE,
            player_id=self.get_current_player().player_id,
            effect_dismissed=self.state.pending_effect is not None,
            question_kept=self.state.pending_question is not None,
        )
        if self.state.pending_effect is not None:
            self.state.pending_effect = None
            self.state.turn_feedback = None
            self._end_turn()
        self._notify()

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    def _ask_question(
        self,
        question: Question,
        player: PlayerState,
        tile_index: Optional[int] = None,
        sudden_death: bool = False,
    ) -> None:
        self.state.pending_question = PendingQuestion(
            question=question,
            player_id=player.player_id,
            tile_index=tile_index,
            is_sudden_death=sudden_death,
        )
        self.state.phase = TurnPhase.TIE_BREAK if sudden_death else TurnPhase.SHOWING_POPUP
        self.state.can_roll_dice = False
        self.event_log.log(
            EventType.QUESTION_ASKED,
            player_id=player.player_id,
            question=question.text,
            difficulty=question.difficulty.value,
            is_bonus=question.is_bonus,
            sudden_death=sudden_death,
        )

    def answer_question(self, option_index: int) -> None:
        """Submit an answer to the pending question. Only the first answer counts."""
        pending = self.state.pending_question
        if pending is None:
            return self._reject("answer_question", "no question pending")
        if pending.answered:
            return self._reject("answer_question", "question already answered")
        if not isinstance(option_index, int) or not 0 <= option_index < len(pending.question.options):
            return self._reject("answer_question", f"option {option_index!r} out of range")

        question = pending.question
        player = self.get_player(pending.player_id)
        correct = question.is_correct(option_index)
        pending.answered_index = option_index
        pending.is_correct = correct

        points = 0
        if pending.is_sudden_death:
            self.sudden_death.record(player.player_id, correct)
            pending.feedback = "Correct!" if correct else "Wrong answer"
        elif correct:
            points = self.config.bonus_question_points if question.is_bonus else self.config.regular_question_points
            player.score += points
            if question.is_bonus:
                player.bonus_correct_count += 1
            pending.feedback = f"Correct! +{points} points"
        else:
            pending.feedback = "Wrong answer (0 points)"

        self.event_log.log(
            EventType.QUESTION_ANSWERED,
            player_id=player.player_id,
            option_index=option_index,
            correct=correct,
            points=points,
            sudden_death=pending.is_sudden_death,
        )
        self._notify()

    def acknowledge_question(self) -> None:
        """Close the question panel and advance the turn or the tie-break."""
        pending = self.state.pending_question
        if pending is None:
            return self._reject("acknowledge_question", "no question pending")

        self.state.pending_question = None
        self.state.turn_feedback = None
        self.guard.release()

        if pending.is_sudden_death:
            if not pending.answered:
                self.sudden_death.record(pending.player_id, False)
            self._advance_sudden_death()
        else:
            self._end_turn()
        self._notify()

    # ------------------------------------------------------------------
    # Turn advancement and game end
    # ------------------------------------------------------------------

    def _end_turn(self) -> None:
        if self.state.is_game_ended:
            return
        if self.guard.busy:
            return self._reject("end_turn", "locks still held")

        round_complete = self.state.current_player_index == len(self.players) - 1
        if self.state.game_mode == GameMode.TURN_BASED:
            if round_complete and self.state.current_turn >= self.state.max_turns:
                self._check_game_end()
                return
        elif self.pool.is_exhausted:
            self._check_game_end()
            return
        if round_complete:
            self.state.current_turn += 1

        next_index = (self.state.current_player_index + 1) % len(self.players)
        player = self.players[next_index]
        self.state.current_player_index = next_index
        self.state.phase = TurnPhase.WAITING_FOR_DICE
        self.state.dice_value = 0
        self.state.can_roll_dice = True
        self.state.is_dice_rolling = False
        self.state.highlighted_tile = None
        self.state.turn_feedback = f"{player.name}'s turn"
        self.state.turn_transition_message = f"Next up: {player.name}"
        self.event_log.log(EventType.TURN_START, player_id=player.player_id, turn=self.state.current_turn)
        self._clear_feedback_later(self.timings.feedback_clear)

    def _clear_feedback_later(self, delay: float) -> None:
        message = self.state.turn_feedback

        def clear() -> None:
            if self.state.turn_feedback == message:
                self.state.turn_feedback = None

        self._schedule(delay, clear)

    def _check_game_end(self, allow_sudden_death: bool = True) -> None:
        ranking = rank_players(self.players)
        if not ranking.is_tied:
            self._end_game(ranking.winner)
            return

        if not allow_sudden_death:
            leader = ranking.bonus_leaders[0]
            logger.info(
                "Ending without sudden death: %d players tied, %s wins as first bonus leader",
                len(ranking.bonus_leaders),
                leader.name,
            )
            self._end_game(leader)
            return

        self._start_sudden_death(ranking.bonus_leaders)

    def _end_game(self, winner: PlayerState) -> None:
        self.guard.release()
        self._epoch += 1
        self.state.pending_question = None
        self.state.pending_effect = None
        self.state.is_game_ended = True
        self.state.winner_id = winner.player_id
        self.state.can_roll_dice = False
        self.state.is_dice_rolling = False
        self.state.phase = TurnPhase.GAME_OVER
        self.state.turn_feedback = f"{winner.name} wins!"

        standings = rank_players(self.players).standings
        self.event_log.log(
            EventType.GAME_END,
            player_id=winner.player_id,
            standings=[
                {"player_id": p.player_id, "score": p.score, "bonus_correct": p.bonus_correct_count}
                for p in standings
            ],
            sudden_death_rounds=self.sudden_death.round if self.sudden_death else 0,
        )
        logger.info("Game over: %s wins with %d points", winner.name, winner.score)

    def end_game_now(self) -> None:
        """Rank players on current scores immediately, skipping sudden death."""
        if self.state.is_game_ended:
            return self._reject("end_game_now", "game has ended")
        self.guard.release()
        self._epoch += 1
        self.state.pending_question = None
        self.state.pending_effect = None
        self._check_game_end(allow_sudden_death=False)
        self._notify()

    # ------------------------------------------------------------------
    # Sudden death
    # ------------------------------------------------------------------

    def _start_sudden_death(self, contenders: List[PlayerState]) -> None:
        self.sudden_death = SuddenDeath(contenders, self.pool)
        self.state.phase = TurnPhase.TIE_BREAK
        self.state.can_roll_dice = False
        self.state.turn_feedback = "TIE! Sudden death begins!"
        self.event_log.log(EventType.SUDDEN_DEATH_START, player_ids=[p.player_id for p in contenders])
        logger.info("Sudden death between %s", ", ".join(p.name for p in contenders))
        self._ask_sudden_death_question()

    def _ask_sudden_death_question(self) -> None:
        duel = self.sudden_death
        if duel is None or duel.is_resolved:
            return
        player = duel.current
        self.state.current_player_index = self.players.index(player)

        question = duel.round_question()
        if question is None:
            self._end_game(duel.winner)
            return
        self._ask_question(question, player, sudden_death=True)
        self.state.turn_feedback = f"Sudden death: {player.name}"

    def _advance_sudden_death(self) -> None:
        duel = self.sudden_death
        step = duel.advance()
        if step == RoundStep.NEXT_CONTENDER:
            self._ask_sudden_death_question()
        elif step == RoundStep.NEXT_ROUND:
            self.state.turn_feedback = f"Round {duel.round} begins..."
            self.event_log.log(
                EventType.SUDDEN_DEATH_ROUND,
                round=duel.round,
                player_ids=[p.player_id for p in duel.contenders],
            )
            self._schedule(self.timings.sudden_death_round, self._ask_sudden_death_question)
        else:
            self._end_game(duel.winner)

    # ------------------------------------------------------------------
    # Developer tools and lifecycle
    # ------------------------------------------------------------------

    def force_move(self, player_index: int, tile_delta: int) -> None:
        """Move a player directly by tile_delta (1-39) and resolve the landing."""
        if self.state.is_game_ended:
            return self._reject("force_move", "game has ended")
        if self.state.phase != TurnPhase.WAITING_FOR_DICE:
            return self._reject("force_move", f"phase is {self.state.phase.value}")
        if self.guard.busy:
            return self._reject("force_move", "locks held")
        if not isinstance(player_index, int) or not 0 <= player_index < len(self.players):
            return self._reject("force_move", f"player index {player_index!r} out of range")
        if not isinstance(tile_delta, int):
            return self._reject("force_move", f"tile delta {tile_delta!r} is not an integer")

        delta = min(max(tile_delta, 1), BOARD_SIZE - 1)
        self.state.current_player_index = player_index
        player = self.players[player_index]
        start = player.position
        player.position = (start + delta) % BOARD_SIZE

        self.state.dice_value = delta
        self.state.can_roll_dice = False
        self.state.phase = TurnPhase.RESOLVING_TILE
        self.state.highlighted_tile = player.position
        self.event_log.log(
            EventType.MOVE,
            player_id=player.player_id,
            from_position=start,
            to_position=player.position,
            spaces=delta,
            direct=True,
        )
        self._process_tile_effect(player.position)
        self._notify()

    def restart(self) -> None:
        """Reset every player and replay the starting order."""
        self._epoch += 1
        self.guard.release()
        for player in self.players:
            player.reset(self.config.initial_score)
        self.pool.reset()
        self.sudden_death = None
        self.state = EngineState(game_mode=self.config.game_mode, max_turns=self.state.max_turns)
        self.event_log.log(EventType.RESTART)
        logger.info("Game restarted")
        self._begin_starting_order()
        self._notify()

    def dispose(self) -> None:
        """Stop all pending callbacks. The engine is unusable afterwards."""
        self._epoch += 1
        self.guard.release()
        self._disposed = True
        self._listeners.clear()


def create_game(
    config: GameConfig,
    players: Sequence[Player],
    board: Optional[Board] = None,
    questions: Optional[Sequence[Question]] = None,
    scheduler: Optional[Scheduler] = None,
    rng: Optional[random.Random] = None,
) -> GameState:
    """
    Create a new game and start the starting-order rolls.

    Args:
        config: Game configuration
        players: Players in setup order (2-4 by default)
        board: Custom board, standard board when omitted
        questions: Custom question list, standard bank when omitted
        scheduler: Timer source, asyncio event loop when omitted
        rng: Source of game randomness, seeded from config when omitted

    Returns:
        Started GameState
    """
    if not config.min_players <= len(players) <= config.max_players:
        raise InvalidSetupError(
            f"Game requires {config.min_players}-{config.max_players} players, got {len(players)}"
        )
    ids = [p.player_id for p in players]
    if len(set(ids)) != len(ids):
        raise InvalidSetupError(f"Player ids must be unique, got {ids}")
    if config.game_mode == GameMode.TURN_BASED and config.max_turns not in (None, *config.available_turn_counts):
        logger.debug(
            "Turn count %s not in %s, using %d",
            config.max_turns,
            config.available_turn_counts,
            config.default_turn_count,
        )

    game = GameState(config, players, board=board, questions=questions, scheduler=scheduler, rng=rng)
    game.start()
    return game
