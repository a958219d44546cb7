#!/usr/bin/env python3
"""
Minimal CLI for simulating trivia board games.

This script drives the turn engine on a virtual clock with simulated
players that answer questions with a fixed accuracy.
"""

import argparse
from typing import Dict, Optional

from game_logger import GameLogger
from trivia.agents import Agent, RandomAgent, SkilledAgent
from trivia.config import GameConfig, GameMode
from trivia.game import GameState, TurnPhase, create_game
from trivia.player import Player
from trivia.ranking import rank_players
from trivia.scheduler import ManualScheduler
from trivia.settings import get_settings

PLAYER_NAMES = ["Ayşe", "Burak", "Cemile", "Deniz"]
MODES = {"turns": GameMode.TURN_BASED, "questions": GameMode.QUESTION_BASED}


def needs_input(game: GameState) -> bool:
    """True when the game is waiting for a player or the game is over."""
    state = game.state
    if state.is_game_ended:
        return True
    if state.pending_question is not None or state.pending_effect is not None:
        return True
    return state.phase == TurnPhase.WAITING_FOR_DICE and state.can_roll_dice


def play_step(game: GameState, agents: Dict[int, Agent]) -> None:
    """Send the one command the current situation calls for."""
    state = game.state
    pending = state.pending_question
    if pending is not None:
        if pending.answered:
            game.acknowledge_question()
        else:
            game.answer_question(agents[pending.player_id].choose_answer(pending.question))
    elif state.pending_effect is not None:
        game.acknowledge_tile_effect()
    else:
        game.roll_dice()


def print_game_summary(game: GameState) -> None:
    """Print final game summary."""
    print("\n" + "=" * 60)
    print("GAME OVER")
    print("=" * 60)

    winner = game.get_player(game.state.winner_id)
    print(f"\nWinner: {winner.name} ({winner.score} points)")
    if game.sudden_death is not None:
        print(f"Decided by sudden death after {game.sudden_death.round} round(s)")

    print("\nFinal Standings:")
    for player in rank_players(game.players).standings:
        print(
            f"  {player.name}: {player.score} points | "
            f"{player.bonus_correct_count} bonus correct | "
            f"{player.bankrupt_count} bankruptcies"
        )

    print(f"\nTurns played: {game.state.current_turn}")


def simulate_game(
    num_players: int = 4,
    mode: str = "turns",
    max_turns: int = 10,
    seed: Optional[int] = None,
    accuracy: Optional[float] = 0.6,
    verbose: bool = True,
    log_file: Optional[str] = None,
) -> GameState:
    """
    Simulate a complete game.

    Args:
        num_players: Number of players (2-4)
        mode: 'turns' for a fixed number of rounds, 'questions' to play until the pool runs out
        max_turns: Number of rounds for the 'turns' mode (10, 15 or 20)
        seed: Random seed for reproducibility
        accuracy: Chance that an agent knows the answer, None for random guessing
        verbose: Whether to print turn by turn output
        log_file: Path to JSONL log file (None = no log)
    """
    settings = get_settings()
    players = [Player(i, PLAYER_NAMES[i]) for i in range(num_players)]
    agents: Dict[int, Agent] = {}
    for p in players:
        agent_seed = None if seed is None else seed + 100 + p.player_id
        if accuracy is None:
            agents[p.player_id] = RandomAgent(p.player_id, p.name, seed=agent_seed)
        else:
            agents[p.player_id] = SkilledAgent(p.player_id, p.name, accuracy, seed=agent_seed)

    config = GameConfig(
        game_mode=MODES[mode],
        max_turns=max_turns,
        seed=seed,
        timings=settings.build_timings(),
    )
    scheduler = ManualScheduler()
    game = create_game(config, players, scheduler=scheduler)
    logger = GameLogger(log_file) if log_file is not None else None

    if verbose:
        print(f"Starting {mode} game with {num_players} players")
        print(f"Seed: {seed}")

    # Safety limit for commands, not turns
    max_iterations = 10000
    iteration_count = 0
    printed_events = 0

    while not game.state.is_game_ended and iteration_count < max_iterations:
        iteration_count += 1
        if not scheduler.run_until(lambda: needs_input(game)):
            print("\n!!! Engine stalled with nothing scheduled !!!")
            break
        if game.state.is_game_ended:
            break
        play_step(game, agents)

        if logger is not None:
            logger.flush_engine_events(game)
        if verbose:
            for event in game.event_log.events[printed_events:]:
                print(f"  {event}")
            printed_events = len(game.event_log.events)

    if iteration_count >= max_iterations:
        print(f"\n!!! SAFETY LIMIT HIT ({max_iterations} iterations) !!!")

    if logger is not None:
        logger.flush_engine_events(game)

    if verbose and game.state.is_game_ended:
        print_game_summary(game)
        if logger is not None:
            print(f"\nGame logged to: {logger.log_file}")

    return game


def main():
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(description="Simulate a literature trivia board game")
    parser.add_argument(
        "--players",
        type=int,
        default=4,
        choices=range(2, 5),
        help="Number of players (2-4)",
    )
    parser.add_argument(
        "--mode",
        type=str,
        default="turns",
        choices=sorted(MODES),
        help="Game length: fixed rounds or until the question pool runs out",
    )
    parser.add_argument("--turns", type=int, default=10, choices=[10, 15, 20], help="Rounds in turns mode")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--accuracy",
        type=float,
        default=0.6,
        help="Chance that a player knows the answer (negative = random guessing)",
    )
    parser.add_argument("--quiet", action="store_true", help="Reduce output verbosity")
    parser.add_argument("--log-file", type=str, default=None, help="Path to JSONL event log")

    args = parser.parse_args()
    get_settings().configure_logging()

    simulate_game(
        num_players=args.players,
        mode=args.mode,
        max_turns=args.turns,
        seed=args.seed,
        accuracy=args.accuracy if args.accuracy >= 0 else None,
        verbose=not args.quiet,
        log_file=args.log_file,
    )


if __name__ == "__main__":
    main()
