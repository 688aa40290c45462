"""
Headless snake runner.

Plays one session with the RandomPlayer autopilot, ticking the engine
directly instead of on a timer, and records the high score.
"""

import argparse
import json
import logging
import random
from typing import Callable, Dict, Optional

import config
from domain.constants import GRID_SIZE, RUNNING, MILESTONE, GAME_OVER_EVENT
from engine import EngineConfig, SnakeEngine
from players.random_player import RandomPlayer
from services.game_session import GameSession


def run_simulation(
    game_params: argparse.Namespace,
    high_scores=None,
    printer: Callable[[str], None] = print,
) -> Dict:
    """
    Runs a single autopilot session until game over or the tick limit.

    Args:
        game_params: An object (like argparse.Namespace) containing
                     seed, max_ticks, grid_size and print_board.
        high_scores: Optional high score store (see GameSession).
        printer: Where board and event lines go.

    Returns:
        A dictionary summarizing the session (score, ticks, length, speed, high score).
    """
    seed: Optional[int] = getattr(game_params, 'seed', None)
    engine = SnakeEngine(
        config=EngineConfig(grid_size=getattr(game_params, 'grid_size', GRID_SIZE)),
        rng=random.Random(seed),
    )
    session = GameSession(engine=engine, high_scores=high_scores)
    player = RandomPlayer(rng=random.Random(None if seed is None else seed + 1))

    session.subscribe(MILESTONE, lambda s: printer(f"Milestone at score {s.score}: speed now {s.speed}ms"))
    session.subscribe(GAME_OVER_EVENT, lambda s: printer(f"Game Over at score {s.score}"))

    session.start()
    ticks = 0
    while engine.get_current_state().lifecycle_state == RUNNING and ticks < game_params.max_ticks:
        session.request_direction(player.get_move(engine.get_current_state()))
        engine.tick()
        ticks += 1
        if getattr(game_params, 'print_board', False):
            printer("\n" + engine.get_current_state().print_board() + "\n")

    final_state = engine.get_current_state()
    return {
        "score": final_state.score,
        "ticks": ticks,
        "length": len(final_state.snake),
        "speed": final_state.speed,
        "state": final_state.lifecycle_state,
        "high_score": session.high_score,
    }


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run a headless snake session with the random autopilot."
    )
    parser.add_argument("--seed", type=int, required=False, default=None,
                        help="Seed for food placement and the autopilot")
    parser.add_argument("--max-ticks", dest="max_ticks", type=int, required=False, default=1000,
                        help="Stop after this many ticks")
    parser.add_argument("--grid-size", dest="grid_size", type=int, required=False, default=GRID_SIZE,
                        help="Board dimension (N x N)")
    parser.add_argument("--print-board", dest="print_board", action="store_true",
                        help="Print the board after every tick")
    parser.add_argument("--no-persist", dest="no_persist", action="store_true",
                        help="Do not read or write the stored high score")

    args = parser.parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    if args.max_ticks <= 0:
        parser.error("--max-ticks must be positive")

    high_scores = None
    if not args.no_persist:
        from data_access.repositories import HighScoreRepository
        from database import init_database

        init_database()
        high_scores = HighScoreRepository()

    try:
        result = run_simulation(args, high_scores=high_scores)
    except ValueError as e:
        parser.error(str(e))

    print("\nSimulation Result Summary:")
    print(json.dumps(result, indent=2))
    return result


if __name__ == "__main__":
    main()
