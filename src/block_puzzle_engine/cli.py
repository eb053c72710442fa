from __future__ import annotations

import argparse
import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

import gymnasium as gym

from block_puzzle_engine.env import ENV_ID
from block_puzzle_engine.game import EngineError, GameEngine, GameState, StateCorruptionError
from block_puzzle_engine.utils.logging import setup_logger


@dataclass(frozen=True)
class ReplayReport:
    final_state: GameState
    moves_applied: int
    error: Optional[EngineError] = None

    @property
    def completed(self) -> bool:
        return self.error is None


def replay_game(engine: GameEngine, initial: Mapping[str, Any] | str, moves: Sequence[Mapping[str, int]]) -> ReplayReport:
    """Re-run recorded moves from a snapshot and stop at the first rejected one.

    Raises StateCorruptionError when the initial snapshot is malformed.
    """
    state = engine.from_state(initial)
    for i, move in enumerate(moves):
        result = engine.place_piece(state, int(move["piece_index"]), int(move["row"]), int(move["col"]))
        if not result.success:
            return ReplayReport(final_state=state, moves_applied=i, error=result.error)
        state = result.state
    return ReplayReport(final_state=state, moves_applied=len(moves))


def simulate_random_games(games: int, seed: Optional[int] = None) -> List[int]:
    """Play `games` episodes choosing uniformly among legal placements; returns final scores."""
    rng = random.Random(seed)
    env = gym.make(ENV_ID)
    scores: List[int] = []
    try:
        for g in range(games):
            obs, info = env.reset(seed=None if seed is None else seed + g)
            done = False
            while not done:
                action = rng.choice(info["valid_actions"])
                obs, reward, terminated, truncated, info = env.step(action)
                done = terminated or truncated
            scores.append(int(info["score"]))
    finally:
        env.close()
    return scores


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="block-puzzle")
    p.add_argument("--log-level", type=str, default="info")
    p.add_argument("--no-rich", action="store_true", help="Plain stream logging instead of rich")
    sub = p.add_subparsers(dest="command", required=True)

    sim = sub.add_parser("simulate", help="Play random-legal-move games through the gym env")
    sim.add_argument("--games", type=int, default=10)
    sim.add_argument("--seed", type=int, default=None)

    rep = sub.add_parser("replay", help="Re-run a recorded game and verify its claimed score")
    rep.add_argument("file", type=Path,
                     help="JSON with 'initial_state', 'moves' and optional 'claimed_score'")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log = setup_logger(name="block_puzzle_engine", use_rich=not args.no_rich, level=args.log_level)

    if args.command == "simulate":
        scores = simulate_random_games(args.games, args.seed)
        for i, score in enumerate(scores):
            log.info("game %d: score %d", i, score)
        if scores:
            log.info("mean score %.1f over %d games", sum(scores) / len(scores), len(scores))
        return 0

    record = json.loads(args.file.read_text(encoding="utf-8"))
    engine = GameEngine()
    try:
        report = replay_game(engine, record["initial_state"], record.get("moves", []))
    except StateCorruptionError as exc:
        log.error("initial snapshot rejected: %s", exc)
        return 2

    if not report.completed:
        log.error("move %d rejected: %s", report.moves_applied, report.error)
        return 1
    score = report.final_state.score
    claimed = record.get("claimed_score")
    if claimed is not None and int(claimed) != score:
        log.error("claimed score %s does not match replayed score %d", claimed, score)
        return 1
    log.info("replayed %d moves, score %d, status %s",
             report.moves_applied, score, report.final_state.status.value)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
