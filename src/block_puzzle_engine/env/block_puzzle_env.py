from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from block_puzzle_engine.game import (
    BOARD_SIZE,
    HAND_SIZE,
    GameConfig,
    GameEngine,
    GameGrid,
    GameState,
    PieceType,
    get_piece,
)


def _valid_actions(state: GameState) -> List[Tuple[int, int, int]]:
    """List of (piece_idx, row, col) legal placements"""
    if state.is_over:
        return []
    board = GameGrid.from_array(state.grid)
    actions: List[Tuple[int, int, int]] = []
    for piece_idx, kind in enumerate(state.hand):
        if kind is None:
            continue
        for row, col in board.get_valid_positions(get_piece(kind)):
            actions.append((piece_idx, row, col))
    return actions


def _compute_action_mask(state: GameState) -> np.ndarray:
    mask = np.zeros((HAND_SIZE, BOARD_SIZE, BOARD_SIZE), dtype=np.bool_)
    for piece_idx, row, col in _valid_actions(state):
        mask[piece_idx, row, col] = True
    return mask


class BlockPuzzleEnv(gym.Env):
    """Gymnasium view of the engine for scripted and learned play-testing.

    Every step goes through `GameEngine.place_piece` on the current
    snapshot, so agents exercise exactly the server-side turn logic.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 invalid_action_penalty: float = -1.0,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.engine = GameEngine(config)
        self.render_mode = render_mode
        self.invalid_action_penalty = float(invalid_action_penalty)
        self.terminal_penalty = float(terminal_penalty)

        # Observation: board ids (0 empty, kind+1 filled) and hand kinds (-1 for a played slot)
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=0, high=len(PieceType), shape=(BOARD_SIZE, BOARD_SIZE), dtype=np.int8),
                "hand": spaces.Box(low=-1, high=len(PieceType) - 1, shape=(HAND_SIZE,), dtype=np.int8),
            }
        )

        # Action: (piece_idx, row, col)
        self.action_space = spaces.MultiDiscrete((HAND_SIZE, BOARD_SIZE, BOARD_SIZE))

        self.state: Optional[GameState] = None
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        assert self.state is not None
        grid = np.asarray(self.state.grid, dtype=np.int8).reshape(BOARD_SIZE, BOARD_SIZE)
        hand = np.array([-1 if k is None else int(k) for k in self.state.hand], dtype=np.int8)
        return {"grid": grid, "hand": hand}

    def _get_info(self) -> Dict[str, Any]:
        assert self.state is not None
        return {
            "action_mask": _compute_action_mask(self.state),
            "valid_actions": _valid_actions(self.state),
            "score": self.state.score,
            "combo": self.state.combo,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        # derive the bag seed from the env RNG so seeded resets are reproducible
        bag_seed = int(self.np_random.integers(0, 2**31 - 1))
        self.state = self.engine.new_game(seed=bag_seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: np.ndarray | Tuple[int, int, int]):
        if self.state is None:
            raise RuntimeError("BlockPuzzleEnv.reset() must be called before step()")
        piece_idx, row, col = map(int, action)

        result = self.engine.place_piece(self.state, piece_idx, row, col)
        self.state = result.state
        self._steps += 1

        reward_components: Dict[str, float] = {}
        if result.success:
            assert result.summary is not None
            reward_components["points"] = float(result.summary.points_awarded)
        else:
            reward_components["invalid"] = self.invalid_action_penalty

        terminated = self.state.is_over
        truncated = self._steps >= self.engine.config.max_episode_steps
        if terminated:
            reward_components["terminal"] = self.terminal_penalty

        reward = float(sum(reward_components.values()))
        info = self._get_info()
        info["reward_components"] = reward_components
        info["error"] = None if result.error is None else str(result.error)
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array" or self.state is None:
            return None
        grid = self._get_obs()["grid"]
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = _hex_to_rgb(get_piece(int(grid[y, x]) - 1).color) if grid[y, x] else (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass


def _hex_to_rgb(value: str) -> Tuple[int, int, int]:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
