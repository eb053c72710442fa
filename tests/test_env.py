# tests/test_env.py
from __future__ import annotations

import gymnasium as gym
import numpy as np

from block_puzzle_engine.env import ENV_ID
from block_puzzle_engine.env.block_puzzle_env import BlockPuzzleEnv
from block_puzzle_engine.env.wrappers import FlattenDiscreteActionWrapper, ResampleInvalidActionWrapper


def test_reset_observation_and_mask() -> None:
    env = BlockPuzzleEnv()
    obs, info = env.reset(seed=0)
    assert obs["grid"].shape == (10, 10)
    assert obs["grid"].sum() == 0
    assert obs["hand"].shape == (3,)
    assert (obs["hand"] >= 0).all()
    assert env.observation_space.contains(obs)
    assert info["action_mask"].shape == (3, 10, 10)
    assert int(info["action_mask"].sum()) == len(info["valid_actions"])
    assert info["score"] == 0


def test_seeded_resets_are_reproducible() -> None:
    a, _ = BlockPuzzleEnv().reset(seed=4)
    b, _ = BlockPuzzleEnv().reset(seed=4)
    assert np.array_equal(a["hand"], b["hand"])


def test_valid_step_rewards_engine_points() -> None:
    env = BlockPuzzleEnv()
    _, info = env.reset(seed=1)
    action = info["valid_actions"][0]
    obs, reward, terminated, truncated, info = env.step(action)
    assert reward == float(info["score"])
    assert reward > 0
    assert obs["hand"][action[0]] == -1
    assert not terminated and not truncated
    assert info["error"] is None


def test_invalid_step_is_penalised_without_state_change() -> None:
    env = BlockPuzzleEnv(invalid_action_penalty=-2.0)
    _, info = env.reset(seed=1)
    action = info["valid_actions"][0]
    obs, _, _, _, _ = env.step(action)
    # the slot just played is empty until the hand is refilled
    new_obs, reward, terminated, _, info = env.step(action)
    assert info["error"] is not None
    assert reward == -2.0
    assert not terminated
    assert np.array_equal(new_obs["grid"], obs["grid"])


def test_registered_env_with_flatten_and_resample() -> None:
    env = ResampleInvalidActionWrapper(FlattenDiscreteActionWrapper(gym.make(ENV_ID)))
    env.reset(seed=2)
    mask = env.get_action_mask()
    assert mask.shape == (300,)
    invalid = int(np.flatnonzero(~mask)[0])
    _, reward, _, _, info = env.step(invalid)
    assert info["error"] is None
    assert reward > 0
    env.close()


def test_flatten_unflatten_order() -> None:
    wrapper = FlattenDiscreteActionWrapper(BlockPuzzleEnv())
    assert wrapper._unflatten(0) == (0, 0, 0)
    assert wrapper._unflatten(1) == (0, 0, 1)
    assert wrapper._unflatten(10) == (0, 1, 0)
    assert wrapper._unflatten(100) == (1, 0, 0)
    assert wrapper._unflatten(299) == (2, 9, 9)


def test_render_rgb_array() -> None:
    env = BlockPuzzleEnv(render_mode="rgb_array")
    _, info = env.reset(seed=3)
    env.step(info["valid_actions"][0])
    img = env.render()
    assert img.shape == (120, 120, 3)
    assert img.dtype == np.uint8
