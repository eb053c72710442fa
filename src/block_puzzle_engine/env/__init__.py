"""Gymnasium environments for the block puzzle engine."""

from __future__ import annotations

from gymnasium.envs.registration import register

ENV_ID = "BlockPuzzle-10x10-v0"

register(
    id=ENV_ID,
    entry_point="block_puzzle_engine.env.block_puzzle_env:BlockPuzzleEnv",
)

__all__ = ["ENV_ID"]
