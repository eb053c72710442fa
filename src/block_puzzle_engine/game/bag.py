from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .pieces import PieceType


def _restore_rng(state: Dict[str, Any]) -> np.random.Generator:
    if not isinstance(state, dict) or state.get("bit_generator") != "PCG64":
        raise ValueError("bag state must carry a PCG64 bit generator state")
    bit_generator = np.random.PCG64()
    try:
        bit_generator.state = state
    except (TypeError, KeyError, ValueError, OverflowError) as exc:
        raise ValueError(f"invalid PCG64 state: {exc}") from exc
    return np.random.Generator(bit_generator)


class PieceBagGenerator:
    """Bag randomizer over every piece type (generalization of 7-bag).

    The bag holds one instance of each kind in shuffled order and is drawn
    from the front; an empty bag is refilled with a freshly shuffled full
    set, so every kind appears exactly once per bag cycle.

    Both the remaining order and the RNG state are serialized, so a
    generator rebuilt from `serialize_state()` yields exactly the sequence
    the serialized one would have.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        kinds: Sequence[PieceType] = tuple(PieceType),
    ) -> None:
        self._rng = rng if rng is not None else np.random.default_rng(seed)
        self._kinds = tuple(PieceType(k) for k in kinds)
        if not self._kinds:
            raise ValueError("PieceBagGenerator requires non-empty kinds")
        self._bag: List[PieceType] = []

    @property
    def kinds(self) -> tuple[PieceType, ...]:
        return self._kinds

    @property
    def remaining(self) -> List[PieceType]:
        return list(self._bag)

    def _new_bag(self, rng: np.random.Generator) -> List[PieceType]:
        bag = list(self._kinds)
        rng.shuffle(bag)
        return bag

    def get_next_pieces(self, count: int) -> List[PieceType]:
        """Consume and return the next `count` pieces"""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        result: List[PieceType] = []
        for _ in range(count):
            if not self._bag:
                self._bag = self._new_bag(self._rng)
            result.append(self._bag.pop(0))
        return result

    def peek_next_pieces(self, count: int) -> List[PieceType]:
        """Same pieces `get_next_pieces(count)` would return, without consuming"""
        if count < 0:
            raise ValueError(f"count must be >= 0, got {count}")
        upcoming = list(self._bag)
        if len(upcoming) < count:
            # future bags come from a throwaway copy of the RNG
            rng = _restore_rng(self._rng.bit_generator.state)
            while len(upcoming) < count:
                upcoming.extend(self._new_bag(rng))
        return upcoming[:count]

    def serialize_state(self) -> str:
        return json.dumps(
            {
                "remaining": [int(k) for k in self._bag],
                "kinds": [int(k) for k in self._kinds],
                "rng": self._rng.bit_generator.state,
            },
            separators=(",", ":"),
        )

    @classmethod
    def from_state(cls, blob: str) -> "PieceBagGenerator":
        if not isinstance(blob, str) or not blob:
            raise ValueError("bag state must be a non-empty string")
        try:
            data = json.loads(blob)
        except json.JSONDecodeError as exc:
            raise ValueError(f"bag state is not valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("bag state must be a JSON object")

        kinds = _parse_kinds(data.get("kinds"), "kinds")
        if len(set(kinds)) != len(kinds):
            raise ValueError("bag kinds must be unique")
        remaining = _parse_kinds(data.get("remaining"), "remaining")
        if len(set(remaining)) != len(remaining):
            raise ValueError("bag remainder repeats a piece kind")
        if not set(remaining) <= set(kinds):
            raise ValueError("bag remainder holds kinds outside the bag")

        gen = cls(rng=_restore_rng(data.get("rng")), kinds=kinds)
        gen._bag = remaining
        return gen


def _parse_kinds(values: Any, field: str) -> List[PieceType]:
    if not isinstance(values, list):
        raise ValueError(f"bag state field {field!r} must be a list")
    kinds: List[PieceType] = []
    for v in values:
        if isinstance(v, bool) or not isinstance(v, int):
            raise ValueError(f"bag state field {field!r} holds non-integer {v!r}")
        kinds.append(PieceType(v))  # ValueError on unknown ids
    return kinds
