from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from .grid import BOARD_CELLS, MAX_CELL_VALUE
from .pieces import PieceType

HAND_SIZE = 3

Hand = Tuple[Optional[PieceType], ...]


class GameStatus(str, Enum):
    PLAYING = "playing"
    ENDED = "ended"


class GameState(BaseModel):
    """Persisted aggregate of one game session.

    Frozen: every turn produces a new instance. `grid` is the row-major
    board (0 empty, kind + 1 filled); `hand` always has HAND_SIZE slots,
    a slot is None once its piece has been played this round.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    grid: Tuple[StrictInt, ...]
    hand: Hand
    bag_state: str = Field(min_length=1)
    score: StrictInt = Field(ge=0)
    combo: StrictInt = Field(default=0, ge=0)
    max_combo: StrictInt = Field(default=0, ge=0)
    total_lines_cleared: StrictInt = Field(default=0, ge=0)
    move_count: StrictInt = Field(default=0, ge=0)
    status: GameStatus = GameStatus.PLAYING

    @field_validator("grid")
    @classmethod
    def _check_grid(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if len(v) != BOARD_CELLS:
            raise ValueError(f"grid must have {BOARD_CELLS} cells, got {len(v)}")
        for cell in v:
            if not (0 <= cell <= MAX_CELL_VALUE):
                raise ValueError(f"grid cell value out of range [0, {MAX_CELL_VALUE}]: {cell}")
        return v

    @field_validator("hand", mode="before")
    @classmethod
    def _check_hand_slots(cls, v: Any) -> Any:
        # slots are piece ids or null; no coercion from bools, floats or strings
        if isinstance(v, (list, tuple)):
            for k in v:
                if k is not None and (isinstance(k, bool) or not isinstance(k, int)):
                    raise ValueError(f"hand slots must be piece ids or null, got {k!r}")
        return v

    @field_validator("hand")
    @classmethod
    def _check_hand(cls, v: Hand) -> Hand:
        if len(v) != HAND_SIZE:
            raise ValueError(f"hand must have {HAND_SIZE} slots, got {len(v)}")
        return v

    @model_validator(mode="after")
    def _check_consistency(self) -> "GameState":
        if self.status == GameStatus.PLAYING and all(k is None for k in self.hand):
            raise ValueError("a game in progress must hold at least one piece")
        if self.combo > self.max_combo:
            raise ValueError(f"combo {self.combo} exceeds max_combo {self.max_combo}")
        return self

    @property
    def is_over(self) -> bool:
        return self.status == GameStatus.ENDED

    def pieces_in_hand(self) -> Tuple[PieceType, ...]:
        return tuple(k for k in self.hand if k is not None)
