from __future__ import annotations

import json
import logging
import operator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from .analysis import BoardAnalysis, analyze
from .bag import PieceBagGenerator
from .errors import EngineError, IllegalTransitionError, MoveValidationError, StateCorruptionError
from .grid import GameGrid
from .lines import clear_lines
from .pieces import PieceType, get_piece
from .rules import ScoreCalculator, ScoringRules
from .state import HAND_SIZE, GameState, GameStatus, Hand

logger = logging.getLogger(__name__)


def _as_index(name: str, value: Any) -> int:
    """Integer value of `value` (numpy ints included); bools and floats are rejected."""
    if isinstance(value, bool):
        raise MoveValidationError(f"{name} must be an int, got {value!r}")
    try:
        return operator.index(value)
    except TypeError:
        raise MoveValidationError(f"{name} must be an int, got {value!r}") from None


class HandRefill(str, Enum):
    FULL = "full"  # draw a new hand of three once every slot has been played
    EACH = "each"  # draw one replacement into the slot just played


@dataclass
class GameConfig:
    refill_mode: HandRefill = HandRefill.FULL
    max_episode_steps: int = 10000
    scoring: ScoringRules = field(default_factory=ScoringRules)


@dataclass(frozen=True)
class TurnSummary:
    cleared_rows: Tuple[int, ...]
    cleared_columns: Tuple[int, ...]
    points_awarded: int
    new_combo: int
    hand: Hand
    game_over: bool
    placed_cells: Tuple[Tuple[int, int], ...] = ()
    hand_refilled: bool = False

    @property
    def lines_cleared(self) -> int:
        return len(self.cleared_rows) + len(self.cleared_columns)


@dataclass(frozen=True)
class PlacementResult:
    """Outcome of one `place_piece` call.

    On failure `state` is the very object passed in and `error` says why.
    """

    state: GameState
    summary: Optional[TurnSummary] = None
    error: Optional[EngineError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> "PlacementResult":
        if self.error is not None:
            raise self.error
        return self


class GameEngine:
    """Turn orchestrator: state in, new state out.

    The engine holds configuration only. Board, hand and bag are rebuilt
    from the `GameState` on every call and serialized back into a new
    `GameState`, so one engine can serve any number of sessions.
    """

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        self.score_calculator = ScoreCalculator(self.config.scoring)

    # ------------------------------------------------------------------ lifecycle

    def new_game(self, seed: Optional[int] = None) -> GameState:
        bag = PieceBagGenerator(seed=seed)
        hand = tuple(bag.get_next_pieces(HAND_SIZE))
        logger.info("new game: hand=%s", [k.name for k in hand])
        return GameState(
            grid=tuple(GameGrid().to_array()),
            hand=hand,
            bag_state=bag.serialize_state(),
            score=0,
        )

    # ------------------------------------------------------------------ queries

    def _piece_at(self, state: GameState, piece_index: int) -> PieceType:
        piece_index = _as_index("piece index", piece_index)
        if not (0 <= piece_index < len(state.hand)):
            raise MoveValidationError(
                f"piece index {piece_index} outside hand range [0, {len(state.hand)})"
            )
        kind = state.hand[piece_index]
        if kind is None:
            raise MoveValidationError(f"hand slot {piece_index} has already been played")
        return kind

    def can_place_piece(self, state: GameState, piece_index: int, row: int, col: int) -> bool:
        """Preview check for UIs; never raises for bad input."""
        if state.is_over:
            return False
        try:
            kind = self._piece_at(state, piece_index)
            row, col = _as_index("row", row), _as_index("col", col)
        except MoveValidationError:
            return False
        return GameGrid.from_array(state.grid).can_place_piece(get_piece(kind), row, col)

    def get_valid_positions(self, state: GameState, piece_index: int) -> List[Tuple[int, int]]:
        """Legal anchors for the piece in `piece_index`; empty once the game has ended."""
        if state.is_over:
            return []
        kind = self._piece_at(state, piece_index)
        return GameGrid.from_array(state.grid).get_valid_positions(get_piece(kind))

    def peek_upcoming(self, state: GameState, count: int) -> List[PieceType]:
        return PieceBagGenerator.from_state(state.bag_state).peek_next_pieces(count)

    def analyze(self, state: GameState) -> BoardAnalysis:
        return analyze(GameGrid.from_array(state.grid))

    # ------------------------------------------------------------------ turn

    def place_piece(self, state: GameState, piece_index: int, row: int, col: int) -> PlacementResult:
        if state.status != GameStatus.PLAYING:
            return PlacementResult(state=state, error=IllegalTransitionError("game has already ended"))
        try:
            kind = self._piece_at(state, piece_index)
            piece_index = _as_index("piece index", piece_index)
            row, col = _as_index("row", row), _as_index("col", col)
        except MoveValidationError as exc:
            return PlacementResult(state=state, error=exc)

        board = GameGrid.from_array(state.grid)
        piece = get_piece(kind)
        attempt = board.try_place_piece(piece, row, col)
        if not attempt.success:
            return PlacementResult(
                state=state,
                error=MoveValidationError(f"{kind.name} cannot be placed at ({row}, {col})"),
            )

        cleared = clear_lines(board)
        lines = cleared.line_count
        combo = state.combo + 1 if lines > 0 else 0
        multiplier = self.score_calculator.get_combo_multiplier(combo)
        points = self.score_calculator.calculate_points(piece.cell_count, lines, multiplier)

        hand: List[Optional[PieceType]] = list(state.hand)
        hand[piece_index] = None
        bag = PieceBagGenerator.from_state(state.bag_state)
        refilled = False
        if self.config.refill_mode == HandRefill.EACH:
            hand[piece_index] = bag.get_next_pieces(1)[0]
            refilled = True
        elif all(k is None for k in hand):
            hand = list(bag.get_next_pieces(HAND_SIZE))
            refilled = True

        remaining = [k for k in hand if k is not None]
        game_over = not any(board.can_place_piece_anywhere(get_piece(k)) for k in remaining)

        new_state = GameState(
            grid=tuple(board.to_array()),
            hand=tuple(hand),
            bag_state=bag.serialize_state(),
            score=state.score + points,
            combo=combo,
            max_combo=max(state.max_combo, combo),
            total_lines_cleared=state.total_lines_cleared + lines,
            move_count=state.move_count + 1,
            status=GameStatus.ENDED if game_over else GameStatus.PLAYING,
        )
        logger.debug(
            "placed %s at (%d, %d): rows=%s cols=%s points=%d combo=%d",
            kind.name, row, col, list(cleared.rows), list(cleared.columns), points, combo,
        )
        if game_over:
            logger.info("game over: score=%d moves=%d", new_state.score, new_state.move_count)

        summary = TurnSummary(
            cleared_rows=cleared.rows,
            cleared_columns=cleared.columns,
            points_awarded=points,
            new_combo=combo,
            hand=new_state.hand,
            game_over=game_over,
            placed_cells=attempt.cells,
            hand_refilled=refilled,
        )
        return PlacementResult(state=new_state, summary=summary)

    # ------------------------------------------------------------------ snapshots

    def get_state(self, state: GameState) -> Dict[str, Any]:
        """JSON-ready projection of `state` for the persistence layer."""
        return state.model_dump(mode="json")

    def from_state(self, blob: Union[Mapping[str, Any], str]) -> GameState:
        """Rebuild a `GameState` from a snapshot, raising StateCorruptionError if malformed."""
        try:
            if isinstance(blob, str):
                blob = json.loads(blob)
            if not isinstance(blob, Mapping):
                raise ValueError(f"snapshot must be a mapping, got {type(blob).__name__}")
            state = GameState.model_validate(dict(blob))
            bag = PieceBagGenerator.from_state(state.bag_state)
            if set(bag.kinds) != set(PieceType):
                raise ValueError("bag state must cycle through every piece type")
        except (ValidationError, ValueError) as exc:
            logger.warning("rejected game snapshot: %s", exc)
            raise StateCorruptionError(str(exc)) from exc
        return state
