from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringRules:
    placement_points_per_cell: int = 1
    # bonus for clearing 1..5 lines in one placement
    line_clear_scores: tuple[int, ...] = (10, 30, 60, 100, 150)
    extra_line_score: int = 50
    combo_step: float = 0.5


class ScoreCalculator:
    """Pure scoring helpers.

    Everything here is side-effect free so that a caller can re-derive the
    points of any recorded turn and compare them with a claimed score.
    """

    def __init__(self, rules: ScoringRules | None = None) -> None:
        self.rules = rules or ScoringRules()

    def placement_points(self, cells_placed: int) -> int:
        if cells_placed < 0:
            raise ValueError(f"cells_placed must be >= 0, got {cells_placed}")
        return int(cells_placed * self.rules.placement_points_per_cell)

    def line_bonus(self, lines_cleared: int) -> int:
        if lines_cleared < 0:
            raise ValueError(f"lines_cleared must be >= 0, got {lines_cleared}")
        if lines_cleared == 0:
            return 0
        table = self.rules.line_clear_scores
        if lines_cleared <= len(table):
            return table[lines_cleared - 1]
        return table[-1] + (lines_cleared - len(table)) * self.rules.extra_line_score

    def get_combo_multiplier(self, consecutive_clearing_turns: int) -> float:
        """1.0 for the first clearing turn, growing by `combo_step` per turn after"""
        if consecutive_clearing_turns < 0:
            raise ValueError(
                f"consecutive_clearing_turns must be >= 0, got {consecutive_clearing_turns}"
            )
        return 1.0 + max(0, consecutive_clearing_turns - 1) * self.rules.combo_step

    def calculate_points(self, cells_placed: int, lines_cleared: int, combo_multiplier: float) -> int:
        """Calculate score for a single placement"""
        if combo_multiplier < 1.0:
            raise ValueError(f"combo_multiplier must be >= 1.0, got {combo_multiplier}")
        placement_score = self.placement_points(cells_placed)
        if lines_cleared == 0:
            return placement_score
        return placement_score + math.floor(self.line_bonus(lines_cleared) * combo_multiplier)
