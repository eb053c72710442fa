# tests/test_rules.py
from __future__ import annotations

import pytest

from block_puzzle_engine.game import ScoreCalculator, ScoringRules


def test_line_bonus_table() -> None:
    calc = ScoreCalculator()
    assert [calc.line_bonus(n) for n in range(8)] == [0, 10, 30, 60, 100, 150, 200, 250]


def test_placement_and_line_bonus_are_increasing() -> None:
    calc = ScoreCalculator()
    placements = [calc.placement_points(n) for n in range(10)]
    bonuses = [calc.line_bonus(n) for n in range(10)]
    assert placements == sorted(placements) and len(set(placements)) == len(placements)
    assert bonuses == sorted(bonuses) and len(set(bonuses)) == len(bonuses)


def test_combo_multiplier_progression() -> None:
    calc = ScoreCalculator()
    assert calc.get_combo_multiplier(0) == 1.0
    assert calc.get_combo_multiplier(1) == 1.0
    assert calc.get_combo_multiplier(2) == 1.5
    assert calc.get_combo_multiplier(3) == 2.0


def test_calculate_points() -> None:
    calc = ScoreCalculator()
    assert calc.calculate_points(4, 0, 1.0) == 4
    assert calc.calculate_points(4, 1, 1.0) == 4 + 10
    assert calc.calculate_points(1, 2, 1.5) == 1 + 45
    # fractional bonus is floored
    assert calc.calculate_points(0, 1, 1.25) == 12


def test_points_never_negative() -> None:
    calc = ScoreCalculator()
    for cells in range(10):
        for lines in range(6):
            assert calc.calculate_points(cells, lines, calc.get_combo_multiplier(lines)) >= 0


def test_invalid_inputs_are_rejected_not_clamped() -> None:
    calc = ScoreCalculator()
    with pytest.raises(ValueError):
        calc.placement_points(-1)
    with pytest.raises(ValueError):
        calc.line_bonus(-2)
    with pytest.raises(ValueError):
        calc.get_combo_multiplier(-1)
    with pytest.raises(ValueError):
        calc.calculate_points(1, 1, 0.5)


def test_tables_are_injectable() -> None:
    calc = ScoreCalculator(
        ScoringRules(placement_points_per_cell=0, line_clear_scores=(100, 300), extra_line_score=1000, combo_step=1.0)
    )
    assert calc.placement_points(9) == 0
    assert calc.line_bonus(3) == 1300
    assert calc.get_combo_multiplier(3) == 3.0
    assert calc.calculate_points(5, 2, 2.0) == 600
