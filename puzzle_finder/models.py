"""Shared data models for the puzzle finder.

EvaluationLine is the contract between the engine adapter and the
qualification logic. PuzzleConfig carries every tunable threshold and
search budget so they are set once per run.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import chess
import chess.engine


@dataclass(frozen=True)
class EvaluationLine:
    """One ranked line of a multi-PV search.

    The score is relative to the side to move in the searched position.
    """

    rank: int
    score: chess.engine.Score
    pv: list[chess.Move] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.pv:
            raise ValueError("EvaluationLine needs at least one PV move")

    @property
    def best_move(self) -> chess.Move:
        return self.pv[0]


@dataclass(frozen=True)
class PuzzleConfig:
    """Thresholds (centipawns) and node budgets for puzzle qualification."""

    strong_threshold: int = 280
    weak_threshold: int = 100
    initial_nodes: int = 1_000_000
    node_multiplier: float = 1.4
    max_nodes: int = 40_000_000
    max_pv: int = 2

    def __post_init__(self) -> None:
        if self.strong_threshold < 0 or self.weak_threshold < 0:
            raise ValueError("Thresholds must be non-negative")
        if self.initial_nodes <= 0:
            raise ValueError("initial_nodes must be positive")
        if self.node_multiplier <= 1:
            raise ValueError("node_multiplier must be greater than 1")
        if self.max_pv < 2:
            raise ValueError("max_pv must be at least 2")
