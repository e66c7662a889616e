"""Verdicts on a single engine score.

Scores are python-chess ``Score`` values relative to the side to move.
The strong (280cp) and weak (100cp) defaults are deliberately different:
scores between them are neither "won" nor "not won".
"""

from __future__ import annotations

import chess.engine

STRONG_THRESHOLD = 280
WEAK_THRESHOLD = 100


def is_won(score: chess.engine.Score, threshold: int = STRONG_THRESHOLD) -> bool:
    """True for a positive mate score or more than ``threshold`` centipawns."""
    if score.is_mate():
        return score.mate() > 0
    return score.score() > threshold


def is_lost(score: chess.engine.Score, threshold: int = STRONG_THRESHOLD) -> bool:
    """True for a negative mate score or less than ``-threshold`` centipawns."""
    if score.is_mate():
        return score.mate() < 0
    return score.score() < -threshold


def is_not_won(score: chess.engine.Score, threshold: int = WEAK_THRESHOLD) -> bool:
    """True for a negative mate score or less than ``threshold`` centipawns."""
    if score.is_mate():
        return score.mate() < 0
    return score.score() < threshold


def is_not_lost(score: chess.engine.Score, threshold: int = WEAK_THRESHOLD) -> bool:
    """True for a positive mate score or more than ``-threshold`` centipawns."""
    if score.is_mate():
        return score.mate() > 0
    return score.score() > -threshold


def is_mate_in_one(score: chess.engine.Score) -> bool:
    return score.is_mate() and score.mate() == 1
