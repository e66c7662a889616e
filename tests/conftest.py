"""Shared test fixtures with dual-mode support (scripted vs real Stockfish).

Usage:
    pytest tests/                  # Fast, scripted oracle (no Stockfish)
    pytest tests/ --e2e            # Also run tests that need real Stockfish

Helpers:
    ScriptedOracle  - Deterministic oracle answering from a per-position script
                      and recording every query.
    line            - Build an EvaluationLine from a score and UCI moves.
    board_after     - Board reached by playing SAN moves from the start.
"""

from __future__ import annotations

import chess
import chess.engine
import pytest

from puzzle_finder.models import EvaluationLine


# ---------------------------------------------------------------------------
# CLI option and marker registration
# ---------------------------------------------------------------------------


def pytest_addoption(parser):
    """Register --e2e CLI flag for real Stockfish tests."""
    parser.addoption(
        "--e2e",
        action="store_true",
        default=False,
        help="Run with real Stockfish engine (no mocks).",
    )


def pytest_configure(config):
    """Register the e2e marker."""
    config.addinivalue_line(
        "markers", "e2e: mark test as end-to-end (requires real Stockfish)"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--e2e"):
        return
    skip_e2e = pytest.mark.skip(reason="needs --e2e and a Stockfish binary")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


# ---------------------------------------------------------------------------
# Scripted oracle
# ---------------------------------------------------------------------------


def line(rank: int, score: chess.engine.Score, *uci_moves: str) -> EvaluationLine:
    """Build an EvaluationLine from UCI move strings."""
    return EvaluationLine(
        rank=rank,
        score=score,
        pv=[chess.Move.from_uci(uci) for uci in uci_moves],
    )


def board_after(*san_moves: str) -> chess.Board:
    """Play SAN moves from the standard start position."""
    board = chess.Board()
    for san in san_moves:
        board.push_san(san)
    return board


class ScriptedOracle:
    """Oracle answering from a script keyed by ``board.epd()``.

    Unscripted positions get level lines (0cp, -10cp) over the first
    legal moves. ``calls`` records (epd, nodes, multipv) per query.
    """

    def __init__(self, script: dict[str, list[EvaluationLine]] | None = None) -> None:
        self.script = script or {}
        self.calls: list[tuple[str, int, int]] = []

    def evaluate(
        self, board: chess.Board, nodes: int, multipv: int
    ) -> list[EvaluationLine]:
        epd = board.epd()
        self.calls.append((epd, nodes, multipv))
        if epd in self.script:
            return self.script[epd][:multipv]
        legal = list(board.legal_moves)[:2]
        scores = [chess.engine.Cp(0), chess.engine.Cp(-10)]
        lines = [
            EvaluationLine(rank=i + 1, score=scores[i], pv=[move])
            for i, move in enumerate(legal)
        ]
        return lines[:multipv]
