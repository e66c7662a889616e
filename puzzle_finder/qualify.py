"""Decide whether a game position makes a good tactical puzzle.

A puzzle needs exactly one clearly winning move that is not trivial to
find. ``has_one_winning_move`` is the cheap screen; ``is_good_puzzle``
applies the full set of criteria at one node budget, and
``verify_at_increasing_depth`` demands that verdict at every budget of
an escalating schedule so that search artifacts are filtered out.
"""

from __future__ import annotations

from collections.abc import Iterator

from puzzle_finder.engine import PositionOracle
from puzzle_finder.games import GameCursor
from puzzle_finder.models import PuzzleConfig
from puzzle_finder.move_checks import (
    is_en_passant_capture,
    is_material_losing_move,
    is_material_winning_capture,
    is_queen_promotion,
)
from puzzle_finder.scores import is_mate_in_one, is_not_lost, is_not_won, is_won


def node_budgets(config: PuzzleConfig) -> Iterator[int]:
    """Yield the strictly increasing node budgets of one verification run."""
    nodes = config.initial_nodes
    while nodes <= config.max_nodes:
        yield nodes
        nodes = max(nodes + 1, round(config.node_multiplier * nodes))


def has_one_winning_move(
    cursor: GameCursor, oracle: PositionOracle, nodes: int, config: PuzzleConfig
) -> bool:
    """Shallow test: the best line wins and no other line comes close."""
    lines = oracle.evaluate(cursor.board(), nodes, config.max_pv)
    if len(lines) < 2:
        return False
    return is_won(lines[0].score, config.strong_threshold) and all(
        is_not_won(line.score, config.weak_threshold) for line in lines[1:]
    )


def _previous_position_not_lost(
    cursor: GameCursor, oracle: PositionOracle, nodes: int, config: PuzzleConfig
) -> bool:
    with cursor.looking_back():
        lines = oracle.evaluate(cursor.board(), nodes, 1)
    return bool(lines) and is_not_lost(lines[0].score, config.weak_threshold)


def is_good_puzzle(
    cursor: GameCursor, oracle: PositionOracle, nodes: int, config: PuzzleConfig
) -> bool:
    """Check a puzzle candidate against all criteria at one node budget.

    The current position is assumed to have passed the shallow
    one-winning-move screen. It is searched again at ``nodes`` since the
    verdict can change with depth.

    Args:
        cursor: Game positioned at the candidate. Its ply is unchanged
            on return.
        oracle: Engine used for all searches.
        nodes: Node budget for this pass.
        config: Thresholds and PV count.

    Returns:
        True if the position is usable as a puzzle at this budget.
    """
    board = cursor.board()

    # Puzzles start from a position where the side to move is not in check.
    if board.is_check():
        return False

    # The position must be won, by one move only.
    lines = oracle.evaluate(board, nodes, config.max_pv)
    if not lines:
        return False
    if not is_won(lines[0].score, config.strong_threshold) or any(
        is_won(line.score, config.strong_threshold) for line in lines[1:]
    ):
        return False

    if is_mate_in_one(lines[0].score):
        return False

    move = lines[0].best_move

    if is_en_passant_capture(board, move):
        return False

    if is_queen_promotion(move):
        return False

    # Simple material-winning captures are too easy; apparent sacrifices
    # are what puzzles are made of.
    if is_material_winning_capture(board, move):
        return False
    if is_material_losing_move(board, move):
        return True

    # The player missed it, so it was not obvious.
    if cursor.next_move() != move:
        return True

    # The player found a quiet winning move. It only counts if the
    # opponent was not already lost before the previous move.
    if not cursor.at_start():
        return _previous_position_not_lost(cursor, oracle, nodes, config)

    return False


def verify_at_increasing_depth(
    cursor: GameCursor, oracle: PositionOracle, config: PuzzleConfig
) -> bool:
    """True if ``is_good_puzzle`` holds at every budget of the schedule."""
    for nodes in node_budgets(config):
        if not is_good_puzzle(cursor, oracle, nodes, config):
            return False
    return True
