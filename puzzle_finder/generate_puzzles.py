#!/usr/bin/env python3
"""Scan PGN games for tactical puzzle positions.

Every position of every game is screened with a shallow multi-PV search;
candidates are then verified at increasing node counts. Accepted
positions are appended to the output file as FEN lines, one at a time,
so an interrupted run keeps what it found.

Usage:
    find-puzzles games.pgn puzzles.fen
    find-puzzles lichess_db_standard_rated_2024-01.pgn.zst puzzles.fen --threads 4
    STOCKFISH_PATH=/usr/bin/stockfish find-puzzles games.pgn puzzles.fen
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

import chess.engine
from rich.console import Console
from rich.table import Table

from puzzle_finder.engine import PositionOracle, StockfishOracle
from puzzle_finder.games import GameCursor, games_in_file
from puzzle_finder.models import PuzzleConfig
from puzzle_finder.qualify import has_one_winning_move, verify_at_increasing_depth


def _log(msg: str) -> None:
    """Print with flush for progress visibility."""
    print(msg, flush=True)


def puzzles_in_game(
    cursor: GameCursor, oracle: PositionOracle, config: PuzzleConfig
) -> list[str]:
    """Return the FENs of all positions in the game that make good puzzles.

    The final position has no following move and is not examined.
    """
    result: list[str] = []

    while not cursor.at_end():
        if has_one_winning_move(cursor, oracle, config.initial_nodes, config):
            if verify_at_increasing_depth(cursor, oracle, config):
                result.append(cursor.board().fen())
        cursor.advance()

    return result


def append_puzzle(output_path: Path, fen: str) -> None:
    """Append one FEN line, closing the file so the line is on disk."""
    with open(output_path, "a", encoding="utf-8") as f:
        f.write(fen + "\n")
        f.flush()


def puzzles_from_pgn(
    pgn_path: str | Path,
    output_path: str | Path,
    oracle: PositionOracle,
    config: PuzzleConfig | None = None,
) -> tuple[int, int]:
    """Scan every game in ``pgn_path`` and append puzzle FENs to ``output_path``.

    Args:
        pgn_path: PGN file, optionally zstd-compressed.
        output_path: Text file receiving one FEN per line.
        oracle: Engine session shared by all games.
        config: Qualification settings; defaults when None.

    Returns:
        Tuple of (games scanned, puzzles found).
    """
    config = config or PuzzleConfig()
    output_path = Path(output_path)
    game_count = 0
    puzzle_count = 0

    for cursor in games_in_file(pgn_path):
        game_count += 1
        for fen in puzzles_in_game(cursor, oracle, config):
            puzzle_count += 1
            append_puzzle(output_path, fen)
        _log(f"{game_count} games, {puzzle_count} puzzles")

    return game_count, puzzle_count


def _print_summary(console: Console, games: int, puzzles: int, elapsed: float) -> None:
    table = Table(title="Puzzle search", show_header=False)
    table.add_row("Games", str(games))
    table.add_row("Puzzles", str(puzzles))
    table.add_row("Elapsed", f"{elapsed:.1f}s")
    console.print(table)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Find tactical puzzle positions in PGN games"
    )
    parser.add_argument("pgn", type=Path, help="Input PGN file (.pgn or .pgn.zst)")
    parser.add_argument("output", type=Path, help="Output file, one FEN per line (appended)")
    parser.add_argument("--engine", default=None, help="Path to a UCI engine (default: auto-detect Stockfish)")
    parser.add_argument("--hash", type=int, default=256, help="Engine hash size in MB (default: 256)")
    parser.add_argument("--threads", type=int, default=1, help="Engine threads (default: 1)")
    parser.add_argument(
        "--initial-nodes", type=int, default=PuzzleConfig.initial_nodes,
        help="Node budget of the screening search (default: 1000000)",
    )
    parser.add_argument(
        "--max-nodes", type=int, default=PuzzleConfig.max_nodes,
        help="Largest node budget used for verification (default: 40000000)",
    )

    args = parser.parse_args(argv)

    if not args.pgn.is_file():
        print(f"Error: {args.pgn} not found", file=sys.stderr)
        return 1

    try:
        config = PuzzleConfig(initial_nodes=args.initial_nodes, max_nodes=args.max_nodes)
    except ValueError as e:
        parser.error(str(e))

    console = Console(stderr=True)
    start = time.time()
    try:
        with StockfishOracle(args.engine, hash_mb=args.hash, threads=args.threads) as oracle:
            _log(f"Using engine at {oracle.engine_path}")
            games, puzzles = puzzles_from_pgn(args.pgn, args.output, oracle, config)
    except chess.engine.EngineError as e:
        print(f"Error: engine failure: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _print_summary(console, games, puzzles, time.time() - start)
    return 0


if __name__ == "__main__":
    sys.exit(main())
