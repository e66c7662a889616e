"""Position oracle backed by a UCI engine.

Wraps Stockfish via the python-chess UCI interface. One engine process is
started per run and configured once; every query is a synchronous,
node-limited multi-PV search returning ranked ``EvaluationLine`` values.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Protocol

import chess
import chess.engine

from puzzle_finder.models import EvaluationLine

# Stockfish search paths in priority order
_STOCKFISH_PATHS = [
    "/opt/homebrew/bin/stockfish",
    "/usr/local/bin/stockfish",
    "/usr/bin/stockfish",
    "/usr/games/stockfish",
]

_DEFAULT_HASH_MB = 256
_DEFAULT_THREADS = 1


class PositionOracle(Protocol):
    """Anything that can rank the best moves of a position."""

    def evaluate(
        self, board: chess.Board, nodes: int, multipv: int
    ) -> list[EvaluationLine]: ...


def find_stockfish() -> str:
    """Auto-detect Stockfish binary path.

    Checks the STOCKFISH_PATH environment variable, then known install
    paths, then falls back to PATH lookup.

    Returns:
        Path to Stockfish binary.

    Raises:
        FileNotFoundError: If Stockfish is not found anywhere.
    """
    env_path = os.environ.get("STOCKFISH_PATH")
    if env_path:
        if Path(env_path).is_file():
            return env_path
        raise FileNotFoundError(f"STOCKFISH_PATH points to a missing file: {env_path}")

    for path_str in _STOCKFISH_PATHS:
        if Path(path_str).is_file():
            return path_str

    which_result = shutil.which("stockfish")
    if which_result is not None:
        return which_result

    raise FileNotFoundError(
        "Stockfish not found. Install it, pass --engine, or set STOCKFISH_PATH."
    )


def _to_line(
    rank: int, info: chess.engine.InfoDict, turn: chess.Color
) -> EvaluationLine | None:
    """Convert one engine info record, or None if it carries no PV."""
    pv = info.get("pv")
    score = info.get("score")
    if not pv or score is None:
        return None
    return EvaluationLine(rank=rank, score=score.pov(turn), pv=list(pv))


class StockfishOracle:
    """Single UCI engine session shared by a whole batch run."""

    def __init__(
        self,
        engine_path: str | None = None,
        hash_mb: int = _DEFAULT_HASH_MB,
        threads: int = _DEFAULT_THREADS,
    ) -> None:
        """Start the engine and apply session options.

        Args:
            engine_path: Explicit path to the engine binary.
                If None, auto-detects Stockfish.
            hash_mb: Transposition table size in megabytes.
            threads: Engine search threads.

        Raises:
            FileNotFoundError: If no engine binary is found.
            chess.engine.EngineError: If the engine fails to start.
        """
        self._engine_path = engine_path or find_stockfish()
        self._engine = chess.engine.SimpleEngine.popen_uci(self._engine_path)
        self.configure({"Hash": hash_mb, "Threads": threads})

    @property
    def engine_path(self) -> str:
        return self._engine_path

    def configure(self, options: dict[str, int | str | bool]) -> None:
        self._engine.configure(options)

    def evaluate(
        self, board: chess.Board, nodes: int, multipv: int
    ) -> list[EvaluationLine]:
        """Search ``board`` for ``nodes`` nodes and return up to ``multipv`` lines.

        Args:
            board: Position to search.
            nodes: Node budget for this query.
            multipv: Number of ranked lines requested.

        Returns:
            Lines ranked best-first. Fewer than ``multipv`` when the
            position has fewer legal moves; empty when there are none.
        """
        if not any(board.legal_moves):
            return []

        infos = self._engine.analyse(
            board,
            chess.engine.Limit(nodes=nodes),
            multipv=multipv,
        )

        lines: list[EvaluationLine] = []
        for info in infos:
            line = _to_line(len(lines) + 1, info, board.turn)
            if line is not None:
                lines.append(line)
        return lines

    def close(self) -> None:
        """Shut down the engine process."""
        try:
            self._engine.quit()
        except chess.engine.EngineTerminatedError:
            pass

    def __enter__(self) -> StockfishOracle:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
