"""Game source and per-game cursor.

Reads PGN files (plain or zstd-compressed, as in the Lichess database
dumps) and exposes each game's mainline as a movable cursor.
"""

from __future__ import annotations

import io
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

import chess
import chess.pgn
import zstandard


class GameCursor:
    """Current position within the mainline of one recorded game."""

    def __init__(self, game: chess.pgn.Game) -> None:
        self._board = game.board()
        self._moves = list(game.mainline_moves())
        self._ply = 0

    @classmethod
    def from_moves(
        cls, moves: list[chess.Move], starting_fen: str = chess.STARTING_FEN
    ) -> GameCursor:
        """Build a cursor over a bare move list."""
        game = chess.pgn.Game()
        if starting_fen != chess.STARTING_FEN:
            game.setup(starting_fen)
        node = game
        for move in moves:
            node = node.add_variation(move)
        return cls(game)

    @property
    def ply(self) -> int:
        return self._ply

    def board(self) -> chess.Board:
        """Copy of the current position."""
        return self._board.copy()

    def at_start(self) -> bool:
        return self._ply == 0

    def at_end(self) -> bool:
        return self._ply == len(self._moves)

    def next_move(self) -> chess.Move | None:
        """Move played from the current position in the game, if any."""
        if self.at_end():
            return None
        return self._moves[self._ply]

    def advance(self) -> None:
        if self.at_end():
            raise IndexError("Cannot advance past the end of the game")
        self._board.push(self._moves[self._ply])
        self._ply += 1

    def rewind(self) -> None:
        if self.at_start():
            raise IndexError("Cannot rewind before the start of the game")
        self._board.pop()
        self._ply -= 1

    @contextmanager
    def looking_back(self) -> Iterator[GameCursor]:
        """Step back one ply for the duration of the block.

        The saved ply is restored on every exit path.
        """
        saved = self._ply
        self.rewind()
        try:
            yield self
        finally:
            while self._ply < saved:
                self.advance()


@contextmanager
def open_pgn(path: str | Path) -> Iterator[TextIO]:
    """Open a PGN file as UTF-8 text, decompressing ``.zst`` on the fly."""
    path = Path(path)
    if path.suffix == ".zst":
        with open(path, "rb") as f:
            dctx = zstandard.ZstdDecompressor()
            with dctx.stream_reader(f) as reader:
                yield io.TextIOWrapper(reader, encoding="utf-8")
    else:
        with open(path, encoding="utf-8") as f:
            yield f


def games_in_file(path: str | Path) -> Iterator[GameCursor]:
    """Lazily yield a cursor for every readable game in a PGN file.

    Games that python-chess could not parse cleanly are skipped with a
    warning on stderr.
    """
    with open_pgn(path) as handle:
        index = 0
        while True:
            game = chess.pgn.read_game(handle)
            if game is None:
                break
            index += 1
            if game.errors:
                print(
                    f"Warning: skipping game {index} in {Path(path).name}: {game.errors[0]}",
                    file=sys.stderr,
                )
                continue
            yield GameCursor(game)
