"""Move properties used to judge whether a winning move is puzzle-worthy.

Pure python-chess board inspection, no engine involved. The static
exchange estimate looks only at the destination square and ignores
pins, overloads and checks.
"""

from __future__ import annotations

import chess


# Piece values in pawns for exchange arithmetic
_PIECE_VALUES: dict[int, int] = {
    chess.PAWN: 1,
    chess.KNIGHT: 3,
    chess.BISHOP: 3,
    chess.ROOK: 5,
    chess.QUEEN: 9,
    chess.KING: 100,
}


def _piece_value(piece_type: int) -> int:
    """Return the standard piece value for a piece type."""
    return _PIECE_VALUES.get(piece_type, 0)


def is_queen_promotion(move: chess.Move) -> bool:
    return move.promotion == chess.QUEEN


def is_en_passant_capture(board: chess.Board, move: chess.Move) -> bool:
    return board.is_en_passant(move)


def is_checking_move(board: chess.Board, move: chess.Move) -> bool:
    return board.gives_check(move)


def _least_valuable_attacker(
    board: chess.Board, color: chess.Color, square: chess.Square
) -> chess.Square | None:
    """Square of the cheapest ``color`` piece attacking ``square``, if any."""
    attackers = board.attackers(color, square)
    if not attackers:
        return None
    return min(attackers, key=lambda sq: _piece_value(board.piece_type_at(sq)))


def static_exchange(board: chess.Board, move: chess.Move) -> int:
    """Estimate the material result of ``move`` for the side making it.

    Plays out the capture sequence on the destination square with the
    least valuable attacker each time, letting either side stop when
    continuing would lose material. Pieces behind the capturers join in
    as the square's attackers are removed.

    Args:
        board: Position before the move.
        move: A legal move in ``board``.

    Returns:
        Signed estimate in pawns. Positive for captures that win material,
        negative for moves that give material away, zero otherwise.

    Raises:
        ValueError: If there is no piece on the move's origin square.
    """
    mover = board.piece_at(move.from_square)
    if mover is None:
        raise ValueError(f"No piece on {chess.square_name(move.from_square)}")
    if board.is_castling(move):
        return 0

    work = board.copy(stack=False)
    target = move.to_square

    if work.is_en_passant(move):
        victim_sq = target - 8 if mover.color == chess.WHITE else target + 8
        work.remove_piece_at(victim_sq)
        gain = _piece_value(chess.PAWN)
    else:
        victim = work.piece_at(target)
        gain = _piece_value(victim.piece_type) if victim is not None else 0

    # Only captured material counts; a promoted piece just stands on the square
    piece_type = move.promotion or mover.piece_type

    work.remove_piece_at(move.from_square)
    work.set_piece_at(target, chess.Piece(piece_type, mover.color))

    gains = [gain]
    on_square = _piece_value(piece_type)
    side = not mover.color

    while True:
        attacker_sq = _least_valuable_attacker(work, side, target)
        if attacker_sq is None:
            break
        attacker = work.piece_at(attacker_sq)
        # A king may only take an undefended piece
        if attacker.piece_type == chess.KING and work.attackers(not side, target):
            break
        gains.append(on_square - gains[-1])
        on_square = _piece_value(attacker.piece_type)
        work.remove_piece_at(attacker_sq)
        work.set_piece_at(target, attacker)
        side = not side

    while len(gains) > 1:
        last = gains.pop()
        gains[-1] = -max(-gains[-1], last)

    return gains[0]


def is_material_winning_capture(board: chess.Board, move: chess.Move) -> bool:
    return static_exchange(board, move) > 0


def is_material_losing_move(board: chess.Board, move: chess.Move) -> bool:
    return static_exchange(board, move) < 0
