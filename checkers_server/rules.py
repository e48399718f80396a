"""Move validation: legality, captures, promotion, and capture-chain detection.

The validator is stateless. ``apply_move`` reads the board and the current
capture obligation from a game state, and mutates the board only when the
move is legal.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from checkers_server.board import (
    ALL_DIRECTIONS,
    Board,
    Color,
    Piece,
    Square,
    directions_for,
    in_bounds,
    should_promote,
)

if TYPE_CHECKING:
    from checkers_server.game import GameState

# Rejection reasons
OUT_OF_BOUNDS = "Square out of bounds"
NO_PIECE = "No piece at origin"
NOT_YOUR_PIECE = "Not your piece"
DESTINATION_OCCUPIED = "Destination occupied"
MUST_CONTINUE_WITH_SAME_PIECE = "Must continue capturing with the same piece"
MUST_CAPTURE = "Must continue capturing"
INVALID_MOVE = "Invalid move"
ILLEGAL_DIRECTION = "Only kings may move backward"
INVALID_CAPTURE = "Invalid capture"
PATH_BLOCKED = "Path blocked"


@dataclass(frozen=True)
class Rejected:
    reason: str


@dataclass(frozen=True)
class Applied:
    from_square: Square
    to_square: Square
    captured_square: Square | None = None
    promoted: bool = False
    must_continue: bool = False
    continue_from: Square | None = None
    next_turn: Color | None = None


MoveResult = Applied | Rejected


def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def _check_preconditions(state: GameState, color: Color, src: Square, dst: Square) -> str | None:
    """Return a rejection reason, or None if the move may be examined further."""
    board = state.board
    if not in_bounds(*src) or not in_bounds(*dst):
        return OUT_OF_BOUNDS
    piece = board.piece_at(src)
    if piece is None:
        return NO_PIECE
    if piece.color is not color:
        return NOT_YOUR_PIECE
    if not board.is_empty(dst):
        return DESTINATION_OCCUPIED
    if state.must_continue and src != state.continue_from:
        return MUST_CONTINUE_WITH_SAME_PIECE
    return None


def _man_capture(board: Board, piece: Piece, src: Square, dst: Square, must_continue: bool) -> Square | None | Rejected:
    """Validate a non-king move. Returns the captured square, None, or a rejection."""
    dr, dc = dst.row - src.row, dst.col - src.col
    if abs(dr) != abs(dc) or abs(dr) not in (1, 2):
        return Rejected(INVALID_MOVE)
    if (_sign(dr), _sign(dc)) not in directions_for(piece):
        return Rejected(ILLEGAL_DIRECTION)

    if abs(dr) == 1:
        if must_continue:
            return Rejected(MUST_CAPTURE)
        return None

    middle = Square(src.row + dr // 2, src.col + dc // 2)
    jumped = board.piece_at(middle)
    if jumped is None or jumped.color is piece.color:
        return Rejected(INVALID_CAPTURE)
    return middle


def _king_capture(board: Board, piece: Piece, src: Square, dst: Square, must_continue: bool) -> Square | None | Rejected:
    """Walk the diagonal between src and dst; at most one enemy may lie on it."""
    dr, dc = dst.row - src.row, dst.col - src.col
    if dr == 0 or abs(dr) != abs(dc):
        return Rejected(INVALID_MOVE)

    step_r, step_c = _sign(dr), _sign(dc)
    captured: Square | None = None
    for i in range(1, abs(dr)):
        square = Square(src.row + step_r * i, src.col + step_c * i)
        other = board.piece_at(square)
        if other is None:
            continue
        if other.color is piece.color:
            return Rejected(PATH_BLOCKED)
        if captured is not None:
            return Rejected(INVALID_CAPTURE)
        captured = square

    if captured is None and must_continue:
        return Rejected(MUST_CAPTURE)
    return captured


def has_capture(board: Board, square: Square) -> bool:
    """True if the piece standing on ``square`` has at least one legal capture."""
    piece = board.piece_at(square)
    if piece is None:
        return False

    if not piece.king:
        for dr, dc in directions_for(piece):
            middle = Square(square.row + dr, square.col + dc)
            landing = Square(square.row + 2 * dr, square.col + 2 * dc)
            if not in_bounds(*landing):
                continue
            jumped = board.piece_at(middle)
            if jumped is not None and jumped.color is not piece.color and board.is_empty(landing):
                return True
        return False

    for dr, dc in ALL_DIRECTIONS:
        r, c = square.row + dr, square.col + dc
        while in_bounds(r, c) and board.is_empty(Square(r, c)):
            r, c = r + dr, c + dc
        if not in_bounds(r, c):
            continue
        blocker = board.piece_at(Square(r, c))
        if blocker.color is piece.color:
            continue
        landing_r, landing_c = r + dr, c + dc
        if in_bounds(landing_r, landing_c) and board.is_empty(Square(landing_r, landing_c)):
            return True
    return False


def apply_move(state: GameState, color: Color, src: Square, dst: Square) -> MoveResult:
    """Validate and perform a move for ``color``.

    On success the piece is relocated, any captured piece is removed, promotion
    is applied, and the returned ``Applied`` carries the capture obligation for
    the same piece. On rejection the board is left untouched.
    """
    reason = _check_preconditions(state, color, src, dst)
    if reason is not None:
        return Rejected(reason)

    board = state.board
    piece = board.piece_at(src)
    if piece.king:
        outcome = _king_capture(board, piece, src, dst, state.must_continue)
    else:
        outcome = _man_capture(board, piece, src, dst, state.must_continue)
    if isinstance(outcome, Rejected):
        return outcome
    captured = outcome

    board.clear(src)
    board.place(dst, piece)
    if captured is not None:
        board.clear(captured)

    promoted = should_promote(piece, dst.row)
    if promoted:
        piece.promote()

    # A continuation can only follow a capture
    must_continue = captured is not None and has_capture(board, dst)
    return Applied(
        from_square=src,
        to_square=dst,
        captured_square=captured,
        promoted=promoted,
        must_continue=must_continue,
        continue_from=dst if must_continue else None,
    )
