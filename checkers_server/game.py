"""Game state: board, turn order, and the capture-chain obligation."""

from __future__ import annotations

from dataclasses import replace

from checkers_server.board import Board, Color, Square
from checkers_server.rules import MoveResult, Rejected, apply_move

NOT_YOUR_TURN = "Not your turn"


class GameState:
    def __init__(self, board: Board | None = None):
        self.board: Board = board or Board.create()
        self.turn: Color = Color.RED
        self.must_continue: bool = False
        self.continue_from: Square | None = None

    def start(self) -> None:
        """Hand the first move to Red. The board is kept as it is."""
        self.turn = Color.RED
        self.must_continue = False
        self.continue_from = None

    def make_move(self, color: Color, src: Square, dst: Square) -> MoveResult:
        """Apply a move for ``color`` and advance the turn.

        The turn passes to the opponent unless the moved piece must keep
        capturing, in which case the same color moves again.
        """
        if color is not self.turn:
            return Rejected(NOT_YOUR_TURN)

        result = apply_move(self, color, src, dst)
        if isinstance(result, Rejected):
            return result

        self.must_continue = result.must_continue
        self.continue_from = result.continue_from
        if not self.must_continue:
            self.turn = color.opponent
        return replace(result, next_turn=self.turn)

