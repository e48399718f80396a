"""Unit tests for move validation, captures, promotion and capture chains."""

from checkers_server import rules
from checkers_server.board import Board, Color, Piece, Square
from checkers_server.game import GameState
from checkers_server.rules import Applied, Rejected, apply_move, has_capture

RED = Color.RED
BLACK = Color.BLACK


def make_state(pieces: dict[tuple[int, int], Piece]) -> GameState:
    board = Board()
    for (row, col), piece in pieces.items():
        board.place(Square(row, col), piece)
    return GameState(board=board)


def move(state: GameState, color: Color, src: tuple[int, int], dst: tuple[int, int]):
    return apply_move(state, color, Square(*src), Square(*dst))


class TestPreconditions:
    def test_out_of_bounds(self):
        state = GameState()
        assert move(state, RED, (5, 0), (4, -1)) == Rejected(rules.OUT_OF_BOUNDS)
        assert move(state, RED, (8, 0), (7, 1)) == Rejected(rules.OUT_OF_BOUNDS)

    def test_no_piece(self):
        state = GameState()
        assert move(state, RED, (4, 1), (3, 2)) == Rejected(rules.NO_PIECE)

    def test_not_your_piece(self):
        state = GameState()
        assert move(state, RED, (2, 1), (3, 2)) == Rejected(rules.NOT_YOUR_PIECE)

    def test_destination_occupied(self):
        state = GameState()
        assert move(state, RED, (6, 1), (5, 2)) == Rejected(rules.DESTINATION_OCCUPIED)

    def test_rejection_leaves_board_untouched(self):
        state = GameState()
        before = state.board.to_rows()
        move(state, RED, (5, 0), (3, 2))
        assert state.board.to_rows() == before


class TestManMoves:
    def test_simple_move(self):
        state = GameState()
        result = move(state, RED, (5, 0), (4, 1))
        assert isinstance(result, Applied)
        assert result.captured_square is None
        assert result.promoted is False
        assert result.must_continue is False
        assert state.board.piece_at(Square(4, 1)) == Piece(RED)
        assert state.board.is_empty(Square(5, 0))

    def test_backward_move_rejected(self):
        state = make_state({(4, 3): Piece(RED)})
        assert move(state, RED, (4, 3), (5, 4)) == Rejected(rules.ILLEGAL_DIRECTION)

    def test_black_backward_move_rejected(self):
        state = make_state({(3, 2): Piece(BLACK)})
        assert move(state, BLACK, (3, 2), (2, 1)) == Rejected(rules.ILLEGAL_DIRECTION)

    def test_long_move_rejected(self):
        state = make_state({(5, 0): Piece(RED)})
        assert move(state, RED, (5, 0), (2, 3)) == Rejected(rules.INVALID_MOVE)

    def test_non_diagonal_rejected(self):
        state = make_state({(5, 2): Piece(RED)})
        assert move(state, RED, (5, 2), (4, 2)) == Rejected(rules.INVALID_MOVE)

    def test_capture(self):
        # No follow-up capture from the landing square
        state = make_state({(4, 1): Piece(RED), (3, 2): Piece(BLACK)})
        result = move(state, RED, (4, 1), (2, 3))
        assert isinstance(result, Applied)
        assert result.captured_square == Square(3, 2)
        assert result.must_continue is False
        assert result.continue_from is None
        assert state.board.is_empty(Square(3, 2))

    def test_capture_with_follow_up(self):
        # A second capture is waiting at (1, 4)
        state = make_state({(4, 1): Piece(RED), (3, 2): Piece(BLACK), (1, 4): Piece(BLACK)})
        result = move(state, RED, (4, 1), (2, 3))
        assert result.must_continue is True
        assert result.continue_from == Square(2, 3)

    def test_capture_over_empty_square(self):
        state = make_state({(4, 1): Piece(RED)})
        assert move(state, RED, (4, 1), (2, 3)) == Rejected(rules.INVALID_CAPTURE)

    def test_capture_over_own_piece(self):
        state = make_state({(4, 1): Piece(RED), (3, 2): Piece(RED)})
        assert move(state, RED, (4, 1), (2, 3)) == Rejected(rules.INVALID_CAPTURE)

    def test_backward_capture_rejected(self):
        state = make_state({(2, 3): Piece(RED), (3, 4): Piece(BLACK)})
        assert move(state, RED, (2, 3), (4, 5)) == Rejected(rules.ILLEGAL_DIRECTION)

    def test_follow_up_only_in_forward_directions(self):
        # The black piece behind the landing square cannot be taken by a man
        state = make_state({(4, 1): Piece(RED), (3, 2): Piece(BLACK), (3, 4): Piece(BLACK)})
        result = move(state, RED, (4, 1), (2, 3))
        assert result.must_continue is False


class TestPromotion:
    def test_red_promotes(self):
        state = make_state({(1, 2): Piece(RED)})
        result = move(state, RED, (1, 2), (0, 1))
        assert result.promoted is True
        assert state.board.piece_at(Square(0, 1)).king is True

    def test_black_promotes(self):
        state = make_state({(6, 1): Piece(BLACK)})
        result = move(state, BLACK, (6, 1), (7, 0))
        assert result.promoted is True

    def test_king_not_promoted_again(self):
        state = make_state({(1, 2): Piece(RED, king=True)})
        result = move(state, RED, (1, 2), (0, 1))
        assert result.promoted is False
        assert state.board.piece_at(Square(0, 1)).king is True

    def test_king_keeps_crown(self):
        state = make_state({(1, 2): Piece(RED, king=True)})
        move(state, RED, (1, 2), (4, 5))
        assert state.board.piece_at(Square(4, 5)).king is True

    def test_promoted_piece_continues_as_king(self):
        # Lands on (0, 3), is crowned, and can then fly down to take (2, 5)
        state = make_state({(2, 1): Piece(RED), (1, 2): Piece(BLACK), (2, 5): Piece(BLACK)})
        result = move(state, RED, (2, 1), (0, 3))
        assert result.promoted is True
        assert result.must_continue is True
        assert result.continue_from == Square(0, 3)


class TestKingMoves:
    def test_long_simple_move(self):
        state = make_state({(4, 4): Piece(RED, king=True)})
        result = move(state, RED, (4, 4), (1, 1))
        assert isinstance(result, Applied)
        assert result.captured_square is None

    def test_backward_move(self):
        state = make_state({(2, 3): Piece(BLACK, king=True)})
        result = move(state, BLACK, (2, 3), (0, 1))
        assert isinstance(result, Applied)

    def test_flying_capture(self):
        state = make_state({(4, 4): Piece(RED, king=True), (2, 2): Piece(BLACK)})
        result = move(state, RED, (4, 4), (0, 0))
        assert isinstance(result, Applied)
        assert result.captured_square == Square(2, 2)
        assert state.board.is_empty(Square(2, 2))
        assert state.board.piece_at(Square(0, 0)).king is True

    def test_land_right_behind_captured_piece(self):
        state = make_state({(4, 4): Piece(RED, king=True), (2, 2): Piece(BLACK)})
        result = move(state, RED, (4, 4), (1, 1))
        assert result.captured_square == Square(2, 2)

    def test_two_enemies_on_ray(self):
        state = make_state(
            {(4, 4): Piece(RED, king=True), (2, 2): Piece(BLACK), (1, 1): Piece(BLACK)}
        )
        before = state.board.to_rows()
        assert move(state, RED, (4, 4), (0, 0)) == Rejected(rules.INVALID_CAPTURE)
        assert state.board.to_rows() == before

    def test_landing_on_second_enemy(self):
        state = make_state(
            {(4, 4): Piece(RED, king=True), (2, 2): Piece(BLACK), (1, 1): Piece(BLACK)}
        )
        assert move(state, RED, (4, 4), (1, 1)) == Rejected(rules.DESTINATION_OCCUPIED)

    def test_path_blocked_by_own_piece(self):
        state = make_state({(4, 4): Piece(RED, king=True), (2, 2): Piece(RED)})
        assert move(state, RED, (4, 4), (0, 0)) == Rejected(rules.PATH_BLOCKED)

    def test_own_piece_beyond_enemy_blocks(self):
        state = make_state(
            {(5, 5): Piece(RED, king=True), (3, 3): Piece(BLACK), (2, 2): Piece(RED)}
        )
        assert move(state, RED, (5, 5), (0, 0)) == Rejected(rules.PATH_BLOCKED)

    def test_not_a_diagonal(self):
        state = make_state({(4, 4): Piece(RED, king=True)})
        assert move(state, RED, (4, 4), (4, 0)) == Rejected(rules.INVALID_MOVE)
        assert move(state, RED, (4, 4), (1, 2)) == Rejected(rules.INVALID_MOVE)

    def test_capture_chain_detected(self):
        state = make_state(
            {(7, 0): Piece(RED, king=True), (5, 2): Piece(BLACK), (1, 2): Piece(BLACK)}
        )
        result = move(state, RED, (7, 0), (3, 4))
        assert result.captured_square == Square(5, 2)
        assert result.must_continue is True
        assert result.continue_from == Square(3, 4)


class TestHasCapture:
    def test_empty_square(self):
        assert has_capture(Board(), Square(4, 4)) is False

    def test_king_long_range(self):
        board = Board()
        board.place(Square(7, 0), Piece(RED, king=True))
        board.place(Square(4, 3), Piece(BLACK))
        assert has_capture(board, Square(7, 0)) is True

    def test_king_no_landing_square(self):
        board = Board()
        board.place(Square(7, 0), Piece(RED, king=True))
        board.place(Square(4, 3), Piece(BLACK))
        board.place(Square(3, 4), Piece(BLACK))
        assert has_capture(board, Square(7, 0)) is False

    def test_king_ray_stopped_by_own_piece(self):
        board = Board()
        board.place(Square(7, 0), Piece(RED, king=True))
        board.place(Square(5, 2), Piece(RED))
        board.place(Square(4, 3), Piece(BLACK))
        assert has_capture(board, Square(7, 0)) is False

    def test_enemy_on_board_edge(self):
        board = Board()
        board.place(Square(2, 2), Piece(RED, king=True))
        board.place(Square(0, 0), Piece(BLACK))
        assert has_capture(board, Square(2, 2)) is False

    def test_man_adjacent_enemy(self):
        board = Board()
        board.place(Square(5, 2), Piece(RED))
        board.place(Square(4, 3), Piece(BLACK))
        assert has_capture(board, Square(5, 2)) is True


class TestForcedContinuation:
    def _obligated_state(self) -> GameState:
        state = make_state(
            {(2, 3): Piece(RED), (1, 4): Piece(BLACK), (5, 0): Piece(RED), (4, 1): Piece(BLACK)}
        )
        state.must_continue = True
        state.continue_from = Square(2, 3)
        return state

    def test_other_piece_rejected(self):
        state = self._obligated_state()
        before = state.board.to_rows()
        result = move(state, RED, (5, 0), (3, 2))
        assert result == Rejected(rules.MUST_CONTINUE_WITH_SAME_PIECE)
        assert state.board.to_rows() == before

    def test_simple_move_rejected(self):
        state = self._obligated_state()
        assert move(state, RED, (2, 3), (1, 2)) == Rejected(rules.MUST_CAPTURE)

    def test_king_simple_move_rejected(self):
        state = make_state({(4, 4): Piece(RED, king=True), (6, 2): Piece(BLACK)})
        state.must_continue = True
        state.continue_from = Square(4, 4)
        assert move(state, RED, (4, 4), (2, 2)) == Rejected(rules.MUST_CAPTURE)

    def test_capture_accepted(self):
        state = self._obligated_state()
        result = move(state, RED, (2, 3), (0, 5))
        assert result.captured_square == Square(1, 4)
        assert result.promoted is True
