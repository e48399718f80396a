"""Board model: colors, pieces, cells, and geometric helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, NamedTuple

BOARD_SIZE = 8

# Diagonal unit vectors; "up" means decreasing row
UP_DIRECTIONS = [(-1, -1), (-1, 1)]
DOWN_DIRECTIONS = [(1, -1), (1, 1)]
ALL_DIRECTIONS = UP_DIRECTIONS + DOWN_DIRECTIONS


class Color(str, Enum):
    RED = "red"
    BLACK = "black"

    @property
    def opponent(self) -> Color:
        return Color.BLACK if self is Color.RED else Color.RED


class Square(NamedTuple):
    row: int
    col: int


@dataclass
class Piece:
    color: Color
    king: bool = False

    def promote(self) -> None:
        self.king = True


@dataclass(frozen=True)
class Empty:
    pass


@dataclass(frozen=True)
class Occupied:
    piece: Piece


Cell = Empty | Occupied

EMPTY = Empty()


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def directions_for(piece: Piece) -> list[tuple[int, int]]:
    """Directions a piece may move or capture in. Only kings go backward."""
    if piece.king:
        return ALL_DIRECTIONS
    if piece.color is Color.RED:
        return UP_DIRECTIONS
    return DOWN_DIRECTIONS


def promotion_row(color: Color) -> int:
    return 0 if color is Color.RED else BOARD_SIZE - 1


def should_promote(piece: Piece, row: int) -> bool:
    return not piece.king and row == promotion_row(piece.color)


class Board:
    """8x8 grid, row 0 is Black's back rank and row 7 is Red's."""

    def __init__(self, cells: list[list[Cell]] | None = None):
        self.cells: list[list[Cell]] = cells or [
            [EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]

    @classmethod
    def create(cls) -> Board:
        board = cls()
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                if (row + col) % 2 == 0:
                    continue
                if row < 3:
                    board.place(Square(row, col), Piece(Color.BLACK))
                elif row > 4:
                    board.place(Square(row, col), Piece(Color.RED))
        return board

    def piece_at(self, square: Square) -> Piece | None:
        match self.cells[square.row][square.col]:
            case Occupied(piece=piece):
                return piece
            case Empty():
                return None

    def is_empty(self, square: Square) -> bool:
        return isinstance(self.cells[square.row][square.col], Empty)

    def place(self, square: Square, piece: Piece) -> None:
        self.cells[square.row][square.col] = Occupied(piece)

    def clear(self, square: Square) -> None:
        self.cells[square.row][square.col] = EMPTY

    def pieces(self) -> Iterator[tuple[Square, Piece]]:
        for row in range(BOARD_SIZE):
            for col in range(BOARD_SIZE):
                piece = self.piece_at(Square(row, col))
                if piece is not None:
                    yield Square(row, col), piece

    def to_rows(self) -> list[list[dict | None]]:
        """JSON-friendly snapshot: None for empty cells."""
        rows: list[list[dict | None]] = []
        for row in range(BOARD_SIZE):
            out: list[dict | None] = []
            for col in range(BOARD_SIZE):
                piece = self.piece_at(Square(row, col))
                out.append(
                    None if piece is None else {"color": piece.color.value, "king": piece.king}
                )
            rows.append(out)
        return rows
