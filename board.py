from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from exceptions import InvalidMove

BOARD_SIZE = 9

# Rows, then columns, then diagonals. Order decides which line is reported.
WIN_LINES: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)


class Symbol(str, Enum):
    X = "X"
    O = "O"

    @property
    def other(self) -> "Symbol":
        return Symbol.O if self is Symbol.X else Symbol.X


class OutcomeKind(str, Enum):
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


@dataclass(frozen=True)
class Outcome:
    kind: OutcomeKind
    winner: Optional[Symbol] = None
    line: Optional[Tuple[int, int, int]] = None

    @property
    def is_terminal(self) -> bool:
        return self.kind is not OutcomeKind.ONGOING


@dataclass(frozen=True)
class Board:
    cells: Tuple[Optional[Symbol], ...] = (None,) * BOARD_SIZE

    def __post_init__(self):
        if len(self.cells) != BOARD_SIZE:
            raise ValueError(f"Board needs exactly {BOARD_SIZE} cells, got {len(self.cells)}")

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    def __getitem__(self, index: int) -> Optional[Symbol]:
        return self.cells[index]

    def is_full(self) -> bool:
        return all(cell is not None for cell in self.cells)

    def to_list(self) -> List[Optional[str]]:
        return [cell.value if cell else None for cell in self.cells]


def apply_move(board: Board, index: int, symbol: Symbol) -> Board:
    """Return a new board with ``symbol`` placed at ``index``.

    Raises InvalidMove for an out-of-range index or an occupied cell.
    """
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < BOARD_SIZE:
        raise InvalidMove(f"Index {index!r} is outside the board")
    if board[index] is not None:
        raise InvalidMove(f"Cell {index} is already taken by {board[index].value}")

    cells = list(board.cells)
    cells[index] = Symbol(symbol)
    return Board(tuple(cells))


def evaluate(board: Board) -> Outcome:
    for line in WIN_LINES:
        a, b, c = line
        if board[a] is not None and board[a] == board[b] == board[c]:
            return Outcome(OutcomeKind.WIN, winner=board[a], line=line)

    if board.is_full():
        return Outcome(OutcomeKind.DRAW)

    return Outcome(OutcomeKind.ONGOING)
