import pytest

from board import WIN_LINES, Board, OutcomeKind, Symbol, apply_move, evaluate
from exceptions import InvalidMove

X, O = Symbol.X, Symbol.O


def board_of(cells):
    return Board(tuple(Symbol(c) if c else None for c in cells))


class TestApplyMove:

    def test_places_symbol_without_touching_original(self):
        board = Board.empty()

        new_board = apply_move(board, 4, X)

        assert new_board[4] is X
        assert board[4] is None

    @pytest.mark.parametrize("index", [-1, 9, 100])
    def test_out_of_range_index(self, index):
        board = Board.empty()

        with pytest.raises(InvalidMove):
            apply_move(board, index, X)

        assert board == Board.empty()

    def test_non_integer_index(self):
        with pytest.raises(InvalidMove):
            apply_move(Board.empty(), "3", X)

    def test_occupied_cell(self):
        board = apply_move(Board.empty(), 0, X)

        with pytest.raises(InvalidMove):
            apply_move(board, 0, O)

        assert board[0] is X

    def test_board_must_have_nine_cells(self):
        with pytest.raises(ValueError):
            Board((None,) * 8)


class TestEvaluate:

    def test_empty_board_is_ongoing(self):
        outcome = evaluate(Board.empty())

        assert outcome.kind is OutcomeKind.ONGOING
        assert outcome.winner is None
        assert not outcome.is_terminal

    def test_top_row_win(self):
        board = board_of(["X", "X", "X", None, None, None, None, None, None])

        outcome = evaluate(board)

        assert outcome.kind is OutcomeKind.WIN
        assert outcome.winner is X
        assert list(outcome.line) == [0, 1, 2]

    def test_full_board_without_line_is_draw(self):
        board = board_of(["X", "O", "X", "X", "O", "O", "O", "X", "X"])

        outcome = evaluate(board)

        assert outcome.kind is OutcomeKind.DRAW
        assert outcome.winner is None
        assert outcome.line is None

    @pytest.mark.parametrize("line", WIN_LINES)
    def test_every_line_is_detected(self, line):
        cells = [None] * 9
        for index in line:
            cells[index] = "O"

        outcome = evaluate(board_of(cells))

        assert outcome.winner is O
        assert outcome.line == line

    def test_first_line_in_order_is_reported(self):
        # Row 0 and column 0 both complete
        board = board_of(["X", "X", "X", "X", "O", "O", "X", "O", "O"])

        assert evaluate(board).line == (0, 1, 2)

    def test_win_on_full_board_beats_draw(self):
        board = board_of(["X", "O", "X", "O", "X", "O", "O", "X", "X"])

        outcome = evaluate(board)

        assert outcome.kind is OutcomeKind.WIN
        assert outcome.line == (0, 4, 8)


class TestSymbol:

    def test_other(self):
        assert X.other is O
        assert O.other is X
