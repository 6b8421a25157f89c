import numpy as np
import pandas as pd
import pytest

from sudoku_solver import CancelToken, InvalidShapeError, solve
from sudoku_solver.postprocess.render_result import build_message, build_result
from sudoku_solver.types import Cancelled, Solved, Unsatisfiable

from conftest import assert_valid_solution, empty_board


def test_solve_dataframe(easy_puzzle, easy_solution):
    df = pd.DataFrame([[v if v else None for v in row] for row in easy_puzzle])
    result = solve(df)
    assert result["status"] == "solved"
    assert result["board"] == easy_solution
    assert isinstance(result["duration_ms"], int)


def test_solve_empty_board():
    result = solve(empty_board())
    assert result["status"] == "solved"
    assert_valid_solution(result["board"])


def test_solve_cancelled(easy_puzzle):
    token = CancelToken()
    token.cancel()
    result = solve(easy_puzzle, cancel_token=token)
    assert result["status"] == "cancelled"
    assert result["message"] == "Stopped"
    assert result["board"] is not None


def test_shape_errors_propagate():
    with pytest.raises(InvalidShapeError):
        solve([[1, 2, 3]])


def test_build_result_variants():
    grid = np.arange(81).reshape(9, 9) % 9 + 1
    solved = build_result(Solved(grid=grid, explored=12, duration_ms=3))
    assert solved["status"] == "solved"
    assert solved["message"] == "Done. 12 states explored."
    assert solved["board"][0][:3] == [1, 2, 3]

    givens = np.zeros(81, dtype=np.int8)
    givens[0] = 7
    unsat = build_result(Unsatisfiable(explored=0, conflicts=("r1",)), givens=givens)
    assert unsat["status"] == "unsatisfiable"
    assert unsat["board"][0][0] == 7
    assert unsat["conflicts"] == ["r1"]

    exhausted = build_result(Unsatisfiable(explored=4), givens=givens)
    assert "conflicts" not in exhausted

    cancelled = build_result(Cancelled(explored=2))
    assert cancelled["board"] is None
    assert build_message(Cancelled(explored=2)) == "Stopped"


def test_cancel_token_wait():
    token = CancelToken()
    assert token.wait(0) is False
    assert token.cancelled is False
    token.cancel()
    assert token.cancelled
    assert token.wait(0.5) is True
