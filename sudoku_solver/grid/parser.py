# -*- coding: utf-8 -*-
"""
盤面のセルを内部表現に正規化するモジュールです。

主な役割:
- pandas.DataFrame / numpy 配列 / 入れ子のリストを受け取る
- 9x9 になっているかを最初に確認する
- 各セルの値を 0（空欄）または 1〜9 の整数に正規化する
"""

from __future__ import annotations

import math
from typing import Any, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..config import GRID_SIZE
from ..types import InvalidCellError, InvalidShapeError

# 空欄として扱う文字列
EMPTY_TOKENS = {"", ".", "0"}


def normalize_cell(x: Any, cell=(0, 0)) -> int:
    """
    個々のセルの値を、内部表現に変換します。

    変換ルール
    ----------
    - None, NaN, "", ".", "0", 0 : 空欄 → 0
    - 1〜9 の整数、整数値の float（DataFrame に NaN が混ざると float になる）、
      数字1文字の文字列 : その数字
    - それ以外 : InvalidCellError
    """
    if x is None:
        return 0

    # bool は int のサブクラスなので先に弾く
    if isinstance(x, (bool, np.bool_)):
        raise InvalidCellError(cell, x)

    if isinstance(x, (int, np.integer)):
        v = int(x)
    elif isinstance(x, (float, np.floating)):
        if math.isnan(x):
            return 0
        if not float(x).is_integer():
            raise InvalidCellError(cell, x)
        v = int(x)
    elif isinstance(x, str):
        s = x.strip()
        if s in EMPTY_TOKENS:
            return 0
        if len(s) != 1 or not s.isdigit():
            raise InvalidCellError(cell, x)
        v = int(s)
    else:
        raise InvalidCellError(cell, x)

    if not 0 <= v <= GRID_SIZE:
        raise InvalidCellError(cell, x)
    return v


def check_shape(board: Any) -> List[Sequence[Any]]:
    """
    盤面が 9 行 x 9 列かどうかを確認し、行のリストを返します。

    他のどの処理よりも先に呼ばれます。
    """
    if isinstance(board, pd.DataFrame):
        if board.shape != (GRID_SIZE, GRID_SIZE):
            raise InvalidShapeError(
                f"Sudoku grid must be 9x9 (got {board.shape[0]}x{board.shape[1]})."
            )
        return board.values.tolist()

    if isinstance(board, (str, bytes)):
        raise InvalidShapeError("Sudoku grid must be 9x9.")

    try:
        rows = list(board)
    except TypeError:
        raise InvalidShapeError("Sudoku grid must be 9x9.") from None

    if len(rows) != GRID_SIZE:
        raise InvalidShapeError(f"Sudoku grid must be 9x9 (got {len(rows)} rows).")

    for i, row in enumerate(rows):
        if isinstance(row, (str, bytes)) or not hasattr(row, "__len__"):
            raise InvalidShapeError(f"Sudoku grid must be 9x9 (row {i + 1} is not a row).")
        if len(row) != GRID_SIZE:
            raise InvalidShapeError(
                f"Sudoku grid must be 9x9 (row {i + 1} has {len(row)} columns)."
            )

    return rows


def normalize_grid(board: Any) -> np.ndarray:
    """
    入力盤面を 9x9 の numpy 配列（int8、空欄は 0）に変換します。

    Parameters
    ----------
    board : pandas.DataFrame, numpy.ndarray or sequence of sequences
        入力の盤面データ。

    Returns
    -------
    numpy.ndarray
        shape = (9, 9) の 2次元配列。

    Raises
    ------
    InvalidShapeError
        9x9 でない場合。
    InvalidCellError
        空欄でも 1〜9 でもない値がある場合。
    """
    rows = check_shape(board)

    grid = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.int8)
    for i, row in enumerate(rows):
        for j, x in enumerate(row):
            grid[i, j] = normalize_cell(x, (i, j))

    return grid


def grid_to_board(grid: Optional[np.ndarray]) -> Optional[List[List[Optional[int]]]]:
    """
    9x9（または長さ 81）の配列を、JSON にそのまま出せる入れ子リストに戻します。
    空欄は None になります。
    """
    if grid is None:
        return None
    g = np.asarray(grid).reshape(GRID_SIZE, GRID_SIZE)
    return [[int(v) if v else None for v in row] for row in g]
