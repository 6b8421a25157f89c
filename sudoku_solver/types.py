# -*- coding: utf-8 -*-
"""
数独 solver で使う主なデータ構造（型）と例外をまとめたモジュールです。

盤面と候補集合（ドメイン）は、どちらも長さ 81 の numpy 配列で持ちます。
マス (row, col) は ``row * 9 + col`` の添字で参照します。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Tuple, Union

import numpy as np

# グリッド上の座標を表す型 (row, col)、どちらも 0〜8
Cell = Tuple[int, int]


class InvalidShapeError(ValueError):
    """盤面が 9 行 x 9 列になっていないときに送出されます。"""


class InvalidCellError(ValueError):
    """マスの値が空欄でも 1〜9 の数字でもないときに送出されます。"""

    def __init__(self, cell: Cell, value: object) -> None:
        self.cell = cell
        self.value = value
        row, col = cell
        super().__init__(
            f"Only enter numbers from 1 to 9 (r{row + 1}c{col + 1}: {value!r})"
        )


class SearchCancelled(Exception):
    """探索中にキャンセルが要求されたことを表します（solve() の内部でのみ使用）。"""


@dataclass
class PuzzleModel:
    """
    初期盤面から構築した CSP のモデルです。

    Attributes
    ----------
    givens : numpy.ndarray
        長さ 81 の int8 配列。ヒント数字、空欄は 0。
    variables : tuple of int
        空欄マス（変数）の添字。行優先の順に並びます。構築後は増えません。
    domains : numpy.ndarray
        長さ 81 の uint16 配列。ビット v が立っていれば v が候補。
        ヒントのマスは 0（使わない）。
    neighbour_table : list of tuple of int
        添字ごとの「同じ行・列・ブロックにある変数」の添字。
    consistent : bool
        構築時の伝播でドメインが空になった変数があれば False（探索せずに解なし）。
    """

    givens: np.ndarray
    variables: Tuple[int, ...]
    domains: np.ndarray
    neighbour_table: List[Tuple[int, ...]]
    consistent: bool = True


@dataclass
class Solved:
    grid: np.ndarray
    explored: int
    duration_ms: int = 0

    status: ClassVar[str] = "solved"


@dataclass
class Unsatisfiable:
    """
    解が存在しないことを表す結果です。

    conflicts にはヒント同士の重複がある行・列・ブロック（"r1", "c4", "b2" など）が入ります。
    探索し尽くして解がなかった場合は空です。
    """

    explored: int
    duration_ms: int = 0
    conflicts: Tuple[str, ...] = ()

    status: ClassVar[str] = "unsatisfiable"


@dataclass
class Cancelled:
    explored: int
    duration_ms: int = 0
    last_grid: Optional[np.ndarray] = None

    status: ClassVar[str] = "cancelled"


SolveOutcome = Union[Solved, Unsatisfiable, Cancelled]
