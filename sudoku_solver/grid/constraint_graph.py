# -*- coding: utf-8 -*-
"""
制約グラフ（どのマスとどのマスが「同じ数字禁止」でつながっているか）を扱うモジュールです。

数独の制約は「各行・各列・各 3x3 ブロックで数字がすべて異なる」だけなので、
制約オブジェクトは作らず、座標から隣接マスをその場で計算します。

- peers()      : 同じ行・列・ブロックにある他の 20 マス
- neighbours() : peers() のうち、探索対象の変数（元の盤面で空欄のマス）だけ
"""

from __future__ import annotations

from typing import Collection, Dict, List, Set, Tuple

import numpy as np

from ..config import BOX_SIZE, CELL_COUNT, GRID_SIZE
from ..types import Cell


def box_id(row: int, col: int) -> int:
    """(row, col) が属する 3x3 ブロックの番号（0〜8、行優先）を返します。"""
    return (row // BOX_SIZE) * BOX_SIZE + col // BOX_SIZE


def cell_index(row: int, col: int) -> int:
    return row * GRID_SIZE + col


def index_cell(index: int) -> Cell:
    return divmod(index, GRID_SIZE)


def peers(cell: Cell) -> Set[Cell]:
    """同じ行・列・ブロックにある、cell 以外のマスの集合を返します。"""
    row, col = cell
    ps: Set[Cell] = set()

    # 同じ行
    for j in range(GRID_SIZE):
        if j != col:
            ps.add((row, j))

    # 同じ列
    for i in range(GRID_SIZE):
        if i != row:
            ps.add((i, col))

    # 同じブロック
    r0 = row - row % BOX_SIZE
    c0 = col - col % BOX_SIZE
    for i in range(r0, r0 + BOX_SIZE):
        for j in range(c0, c0 + BOX_SIZE):
            if (i, j) != (row, col):
                ps.add((i, j))

    return ps


# 添字 → peers の添字（昇順）。import 時に1回だけ作ります。
PEER_INDEXES: List[Tuple[int, ...]] = [
    tuple(sorted(cell_index(*p) for p in peers(index_cell(i))))
    for i in range(CELL_COUNT)
]


def neighbours(cell: Cell, variables: Collection[Cell]) -> Set[Cell]:
    """
    cell と制約でつながった「変数」の集合を返します。

    ヒントのマスは値が変わらない（ドメインを絞る対象にならない）ので含めません。
    cell 自身も含みません。
    """
    variable_set = variables if isinstance(variables, (set, frozenset)) else set(variables)
    return {p for p in peers(cell) if p in variable_set}


def build_neighbour_table(variables: Collection[int]) -> List[Tuple[int, ...]]:
    """
    添字ごとの neighbours() を前計算したテーブルを返します。

    Parameters
    ----------
    variables : collection of int
        変数マスの添字。

    Returns
    -------
    list of tuple of int
        長さ 81。変数でないマスの行も PEER_INDEXES を変数で絞ったものが入ります。
    """
    variable_set = set(variables)
    return [
        tuple(p for p in PEER_INDEXES[i] if p in variable_set)
        for i in range(CELL_COUNT)
    ]


def find_duplicate_units(grid: np.ndarray) -> List[str]:
    """
    数字が重複している行・列・ブロックを "r1", "c4", "b2" のような名前（1始まり）で返します。

    空欄（0）は数えません。重複がなければ空リストです。
    """
    g = np.asarray(grid).reshape(GRID_SIZE, GRID_SIZE)
    units: Dict[str, np.ndarray] = {}

    for r in range(GRID_SIZE):
        units[f"r{r + 1}"] = g[r, :]
    for c in range(GRID_SIZE):
        units[f"c{c + 1}"] = g[:, c]
    for b in range(GRID_SIZE):
        r0 = (b // BOX_SIZE) * BOX_SIZE
        c0 = (b % BOX_SIZE) * BOX_SIZE
        units[f"b{b + 1}"] = g[r0:r0 + BOX_SIZE, c0:c0 + BOX_SIZE].ravel()

    dups: List[str] = []
    for name, values in units.items():
        counts = np.bincount(values.astype(np.int64), minlength=GRID_SIZE + 1)
        if (counts[1:] > 1).any():
            dups.append(name)

    return dups
