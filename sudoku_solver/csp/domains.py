# -*- coding: utf-8 -*-
"""
変数（空欄マス）ごとの初期ドメイン（候補数字の集合）を計算するモジュールです。

ドメインは uint16 のビットマスクで表します。
ビット v（1〜9）が立っていれば、数字 v が候補に残っていることを意味します。

    {1, 5, 9} -> 0b1000100010

ビット数や候補の列挙は、0〜1023 の全マスクについて起動時に前計算しておきます。
"""

from __future__ import annotations

from typing import Any, Tuple

import numpy as np

from ..config import BOX_SIZE, CELL_COUNT, DIGITS, GRID_SIZE
from ..grid.constraint_graph import build_neighbour_table
from ..grid.parser import normalize_grid
from ..logging_utils import get_logger
from ..types import PuzzleModel

logger = get_logger()

# 1〜9 がすべて候補のドメイン
FULL_DOMAIN: int = sum(1 << v for v in DIGITS)

_MASK_COUNT = 1 << (GRID_SIZE + 1)

# マスク → 候補数
_SIZES: Tuple[int, ...] = tuple(bin(m & FULL_DOMAIN).count("1") for m in range(_MASK_COUNT))

# マスク → 候補数字（昇順）
_VALUES: Tuple[Tuple[int, ...], ...] = tuple(
    tuple(v for v in DIGITS if m >> v & 1) for m in range(_MASK_COUNT)
)


def value_bit(value: int) -> int:
    return 1 << value


def domain_size(mask) -> int:
    return _SIZES[int(mask)]


def domain_values(mask) -> Tuple[int, ...]:
    """マスクに含まれる数字を昇順のタプルで返します。"""
    return _VALUES[int(mask)]


def domain_from_values(values) -> int:
    mask = 0
    for v in values:
        mask |= value_bit(v)
    return mask


def build_initial_domains(grid: np.ndarray) -> np.ndarray:
    """
    ノード整合（unary 制約）で初期ドメインを作ります。

    各空欄マスについて {1..9} から、同じ行・列・ブロックのヒント数字を取り除きます。

    Parameters
    ----------
    grid : numpy.ndarray
        9x9 の正規化済み盤面（空欄は 0）。

    Returns
    -------
    numpy.ndarray
        長さ 81 の uint16 配列。ヒントのマスは 0。
    """
    g = np.asarray(grid).reshape(GRID_SIZE, GRID_SIZE)
    domains = np.zeros(CELL_COUNT, dtype=np.uint16)

    for r in range(GRID_SIZE):
        for c in range(GRID_SIZE):
            if g[r, c]:
                continue
            r0 = r - r % BOX_SIZE
            c0 = c - c % BOX_SIZE
            used = (
                set(g[r, :].tolist())
                | set(g[:, c].tolist())
                | set(g[r0:r0 + BOX_SIZE, c0:c0 + BOX_SIZE].ravel().tolist())
            )
            domains[r * GRID_SIZE + c] = FULL_DOMAIN & ~domain_from_values(used - {0})

    return domains


def build_puzzle_model(board: Any) -> PuzzleModel:
    """
    入力盤面から PuzzleModel を構築します。

    盤面の形（9x9）の確認が最初に行われ、合わなければ InvalidShapeError になります。
    ヒント同士の矛盾はここではチェックしません（探索の直前に確認します）。

    ノード整合の時点で候補が1つに決まった変数は、その数字を AC-3 で周りの変数にも
    伝えておきます。ここでドメインが空になれば consistent=False になります。
    """
    from .propagation import ac3

    grid = normalize_grid(board)
    givens = grid.reshape(CELL_COUNT).copy()

    variables = tuple(int(i) for i in np.flatnonzero(givens == 0))
    domains = build_initial_domains(grid)
    neighbour_table = build_neighbour_table(variables)

    singletons = [i for i in variables if domain_size(domains[i]) == 1]
    arcs = [(n, s) for s in singletons for n in neighbour_table[s]]
    consistent = ac3(arcs, domains, neighbour_table)

    logger.debug(
        "Puzzle model: givens=%d, variables=%d, singletons=%d, consistent=%s",
        CELL_COUNT - len(variables), len(variables), len(singletons), consistent,
    )

    return PuzzleModel(
        givens=givens,
        variables=variables,
        domains=domains,
        neighbour_table=neighbour_table,
        consistent=consistent,
    )
